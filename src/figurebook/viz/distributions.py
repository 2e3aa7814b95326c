"""Distribution charts: boxplot, violin, sina, ridgeline.

``x`` names the grouping column and ``y`` the numeric observations.
Boxplot, violin and sina place groups along the horizontal axis; the
ridgeline stacks groups vertically with values running left to right.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import numpy as np
import seaborn as sns

from figurebook.viz.geometry import (
    boxplot_stats,
    kde_curve,
    sina_offsets,
    value_grid,
)
from figurebook.viz.layout import draw_panels, prepare_frame, set_category_ticks
from figurebook.viz.plot_config import OUTLINE_COLOR, shape_kwargs

if TYPE_CHECKING:
    import pandas as pd
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure
    from numpy.typing import NDArray

    from figurebook.config.models import ChartSpec
    from figurebook.viz.layout import PanelContext

logger = logging.getLogger(__name__)

BOX_WIDTH = 0.6


def _groups(
    df: pd.DataFrame,
    ctx: PanelContext,
) -> list[tuple[int, Any, NDArray[np.float64]]]:
    """``(position, level, values)`` for every non-empty group in the panel."""
    spec = ctx.spec
    out = []
    for pos, level in enumerate(ctx.x_levels):
        values = df.loc[df[spec.x] == level, spec.y].to_numpy(dtype=float)
        if values.size:
            out.append((pos, level, values))
    return out


def _label_group_axes(ax: Axes, ctx: PanelContext) -> None:
    spec = ctx.spec
    set_category_ticks(ax, range(len(ctx.x_levels)), ctx.x_levels)
    ax.set_xlim(-0.6, len(ctx.x_levels) - 0.4)
    ax.set_xlabel(spec.style.x_label or spec.x)
    ax.set_ylabel(spec.style.y_label or spec.y)
    ax.grid(axis="x", visible=False)


def _group_color(ctx: PanelContext, level: Any) -> str:
    return ctx.colors.get(level, OUTLINE_COLOR)


# ---------------------------------------------------------------------------
# Boxplot
# ---------------------------------------------------------------------------


def plot_boxplot(
    data: pd.DataFrame,
    spec: ChartSpec,
    context: str = "paper",
) -> Figure:
    """Boxplots per group with ``whisker_iqr × IQR`` whiskers.

    Statistics are computed by :func:`~figurebook.viz.geometry.boxplot_stats`
    and drawn with ``Axes.bxp``.
    """
    df = prepare_frame(data, spec, numeric=[spec.y])
    return draw_panels(df, spec, _draw_boxplot, context=context)


def _draw_boxplot(ax: Axes, df: pd.DataFrame, ctx: PanelContext) -> None:
    style = ctx.spec.style
    groups = _groups(df, ctx)
    if not groups:
        ax.text(0.5, 0.5, "No data", ha="center", va="center", transform=ax.transAxes)
        return

    box_stats = [
        boxplot_stats(values, whis=style.whisker_iqr).to_bxp(str(level))
        for _, level, values in groups
    ]
    positions = [pos for pos, _, _ in groups]
    median_color = "white" if style.filled else OUTLINE_COLOR
    bp = ax.bxp(
        box_stats,
        positions=positions,
        widths=BOX_WIDTH,
        patch_artist=True,
        showmeans=False,
        manage_ticks=False,
        medianprops={"color": median_color, "linewidth": 2},
        flierprops={"marker": "o", "markersize": 4, "markerfacecolor": OUTLINE_COLOR},
    )
    for patch, (_, level, _) in zip(bp["boxes"], groups, strict=True):
        patch.set(**shape_kwargs(_group_color(ctx, level), style))

    _label_group_axes(ax, ctx)


# ---------------------------------------------------------------------------
# Violin
# ---------------------------------------------------------------------------


def plot_violin(
    data: pd.DataFrame,
    spec: ChartSpec,
    context: str = "paper",
) -> Figure:
    """Violins per group (seaborn), quartiles marked inside."""
    df = prepare_frame(data, spec, numeric=[spec.y])
    return draw_panels(df, spec, _draw_violin, context=context)


def _draw_violin(ax: Axes, df: pd.DataFrame, ctx: PanelContext) -> None:
    spec = ctx.spec
    style = spec.style
    hue = spec.fill or spec.x
    hue_order = ctx.fill_levels if spec.fill else ctx.x_levels

    sns.violinplot(
        data=df,
        x=spec.x,
        y=spec.y,
        hue=hue,
        order=ctx.x_levels,
        hue_order=hue_order,
        palette=ctx.colors,
        fill=style.filled,
        alpha=style.alpha if style.filled else 1.0,
        inner="quart",
        cut=0,
        bw_method=style.bandwidth if style.bandwidth is not None else "scott",
        linewidth=1.0,
        legend=False,
        ax=ax,
    )
    _label_group_axes(ax, ctx)


# ---------------------------------------------------------------------------
# Sina
# ---------------------------------------------------------------------------


def plot_sina(
    data: pd.DataFrame,
    spec: ChartSpec,
    context: str = "paper",
) -> Figure:
    """Sina plot: every observation, jittered within its group's density."""
    df = prepare_frame(data, spec, numeric=[spec.y])
    return draw_panels(df, spec, _draw_sina, context=context)


def _draw_sina(ax: Axes, df: pd.DataFrame, ctx: PanelContext) -> None:
    style = ctx.spec.style
    for pos, level, values in _groups(df, ctx):
        offsets = sina_offsets(
            values,
            max_width=style.sina_width,
            seed=style.seed + pos,
            bandwidth=style.bandwidth,
        )
        color = _group_color(ctx, level)
        if style.filled:
            point_kw: dict[str, Any] = {
                "color": color,
                "alpha": style.alpha,
                "edgecolors": "none",
            }
        else:
            point_kw = {"facecolors": "none", "edgecolors": color}
        ax.scatter(pos + offsets, values, s=14, zorder=2, **point_kw)
        ax.hlines(
            float(np.median(values)),
            pos - style.sina_width,
            pos + style.sina_width,
            color=OUTLINE_COLOR,
            linewidth=2,
            zorder=3,
        )
    _label_group_axes(ax, ctx)


# ---------------------------------------------------------------------------
# Ridgeline
# ---------------------------------------------------------------------------


def plot_ridgeline(
    data: pd.DataFrame,
    spec: ChartSpec,
    context: str = "paper",
) -> Figure:
    """Ridgeline: overlapping density curves, first group on top."""
    df = prepare_frame(data, spec, numeric=[spec.y])
    return draw_panels(df, spec, _draw_ridgeline, context=context)


def _draw_ridgeline(ax: Axes, df: pd.DataFrame, ctx: PanelContext) -> None:
    spec = ctx.spec
    style = spec.style
    groups = _groups(df, ctx)
    if not groups:
        ax.text(0.5, 0.5, "No data", ha="center", va="center", transform=ax.transAxes)
        return

    grid = value_grid(df[spec.y].to_numpy(dtype=float))
    densities = [
        kde_curve(values, grid, bandwidth=style.bandwidth) for _, _, values in groups
    ]
    peak = max(float(d.max()) for d in densities)

    n_levels = len(ctx.x_levels)
    for (pos, level, _), density in zip(groups, densities, strict=True):
        baseline = float(n_levels - 1 - pos)
        ridge = baseline + density / peak * style.ridge_overlap
        color = _group_color(ctx, level)
        if style.filled:
            ax.fill_between(
                grid,
                baseline,
                ridge,
                facecolor=color,
                alpha=style.alpha,
                edgecolor="none",
                zorder=pos,
            )
            ax.plot(grid, ridge, color="white", linewidth=1.0, zorder=pos)
        else:
            ax.plot(grid, ridge, color=color, linewidth=1.5, zorder=pos)
        ax.axhline(baseline, color=OUTLINE_COLOR, linewidth=0.5, zorder=pos)

    set_category_ticks(
        ax,
        [float(n_levels - 1 - pos) for pos in range(n_levels)],
        ctx.x_levels,
        axis="y",
    )
    ax.set_xlim(float(grid[0]), float(grid[-1]))
    ax.set_ylim(-0.1, n_levels - 1 + style.ridge_overlap + 0.1)
    ax.set_xlabel(style.x_label or spec.y)
    ax.set_ylabel(style.y_label or spec.x)
    ax.grid(axis="y", visible=False)
