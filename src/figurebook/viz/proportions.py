"""Charts of proportions: pie, stacked bars, side-by-side bars.

Geometry comes from :mod:`figurebook.viz.geometry`; matplotlib only draws
the resulting patches. Parts are filled and separated by thin white lines.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

import matplotlib.patches as mpatches
import numpy as np

from figurebook.viz.geometry import dodge_positions, pie_wedges, stack_offsets
from figurebook.viz.layout import (
    draw_panels,
    prepare_frame,
    set_category_ticks,
)
from figurebook.viz.plot_config import shape_kwargs

if TYPE_CHECKING:
    import pandas as pd
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure
    from numpy.typing import NDArray

    from figurebook.config.models import ChartSpec
    from figurebook.viz.layout import PanelContext

logger = logging.getLogger(__name__)

PIE_RADIUS = 1.0
PIE_LABEL_RADIUS = 1.15
BAR_WIDTH = 0.7


# ---------------------------------------------------------------------------
# Pie
# ---------------------------------------------------------------------------


def plot_pie(
    data: pd.DataFrame,
    spec: ChartSpec,
    context: str = "paper",
) -> Figure:
    """Pie chart of ``y`` summed per ``x`` category.

    Parameters
    ----------
    data:
        Tidy DataFrame with the ``x`` (category) and ``y`` (value) columns.
    spec:
        Chart specification with ``family == "pie"``.
    context:
        Seaborn plotting context.

    Returns
    -------
    matplotlib Figure.
    """
    df = prepare_frame(data, spec, numeric=[spec.y])
    return draw_panels(df, spec, _draw_pie, context=context)


def _draw_pie(ax: Axes, df: pd.DataFrame, ctx: PanelContext) -> None:
    spec = ctx.spec
    totals = _sum_by(df, spec.x, spec.y, ctx.x_levels)
    wedges = pie_wedges([value for _, value in totals])
    share_total = sum(value for _, value in totals)

    for (level, value), wedge in zip(totals, wedges, strict=True):
        if wedge.sweep == 0.0:
            continue
        theta1, theta2 = wedge.degrees()
        patch = mpatches.Wedge(
            (0.0, 0.0),
            PIE_RADIUS,
            theta1,
            theta2,
            label=str(level),
            **shape_kwargs(ctx.color_for(level), spec.style),
        )
        ax.add_patch(patch)

        label = str(level)
        if spec.style.show_percent:
            label = f"{label}\n{value / share_total:.0%}"
        lx = PIE_LABEL_RADIUS * math.cos(wedge.mid_angle)
        ly = PIE_LABEL_RADIUS * math.sin(wedge.mid_angle)
        ax.text(
            lx,
            ly,
            label,
            ha="left" if lx >= 0 else "right",
            va="center",
            fontsize=9,
        )

    ax.set_xlim(-1.6, 1.6)
    ax.set_ylim(-1.3, 1.3)
    ax.set_aspect("equal")
    ax.axis("off")


# ---------------------------------------------------------------------------
# Bars
# ---------------------------------------------------------------------------


def plot_stacked_bar(
    data: pd.DataFrame,
    spec: ChartSpec,
    context: str = "paper",
) -> Figure:
    """Stacked bars: one bar per ``x``, one segment per ``fill`` level.

    Segment heights in a bar sum to the bar's total.
    """
    df = prepare_frame(data, spec, numeric=[spec.y])
    return draw_panels(df, spec, _draw_stacked_bar, context=context)


def plot_side_by_side_bar(
    data: pd.DataFrame,
    spec: ChartSpec,
    context: str = "paper",
) -> Figure:
    """Side-by-side (dodged) bars: one group per ``x``, one bar per ``fill``."""
    df = prepare_frame(data, spec, numeric=[spec.y])
    return draw_panels(df, spec, _draw_side_by_side_bar, context=context)


def _draw_stacked_bar(ax: Axes, df: pd.DataFrame, ctx: PanelContext) -> None:
    heights, series = _value_matrix(df, ctx)
    bottoms = stack_offsets(heights)
    positions = np.arange(len(ctx.x_levels), dtype=float)

    for j, level in enumerate(series):
        _bar_series(
            ax,
            positions,
            heights[:, j],
            width=BAR_WIDTH,
            bottom=bottoms[:, j],
            colors=_series_colors(ctx, level),
            ctx=ctx,
        )

    _label_bar_axes(ax, positions, ctx)


def _draw_side_by_side_bar(ax: Axes, df: pd.DataFrame, ctx: PanelContext) -> None:
    spec = ctx.spec
    heights, series = _value_matrix(df, ctx)
    centres, width = dodge_positions(len(ctx.x_levels), len(series))

    for j, level in enumerate(series):
        _bar_series(
            ax,
            centres[:, j],
            heights[:, j],
            width=width,
            bottom=None,
            colors=_series_colors(ctx, level),
            ctx=ctx,
        )

    if (heights < 0).any():
        ax.axhline(0.0, color="#333333", linewidth=0.8)
    _label_bar_axes(ax, np.arange(len(ctx.x_levels), dtype=float), ctx)
    logger.debug("Side-by-side bars for %s: %d series", spec.name, len(series))


def _bar_series(
    ax: Axes,
    positions: NDArray[np.float64],
    heights: NDArray[np.float64],
    *,
    width: float,
    bottom: NDArray[np.float64] | None,
    colors: list[str],
    ctx: PanelContext,
) -> None:
    """Draw one series, one color per bar."""
    for i, (pos, height) in enumerate(zip(positions, heights, strict=True)):
        ax.bar(
            pos,
            height,
            width=width,
            bottom=None if bottom is None else bottom[i],
            **shape_kwargs(colors[i], ctx.spec.style),
        )


def _series_colors(ctx: PanelContext, series_level: Any) -> list[str]:
    """Colors for every bar of one series.

    With a ``fill`` encoding the series level picks the color; without one
    each bar takes the color of its ``x`` category.
    """
    if ctx.fill_levels:
        return [ctx.color_for(series_level)] * len(ctx.x_levels)
    return [ctx.color_for(level) for level in ctx.x_levels]


def _label_bar_axes(
    ax: Axes,
    positions: NDArray[np.float64],
    ctx: PanelContext,
) -> None:
    spec = ctx.spec
    set_category_ticks(ax, positions, ctx.x_levels)
    ax.set_xlabel(spec.style.x_label or spec.x)
    ax.set_ylabel(spec.style.y_label or spec.y)
    ax.grid(axis="x", visible=False)


def _value_matrix(
    df: pd.DataFrame,
    ctx: PanelContext,
) -> tuple[NDArray[np.float64], list[Any]]:
    """Sum ``y`` into a ``(x_levels, series)`` matrix; absent cells are zero."""
    spec = ctx.spec
    if not ctx.fill_levels:
        totals = _sum_by(df, spec.x, spec.y, ctx.x_levels)
        matrix = np.array([[value] for _, value in totals], dtype=float)
        return matrix, [None]

    grouped = df.groupby([spec.x, spec.fill], observed=True, sort=False)[spec.y].sum()
    matrix = np.zeros((len(ctx.x_levels), len(ctx.fill_levels)), dtype=float)
    x_index = {level: i for i, level in enumerate(ctx.x_levels)}
    fill_index = {level: j for j, level in enumerate(ctx.fill_levels)}
    for (x_level, fill_level), value in grouped.items():
        matrix[x_index[x_level], fill_index[fill_level]] = float(value)
    return matrix, list(ctx.fill_levels)


def _sum_by(
    df: pd.DataFrame,
    by: str,
    value: str,
    levels: list[Any],
) -> list[tuple[Any, float]]:
    """``(level, sum)`` pairs in *levels* order; missing levels sum to zero."""
    sums = df.groupby(by, observed=True, sort=False)[value].sum()
    return [(level, float(sums.get(level, 0.0))) for level in levels]
