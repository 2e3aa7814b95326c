"""Panel layout shared by every chart family.

A chart is one or more panels: a single panel, or one per facet level.
``draw_panels`` owns the figure, the facet grid, consistent colors across
panels and the legend; each family only supplies a function that draws
one panel into one Axes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import matplotlib.pyplot as plt
from matplotlib.patches import Patch

from figurebook.config.models import ChartFamily
from figurebook.data.validation import (
    category_order,
    drop_incomplete,
    require_columns,
    require_numeric,
)
from figurebook.viz.figure_dimensions import facet_figsize
from figurebook.viz.plot_config import resolve_colors, setup_style

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    import pandas as pd
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure

    from figurebook.config.models import ChartSpec

logger = logging.getLogger(__name__)

# Axis that carries the measured value, for sharing limits across facets
VALUE_AXIS: dict[ChartFamily, str] = {
    ChartFamily.STACKED_BAR: "y",
    ChartFamily.SIDE_BY_SIDE_BAR: "y",
    ChartFamily.VIOLIN: "y",
    ChartFamily.BOXPLOT: "y",
    ChartFamily.SINA: "y",
    ChartFamily.RIDGELINE: "x",
}

# Above either limit, x tick labels are rotated
MAX_FLAT_LABELS = 6
MAX_FLAT_LABEL_CHARS = 8


@dataclass
class PanelContext:
    """Everything a panel drawer needs besides its slice of the data.

    Level orders and colors come from the full dataset, so every facet
    panel lays out and colors categories identically.
    """

    spec: ChartSpec
    x_levels: list[Any] = field(default_factory=list)
    fill_levels: list[Any] = field(default_factory=list)
    colors: dict[Any, str] = field(default_factory=dict)

    def color_for(self, level: Any) -> str:
        return self.colors[level]


def prepare_frame(
    df: pd.DataFrame,
    spec: ChartSpec,
    numeric: Sequence[str],
) -> pd.DataFrame:
    """Validate the columns a chart reads and drop incomplete rows."""
    cols = spec.columns()
    require_columns(df, cols)
    require_numeric(df, numeric)
    return drop_incomplete(df, cols)


def build_context(df: pd.DataFrame, spec: ChartSpec) -> PanelContext:
    """Derive level orders and the color mapping for *spec* from *df*."""
    x_levels: list[Any] = []
    if spec.x is not None and spec.family is not ChartFamily.SCATTER_3D:
        x_levels = category_order(df[spec.x])
    fill_levels = category_order(df[spec.fill]) if spec.fill is not None else []
    color_levels = fill_levels if fill_levels else x_levels
    return PanelContext(
        spec=spec,
        x_levels=x_levels,
        fill_levels=fill_levels,
        colors=resolve_colors(color_levels, spec.style),
    )


def panel_frames(
    df: pd.DataFrame,
    spec: ChartSpec,
) -> list[tuple[str | None, pd.DataFrame]]:
    """Split *df* into ``(panel_title, frame)`` pairs, one per facet level."""
    if spec.facet is None:
        return [(None, df)]
    column = spec.facet.column
    return [
        (f"{column} = {level}", df[df[column] == level])
        for level in category_order(df[column])
    ]


def draw_panels(
    df: pd.DataFrame,
    spec: ChartSpec,
    drawer: Callable[[Axes, pd.DataFrame, PanelContext], None],
    *,
    context: str = "paper",
    projection: str | None = None,
) -> Figure:
    """Create the figure for *spec* and call *drawer* once per panel.

    Parameters
    ----------
    df:
        Validated tidy data (see :func:`prepare_frame`).
    spec:
        Chart specification.
    drawer:
        Draws one panel into one Axes.
    context:
        Seaborn plotting context.
    projection:
        Matplotlib projection for every panel (``"3d"`` for 3D scatter).

    Returns
    -------
    matplotlib Figure.
    """
    setup_style(context)
    ctx = build_context(df, spec)
    panels = panel_frames(df, spec)

    n_panels = len(panels)
    n_cols = min(spec.facet.n_cols, n_panels) if spec.facet is not None else 1
    n_rows = math.ceil(n_panels / n_cols)

    subplot_kw = {"projection": projection} if projection else None
    fig, axes = plt.subplots(
        n_rows,
        n_cols,
        figsize=facet_figsize(spec.preset, n_rows, n_cols),
        squeeze=False,
        subplot_kw=subplot_kw,
    )
    axes_flat = axes.flatten()

    for idx, (panel_title, panel_df) in enumerate(panels):
        ax = axes_flat[idx]
        drawer(ax, panel_df, ctx)
        if panel_title is not None:
            ax.set_title(panel_title)

    # Hide unused axes
    for idx in range(n_panels, len(axes_flat)):
        axes_flat[idx].set_visible(False)

    visible = list(axes_flat[:n_panels])
    if spec.facet is not None and spec.facet.share_values:
        _share_value_limits(visible, VALUE_AXIS.get(spec.family))

    _apply_title(fig, visible, spec)
    _apply_legend(fig, ctx)
    logger.debug("Drew %s chart %s with %d panel(s)", spec.family, spec.name, n_panels)
    return fig


def _share_value_limits(axes: list[Axes], axis: str | None) -> None:
    """Give every panel the union of the value-axis limits."""
    if axis is None or len(axes) < 2:  # noqa: PLR2004
        return
    getter = "get_ylim" if axis == "y" else "get_xlim"
    setter = "set_ylim" if axis == "y" else "set_xlim"
    limits = [getattr(ax, getter)() for ax in axes]
    lo = min(lim[0] for lim in limits)
    hi = max(lim[1] for lim in limits)
    for ax in axes:
        getattr(ax, setter)(lo, hi)


def _apply_title(fig: Figure, axes: list[Axes], spec: ChartSpec) -> None:
    title = spec.style.title
    if title is None:
        return
    if len(axes) == 1:
        axes[0].set_title(title, fontweight="bold")
    else:
        fig.suptitle(title, fontweight="bold")


def _apply_legend(fig: Figure, ctx: PanelContext) -> None:
    """One figure-level legend for the ``fill`` encoding, if any."""
    spec = ctx.spec
    if not spec.style.legend or not ctx.fill_levels:
        return
    if spec.fill == spec.x:
        return
    handles = [
        Patch(facecolor=ctx.color_for(level), edgecolor="none", label=str(level))
        for level in ctx.fill_levels
    ]
    fig.legend(
        handles=handles,
        title=spec.fill,
        loc="outside right upper",
        frameon=False,
    )


def set_category_ticks(
    ax: Axes,
    positions: Sequence[float],
    levels: Sequence[Any],
    axis: str = "x",
) -> None:
    """Label category positions, rotating long or crowded labels."""
    labels = [str(level) for level in levels]
    if axis == "y":
        ax.set_yticks(list(positions), labels=labels)
        return
    crowded = len(labels) > MAX_FLAT_LABELS or any(
        len(label) > MAX_FLAT_LABEL_CHARS for label in labels
    )
    ax.set_xticks(list(positions), labels=labels)
    if crowded:
        ax.tick_params(axis="x", labelrotation=30)
        for label in ax.get_xticklabels():
            label.set_horizontalalignment("right")
