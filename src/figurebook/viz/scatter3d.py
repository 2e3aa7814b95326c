"""3D scatter plot.

Kept for the chapter that argues against it: a 3D projection hides depth
and distorts distances. :func:`figurebook.viz.advice.review_chart` flags
every use.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from figurebook.viz.layout import draw_panels, prepare_frame
from figurebook.viz.palettes import PALETTES

if TYPE_CHECKING:
    import pandas as pd
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure

    from figurebook.config.models import ChartSpec
    from figurebook.viz.layout import PanelContext

logger = logging.getLogger(__name__)

MARKER_SIZE = 36


def plot_scatter_3d(
    data: pd.DataFrame,
    spec: ChartSpec,
    context: str = "paper",
) -> Figure:
    """3D scatter of ``x``, ``y``, ``z``, optionally colored by ``fill``.

    Parameters
    ----------
    data:
        Tidy DataFrame with three numeric columns.
    spec:
        Chart specification with ``family == "scatter_3d"``.
    context:
        Seaborn plotting context.

    Returns
    -------
    matplotlib Figure with 3D axes.
    """
    df = prepare_frame(data, spec, numeric=[spec.x, spec.y, spec.z])
    return draw_panels(df, spec, _draw_scatter_3d, context=context, projection="3d")


def _draw_scatter_3d(ax: Axes, df: pd.DataFrame, ctx: PanelContext) -> None:
    spec = ctx.spec
    style = spec.style

    if ctx.fill_levels:
        for level in ctx.fill_levels:
            subset = df[df[spec.fill] == level]
            if subset.empty:
                continue
            ax.scatter(
                subset[spec.x],
                subset[spec.y],
                subset[spec.z],
                s=MARKER_SIZE,
                label=str(level),
                **_marker_kwargs(ctx.color_for(level), style.filled, style.alpha),
            )
    else:
        ax.scatter(
            df[spec.x],
            df[spec.y],
            df[spec.z],
            s=MARKER_SIZE,
            **_marker_kwargs(PALETTES[style.palette][0], style.filled, style.alpha),
        )

    ax.set_xlabel(style.x_label or spec.x)
    ax.set_ylabel(style.y_label or spec.y)
    ax.set_zlabel(style.z_label or spec.z)
    ax.view_init(elev=style.elevation, azim=style.azimuth)


def _marker_kwargs(color: str, filled: bool, alpha: float) -> dict[str, Any]:
    if filled:
        return {
            "color": color,
            "alpha": alpha,
            "edgecolors": "white",
            "linewidths": 0.5,
        }
    return {"facecolors": "none", "edgecolors": color, "linewidths": 1.0}
