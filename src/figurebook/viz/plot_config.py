"""Centralized plot styling with colorblind-safe palettes.

All chart modules take their colors from here.
No hardcoded colors or figure sizes anywhere else.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import matplotlib.pyplot as plt
import seaborn as sns

from figurebook.viz.palettes import PALETTES

if TYPE_CHECKING:
    from collections.abc import Sequence

    from figurebook.config.models import StyleConfig

NEUTRAL_COLOR = "#999999"
EDGE_COLOR = "white"
OUTLINE_COLOR = "#333333"


# ---------------------------------------------------------------------------
# Style setup
# ---------------------------------------------------------------------------


def setup_style(context: str = "paper", dpi: int = 300) -> None:
    """Apply consistent styling across all figures.

    Parameters
    ----------
    context:
        Seaborn context: ``"paper"``, ``"talk"``, ``"poster"``, ``"notebook"``.
    dpi:
        Resolution used for both display and saving.
    """
    sns.set_theme(
        context=context,
        style="whitegrid",
        font_scale=1.1,
        rc={
            "figure.dpi": dpi,
            "savefig.dpi": dpi,
            "font.family": "sans-serif",
            "axes.spines.top": False,
            "axes.spines.right": False,
        },
    )
    plt.rcParams["figure.constrained_layout.use"] = True


def resolve_colors(levels: Sequence[Any], style: StyleConfig) -> dict[Any, str]:
    """Map each category level to a color.

    Explicit overrides in ``style.colors`` win; remaining levels take the
    palette in order, cycling when there are more levels than colors.
    """
    palette = PALETTES[style.palette]
    colors: dict[Any, str] = {}
    cursor = 0
    for level in levels:
        override = style.colors.get(str(level))
        if override is not None:
            colors[level] = override
            continue
        colors[level] = palette[cursor % len(palette)]
        cursor += 1
    return colors


def shape_kwargs(color: str, style: StyleConfig) -> dict[str, Any]:
    """Face/edge keyword arguments for a filled or outlined patch."""
    if style.filled:
        return {
            "facecolor": color,
            "edgecolor": EDGE_COLOR,
            "alpha": style.alpha,
            "linewidth": 0.8,
        }
    return {"facecolor": "none", "edgecolor": color, "linewidth": 1.5}
