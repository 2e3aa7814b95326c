"""Preset-based figure dimension management.

Chart modules never hardcode a figsize; presets describe one panel and
facet grids scale them.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Presets: (width_inches, height_inches)
# ---------------------------------------------------------------------------

FIGURE_DIMENSIONS: dict[str, tuple[float, float]] = {
    "single": (6.0, 4.5),
    "square": (5.5, 5.5),
    "wide": (9.0, 4.5),
    "tall": (6.0, 8.0),
    "panel": (4.0, 3.5),
}


def get_figsize(preset: str) -> tuple[float, float]:
    """Return figure dimensions for a named preset.

    Parameters
    ----------
    preset:
        Preset name (e.g. ``"single"``, ``"wide"``, ``"square"``).

    Returns
    -------
    ``(width, height)`` in inches.

    Raises
    ------
    KeyError:
        If the preset name is not found.
    """
    return FIGURE_DIMENSIONS[preset]


def facet_figsize(preset: str, n_rows: int, n_cols: int) -> tuple[float, float]:
    """Figure size for a grid of facet panels.

    The preset describes a single panel; the grid scales it, capped at
    three panels' width so wide facet rows stay legible in print.
    """
    width, height = get_figsize(preset)
    if n_rows == 1 and n_cols == 1:
        return width, height
    panel_w = width / min(n_cols, 3) * 1.4
    panel_h = height / min(n_rows, 3) * 1.4
    return panel_w * n_cols, panel_h * n_rows
