"""Chart specification models and YAML loading."""

from __future__ import annotations

from figurebook.config.loader import load_chart_specs
from figurebook.config.models import (
    ChartFamily,
    ChartSpec,
    FacetConfig,
    FigureBookConfig,
    StyleConfig,
)

__all__ = [
    "ChartFamily",
    "ChartSpec",
    "FacetConfig",
    "FigureBookConfig",
    "StyleConfig",
    "load_chart_specs",
]
