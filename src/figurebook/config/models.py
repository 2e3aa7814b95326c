from __future__ import annotations

import re
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from figurebook.viz.figure_dimensions import FIGURE_DIMENSIONS
from figurebook.viz.palettes import PALETTES

_NAME_PATTERN = re.compile(r"^[a-z0-9_-]+$")


class ChartFamily(StrEnum):
    """Supported chart families."""

    PIE = "pie"
    STACKED_BAR = "stacked_bar"
    SIDE_BY_SIDE_BAR = "side_by_side_bar"
    VIOLIN = "violin"
    RIDGELINE = "ridgeline"
    BOXPLOT = "boxplot"
    SINA = "sina"
    SCATTER_3D = "scatter_3d"


DISTRIBUTION_FAMILIES: frozenset[ChartFamily] = frozenset(
    {
        ChartFamily.VIOLIN,
        ChartFamily.RIDGELINE,
        ChartFamily.BOXPLOT,
        ChartFamily.SINA,
    }
)

BAR_FAMILIES: frozenset[ChartFamily] = frozenset(
    {ChartFamily.STACKED_BAR, ChartFamily.SIDE_BY_SIDE_BAR}
)

# Families that color each x group and cannot split it by a second variable
_GROUP_COLORED_FAMILIES: frozenset[ChartFamily] = frozenset(
    {ChartFamily.BOXPLOT, ChartFamily.SINA, ChartFamily.RIDGELINE}
)

# Encodings each family cannot do without
REQUIRED_ENCODINGS: dict[ChartFamily, tuple[str, ...]] = {
    ChartFamily.PIE: ("x", "y"),
    ChartFamily.STACKED_BAR: ("x", "y"),
    ChartFamily.SIDE_BY_SIDE_BAR: ("x", "y"),
    ChartFamily.VIOLIN: ("x", "y"),
    ChartFamily.RIDGELINE: ("x", "y"),
    ChartFamily.BOXPLOT: ("x", "y"),
    ChartFamily.SINA: ("x", "y"),
    ChartFamily.SCATTER_3D: ("x", "y", "z"),
}

SUPPORTED_FORMATS: frozenset[str] = frozenset({"png", "svg", "pdf", "eps", "jpg"})


class StyleConfig(BaseModel):
    """Styling options shared by all chart families."""

    palette: str = Field(default="tol_bright", description="Named color palette")
    colors: dict[str, str] = Field(
        default_factory=dict,
        description="Per-level color overrides, e.g. {'SPD': '#CC6677'}",
    )
    filled: bool = Field(default=True, description="Fill shapes instead of outlining")
    alpha: float = Field(default=0.85, ge=0.0, le=1.0)
    title: str | None = None
    x_label: str | None = None
    y_label: str | None = None
    z_label: str | None = None
    legend: bool = True
    show_percent: bool = Field(default=True, description="Percent labels on pies")
    bandwidth: float | None = Field(
        default=None, gt=0, description="KDE bandwidth factor (scipy bw_method)"
    )
    ridge_overlap: float = Field(
        default=1.5, gt=0, description="Ridge peak height in multiples of row spacing"
    )
    whisker_iqr: float = Field(
        default=1.5, gt=0, description="Whisker reach in multiples of the IQR"
    )
    sina_width: float = Field(default=0.4, gt=0, le=0.5)
    seed: int = 42
    elevation: float = 20.0
    azimuth: float = -60.0

    @field_validator("palette")
    @classmethod
    def validate_palette(cls, v: str) -> str:
        if v not in PALETTES:
            msg = f"Palette must be one of {sorted(PALETTES)}, got '{v}'"
            raise ValueError(msg)
        return v


class FacetConfig(BaseModel):
    """Small-multiples layout: one panel per level of ``column``."""

    column: str
    n_cols: int = Field(default=3, ge=1)
    share_values: bool = True


class ChartSpec(BaseModel):
    """A single declarative chart: data source, encodings and styling."""

    name: str = Field(description="Slug used for output filenames")
    family: ChartFamily
    dataset: str | None = Field(
        default=None, description="Name of a built-in dataset"
    )
    rows: list[dict[str, Any]] | None = Field(
        default=None, description="Inline tidy records"
    )
    x: str | None = None
    y: str | None = None
    z: str | None = None
    fill: str | None = None
    facet: FacetConfig | None = None
    style: StyleConfig = Field(default_factory=StyleConfig)
    preset: str = Field(default="single", description="Figure size preset")
    formats: list[str] = Field(default_factory=lambda: ["png"])

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not _NAME_PATTERN.match(v):
            msg = f"Chart name must match [a-z0-9_-]+, got '{v}'"
            raise ValueError(msg)
        return v

    @field_validator("preset")
    @classmethod
    def validate_preset(cls, v: str) -> str:
        if v not in FIGURE_DIMENSIONS:
            msg = f"Preset must be one of {sorted(FIGURE_DIMENSIONS)}, got '{v}'"
            raise ValueError(msg)
        return v

    @field_validator("formats")
    @classmethod
    def validate_formats(cls, v: list[str]) -> list[str]:
        lowered = [fmt.lower() for fmt in v]
        unknown = sorted(set(lowered) - SUPPORTED_FORMATS)
        if unknown:
            choices = sorted(SUPPORTED_FORMATS)
            msg = f"Unsupported formats {unknown}; choose from {choices}"
            raise ValueError(msg)
        if not lowered:
            msg = "At least one export format is required"
            raise ValueError(msg)
        return lowered

    @model_validator(mode="after")
    def validate_encodings(self) -> ChartSpec:
        if self.dataset is not None and self.rows is not None:
            msg = f"Chart '{self.name}': give either 'dataset' or 'rows', not both"
            raise ValueError(msg)

        missing = [
            enc for enc in REQUIRED_ENCODINGS[self.family] if getattr(self, enc) is None
        ]
        if missing:
            msg = (
                f"{self.family.value} chart '{self.name}' "
                f"requires encodings {missing}"
            )
            raise ValueError(msg)

        if self.z is not None and self.family is not ChartFamily.SCATTER_3D:
            msg = f"Encoding 'z' is only valid for scatter_3d, not {self.family.value}"
            raise ValueError(msg)
        if self.fill is not None and self.family is ChartFamily.PIE:
            msg = "Pie charts color by 'x'; 'fill' is not used"
            raise ValueError(msg)
        if (
            self.fill is not None
            and self.fill != self.x
            and self.family in _GROUP_COLORED_FAMILIES
        ):
            msg = (
                f"{self.family.value} charts color groups by 'x'; "
                "'fill' must be unset or equal to 'x'"
            )
            raise ValueError(msg)
        return self

    def columns(self) -> list[str]:
        """Return the data columns this chart reads, in encoding order."""
        cols = [c for c in (self.x, self.y, self.z, self.fill) if c is not None]
        if self.facet is not None:
            cols.append(self.facet.column)
        return list(dict.fromkeys(cols))


class FigureBookConfig(BaseModel):
    """Top-level configuration: where to write and what to draw."""

    output_dir: Path = Field(default=Path("docs/figures"))
    context: str = Field(default="paper")
    dpi: int = Field(default=300, ge=50, le=1200)
    figures: list[ChartSpec] = Field(default_factory=list)

    @field_validator("context")
    @classmethod
    def validate_context(cls, v: str) -> str:
        allowed = {"paper", "notebook", "talk", "poster"}
        if v not in allowed:
            msg = f"Context must be one of {sorted(allowed)}, got '{v}'"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_unique_names(self) -> FigureBookConfig:
        seen: set[str] = set()
        duplicates: list[str] = []
        for spec in self.figures:
            if spec.name in seen:
                duplicates.append(spec.name)
            seen.add(spec.name)
        if duplicates:
            msg = f"Duplicate chart names: {sorted(set(duplicates))}"
            raise ValueError(msg)
        return self
