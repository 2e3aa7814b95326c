"""Design review for chart specs.

Heuristic checks taken from the book's chapters on proportions,
distributions and 3D: too many pie slices, near-equal parts shown as
angles or stacked segments, stacks without a common baseline, 3D
projections, and outlined rather than filled shapes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from figurebook.config.models import DISTRIBUTION_FAMILIES, ChartFamily
from figurebook.exceptions import FigurebookError

if TYPE_CHECKING:
    from figurebook.config.models import ChartSpec

logger = logging.getLogger(__name__)


class AdviceFlag(StrEnum):
    """Outcome of a design review."""

    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"


@dataclass
class AdviceResult:
    """Result of reviewing one chart.

    Parameters
    ----------
    chart:
        Chart name.
    flag:
        Overall flag: no reasons pass, one warns, two or more fail.
    reasons:
        Human-readable findings, each with a suggested alternative.
    """

    chart: str
    flag: AdviceFlag
    reasons: list[str] = field(default_factory=list)


def relative_spread(values: np.ndarray) -> float:
    """``(max - min) / max`` of positive *values*; 0 means all equal."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    top = float(arr.max())
    if top <= 0:
        return 0.0
    return (top - float(arr.min())) / top


def _is_near_equal(values: np.ndarray, tolerance: float) -> bool:
    return values.size >= 3 and relative_spread(values) <= tolerance  # noqa: PLR2004


def review_chart(
    spec: ChartSpec,
    data: pd.DataFrame | None = None,
    *,
    max_pie_slices: int = 6,
    near_equal_tolerance: float = 0.2,
) -> AdviceResult:
    """Review *spec* against the book's design heuristics.

    Parameters
    ----------
    spec:
        Chart specification.
    data:
        Optional DataFrame; when omitted the spec's own source is used.
        Data-dependent checks are skipped if no data can be resolved.
    max_pie_slices:
        Pies with more slices than this are flagged.
    near_equal_tolerance:
        Parts whose relative spread is at most this count as near-equal.
    """
    reasons: list[str] = []
    df = _try_resolve(spec, data)

    if spec.family is ChartFamily.PIE and df is not None:
        shares = _part_totals(df, spec.x, spec.y)
        if shares.size > max_pie_slices:
            reasons.append(
                f"Pie has {shares.size} slices (max {max_pie_slices}); "
                "use a bar chart for many categories"
            )
        if _is_near_equal(shares, near_equal_tolerance):
            reasons.append(
                "Pie slices are near-equal and angles are hard to compare; "
                "use side-by-side bars"
            )

    if spec.family is ChartFamily.STACKED_BAR and spec.fill != spec.x:
        if spec.fill is not None and df is not None and spec.fill in df.columns:
            n_series = df[spec.fill].nunique()
            if n_series > 2:  # noqa: PLR2004
                reasons.append(
                    f"Stacked bars with {n_series} series: inner segments lack a "
                    "common baseline; use side-by-side bars or facets"
                )
            if _stack_parts_near_equal(df, spec, near_equal_tolerance):
                reasons.append(
                    "Stacked segments are near-equal; use side-by-side bars to "
                    "compare them"
                )

    if spec.family is ChartFamily.SCATTER_3D:
        reasons.append(
            "3D scatter hides depth and distorts distances; plot two variables "
            "and map the third to color or point size"
        )

    if spec.family in DISTRIBUTION_FAMILIES and not spec.style.filled:
        reasons.append(
            "Outlined shapes are harder to see than filled ones; set "
            "style.filled: true"
        )

    if len(reasons) >= 2:  # noqa: PLR2004
        flag = AdviceFlag.FAIL
    elif len(reasons) == 1:
        flag = AdviceFlag.WARNING
    else:
        flag = AdviceFlag.PASS

    logger.debug("Reviewed %s: %s (%d findings)", spec.name, flag, len(reasons))
    return AdviceResult(chart=spec.name, flag=flag, reasons=reasons)


def _try_resolve(spec: ChartSpec, data: pd.DataFrame | None) -> pd.DataFrame | None:
    from figurebook.viz.render import resolve_data

    try:
        return resolve_data(spec, data)
    except FigurebookError as exc:
        logger.info("Skipping data checks for %s: %s", spec.name, exc)
        return None


def _part_totals(df: pd.DataFrame, by: str | None, value: str | None) -> np.ndarray:
    if by is None or value is None or by not in df.columns or value not in df.columns:
        return np.zeros(0)
    if not pd.api.types.is_numeric_dtype(df[value]):
        return np.zeros(0)
    totals = df.groupby(by, observed=True, sort=False)[value].sum()
    return totals[totals > 0].to_numpy(dtype=float)


def _stack_parts_near_equal(
    df: pd.DataFrame,
    spec: ChartSpec,
    tolerance: float,
) -> bool:
    """True when any single bar's segments are near-equal."""
    if spec.x not in df.columns or spec.y not in df.columns:
        return False
    for _, bar in df.groupby(spec.x, observed=True, sort=False):
        if _is_near_equal(_part_totals(bar, spec.fill, spec.y), tolerance):
            return True
    return False
