"""Chart geometry computed before anything is drawn.

Pie wedge angles, stacked-bar offsets, dodged bar positions, boxplot
statistics and kernel densities live here as plain numpy functions, so the
shapes the renderers draw can be checked without a figure:

- pie sweeps are proportional to value share and sum to 2π;
- stacked segments start at zero and the last top equals the row total;
- boxplot whiskers reach the most extreme point within ``whis × IQR``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy import stats

from figurebook.exceptions import DataValidationError

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

TWO_PI = 2.0 * math.pi


# ---------------------------------------------------------------------------
# Pie
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Wedge:
    """One pie slice, in radians, counterclockwise from the positive x-axis.

    ``theta1 <= theta2`` always holds; ``sweep`` is the slice's angle.
    """

    theta1: float
    theta2: float

    @property
    def sweep(self) -> float:
        return self.theta2 - self.theta1

    @property
    def mid_angle(self) -> float:
        return (self.theta1 + self.theta2) / 2.0

    def degrees(self) -> tuple[float, float]:
        """Return ``(theta1, theta2)`` in degrees for ``matplotlib.patches.Wedge``."""
        return math.degrees(self.theta1), math.degrees(self.theta2)


def pie_wedges(
    values: ArrayLike,
    start_angle: float = math.pi / 2,
    *,
    clockwise: bool = True,
) -> list[Wedge]:
    """Split the full circle into one wedge per value.

    Parameters
    ----------
    values:
        Non-negative slice values.
    start_angle:
        Angle (radians) where the first slice begins. Default: 12 o'clock.
    clockwise:
        Lay slices out clockwise (the reading direction of most pies).

    Raises
    ------
    DataValidationError
        For negative or non-finite values, or when all values are zero.
    """
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1 or arr.size == 0:
        msg = "Pie values must be a non-empty 1-D sequence"
        raise DataValidationError(msg)
    if not np.all(np.isfinite(arr)):
        msg = "Pie values must be finite"
        raise DataValidationError(msg)
    if np.any(arr < 0):
        msg = f"Pie values must be non-negative, got {arr[arr < 0].tolist()}"
        raise DataValidationError(msg)
    total = float(arr.sum())
    if total <= 0.0:
        msg = "Pie values sum to zero; nothing to draw"
        raise DataValidationError(msg)

    cumulative = np.concatenate([[0.0], np.cumsum(arr) / total * TWO_PI])
    cumulative[-1] = TWO_PI

    wedges: list[Wedge] = []
    for lo, hi in zip(cumulative[:-1], cumulative[1:], strict=True):
        if clockwise:
            wedges.append(Wedge(start_angle - hi, start_angle - lo))
        else:
            wedges.append(Wedge(start_angle + lo, start_angle + hi))
    return wedges


# ---------------------------------------------------------------------------
# Bars
# ---------------------------------------------------------------------------


def stack_offsets(heights: ArrayLike) -> NDArray[np.float64]:
    """Return the bottom of every segment in a stacked bar chart.

    Parameters
    ----------
    heights:
        Matrix of shape ``(n_categories, n_series)``.

    Returns
    -------
    Array of the same shape. Column 0 is zero; column ``j`` is the running
    sum of columns ``0..j-1``, so ``bottoms + heights`` tops out at the
    row total.
    """
    arr = np.asarray(heights, dtype=float)
    if arr.ndim != 2:  # noqa: PLR2004
        msg = f"Stack heights must be 2-D (categories x series), got ndim={arr.ndim}"
        raise DataValidationError(msg)
    if np.any(arr < 0):
        msg = "Stacked bars cannot show negative values"
        raise DataValidationError(msg)
    bottoms = np.zeros_like(arr)
    if arr.shape[1] > 1:
        bottoms[:, 1:] = np.cumsum(arr, axis=1)[:, :-1]
    return bottoms


def dodge_positions(
    n_categories: int,
    n_series: int,
    total_width: float = 0.8,
) -> tuple[NDArray[np.float64], float]:
    """Centres and width for side-by-side bars.

    Category ``i`` occupies ``[i - total_width/2, i + total_width/2]``;
    its ``n_series`` bars tile that slot without overlapping.

    Returns
    -------
    ``(centres, width)`` where ``centres`` has shape
    ``(n_categories, n_series)``.
    """
    if n_categories < 1 or n_series < 1:
        msg = f"Need at least one category and series, got {n_categories}x{n_series}"
        raise ValueError(msg)
    if not 0.0 < total_width <= 1.0:
        msg = f"total_width must be in (0, 1], got {total_width}"
        raise ValueError(msg)
    width = total_width / n_series
    offsets = -total_width / 2.0 + width * (np.arange(n_series) + 0.5)
    centres = np.arange(n_categories, dtype=float)[:, None] + offsets[None, :]
    return centres, width


# ---------------------------------------------------------------------------
# Boxplot
# ---------------------------------------------------------------------------


@dataclass
class BoxStats:
    """Five-number summary plus outliers for one group."""

    q1: float
    median: float
    q3: float
    whislo: float
    whishi: float
    mean: float
    n: int
    fliers: list[float] = field(default_factory=list)

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def to_bxp(self, label: str | None = None) -> dict[str, Any]:
        """Return the dict layout ``Axes.bxp`` expects."""
        return {
            "label": label,
            "med": self.median,
            "q1": self.q1,
            "q3": self.q3,
            "whislo": self.whislo,
            "whishi": self.whishi,
            "mean": self.mean,
            "fliers": np.asarray(self.fliers, dtype=float),
        }


def boxplot_stats(values: ArrayLike, whis: float = 1.5) -> BoxStats:
    """Compute boxplot statistics with the ``whis × IQR`` whisker rule.

    Quartiles use linear interpolation. A whisker reaches the most extreme
    observation inside its fence; when no observation lies between the fence
    and the box, the whisker collapses onto the box edge.
    """
    arr = np.asarray(values, dtype=float).ravel()
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        msg = "Cannot summarise an empty group"
        raise DataValidationError(msg)
    if whis <= 0:
        msg = f"whis must be positive, got {whis}"
        raise ValueError(msg)

    q1, median, q3 = (float(v) for v in np.percentile(arr, [25, 50, 75]))
    iqr = q3 - q1
    lo_fence = q1 - whis * iqr
    hi_fence = q3 + whis * iqr

    inside_lo = arr[arr >= lo_fence]
    whislo = float(inside_lo.min()) if inside_lo.size else q1
    whislo = min(whislo, q1)

    inside_hi = arr[arr <= hi_fence]
    whishi = float(inside_hi.max()) if inside_hi.size else q3
    whishi = max(whishi, q3)

    fliers = arr[(arr < whislo) | (arr > whishi)]
    return BoxStats(
        q1=q1,
        median=median,
        q3=q3,
        whislo=whislo,
        whishi=whishi,
        mean=float(arr.mean()),
        n=int(arr.size),
        fliers=sorted(float(v) for v in fliers),
    )


# ---------------------------------------------------------------------------
# Densities
# ---------------------------------------------------------------------------


def value_grid(
    values: ArrayLike,
    n_points: int = 200,
    padding: float = 0.1,
) -> NDArray[np.float64]:
    """Evenly spaced evaluation grid covering *values* plus some padding.

    The padding is *padding* times the sample's span, or 1.0 on each side
    of a constant sample.
    """
    arr = np.asarray(values, dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        msg = "Cannot build a grid for an empty sample"
        raise DataValidationError(msg)
    lo, hi = float(arr.min()), float(arr.max())
    span = hi - lo
    pad = span * padding if span > 0 else 1.0
    return np.linspace(lo - pad, hi + pad, n_points)


def kde_curve(
    values: ArrayLike,
    grid: ArrayLike,
    bandwidth: float | None = None,
) -> NDArray[np.float64]:
    """Gaussian kernel density of *values* evaluated at *grid*.

    A sample with fewer than two distinct values has no spread to estimate,
    so it is drawn as a narrow normal spike at its value.
    """
    arr = np.asarray(values, dtype=float)
    arr = arr[np.isfinite(arr)]
    points = np.asarray(grid, dtype=float)
    if arr.size == 0:
        msg = "Cannot estimate a density from an empty sample"
        raise DataValidationError(msg)

    if np.unique(arr).size < 2:  # noqa: PLR2004
        span = float(points.max() - points.min()) if points.size else 0.0
        sigma = span / 100.0 if span > 0 else 1e-3
        return stats.norm.pdf(points, loc=float(arr[0]), scale=sigma)

    kde = stats.gaussian_kde(arr, bw_method=bandwidth)
    return kde(points)


def sina_offsets(
    values: ArrayLike,
    max_width: float = 0.4,
    seed: int = 42,
    bandwidth: float | None = None,
) -> NDArray[np.float64]:
    """Horizontal jitter for a sina plot.

    Each point is spread uniformly within ``±max_width`` scaled by the
    sample's density at that point, so the cloud traces the violin outline.
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return np.zeros(0)
    density = kde_curve(arr, arr, bandwidth=bandwidth)
    peak = float(density.max())
    scale = density / peak * max_width if peak > 0 else np.full(arr.size, max_width)
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, arr.size) * scale
