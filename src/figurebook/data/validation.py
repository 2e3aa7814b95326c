"""Tidy-data checks shared by every chart family.

Each helper raises :class:`~figurebook.exceptions.DataValidationError`
with the offending column names so YAML authors can fix their specs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pandas as pd

from figurebook.exceptions import DataValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def records_to_frame(rows: Sequence[dict[str, Any]]) -> pd.DataFrame:
    """Build a DataFrame from inline tidy records."""
    if not rows:
        msg = "Inline dataset has no rows"
        raise DataValidationError(msg)
    return pd.DataFrame.from_records(list(rows))


def require_columns(df: pd.DataFrame, cols: Sequence[str]) -> None:
    """Raise when any of *cols* is absent from *df*."""
    missing = [c for c in cols if c not in df.columns]
    if missing:
        msg = f"Missing required columns: {missing}. Available: {list(df.columns)}"
        raise DataValidationError(msg)


def require_numeric(df: pd.DataFrame, cols: Sequence[str]) -> None:
    """Raise when any of *cols* does not hold numbers."""
    non_numeric = [c for c in cols if not pd.api.types.is_numeric_dtype(df[c])]
    if non_numeric:
        msg = f"Columns must be numeric: {non_numeric}"
        raise DataValidationError(msg)


def drop_incomplete(df: pd.DataFrame, cols: Sequence[str]) -> pd.DataFrame:
    """Drop rows with a missing value in any of *cols*.

    Logs how many rows were removed. Raises if nothing is left.
    """
    cleaned = df.dropna(subset=list(cols))
    dropped = len(df) - len(cleaned)
    if dropped:
        logger.warning("Dropped %d incomplete rows (columns %s)", dropped, list(cols))
    if cleaned.empty:
        msg = f"No complete rows left for columns {list(cols)}"
        raise DataValidationError(msg)
    return cleaned


def category_order(series: pd.Series) -> list[Any]:
    """Return the levels of *series* in display order.

    A categorical dtype keeps its declared order (unused levels removed);
    anything else is ordered by first appearance.
    """
    if isinstance(series.dtype, pd.CategoricalDtype):
        present = set(series.dropna().unique())
        return [level for level in series.cat.categories if level in present]
    return list(pd.unique(series.dropna()))
