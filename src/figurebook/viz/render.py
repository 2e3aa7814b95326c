"""Render a :class:`~figurebook.config.models.ChartSpec` to a figure or file.

``render_chart`` is the single entry point: it resolves the data source,
dispatches on the chart family and turns plotting failures into
:class:`~figurebook.exceptions.RenderError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import matplotlib.pyplot as plt
import numpy as np

from figurebook.config.models import ChartFamily
from figurebook.data.datasets import load_dataset
from figurebook.data.validation import records_to_frame
from figurebook.exceptions import ConfigError, FigurebookError, RenderError
from figurebook.viz.distributions import (
    plot_boxplot,
    plot_ridgeline,
    plot_sina,
    plot_violin,
)
from figurebook.viz.figure_export import save_figure
from figurebook.viz.proportions import (
    plot_pie,
    plot_side_by_side_bar,
    plot_stacked_bar,
)
from figurebook.viz.scatter3d import plot_scatter_3d

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    import pandas as pd
    from matplotlib.figure import Figure

    from figurebook.config.models import ChartSpec

logger = logging.getLogger(__name__)

PLOTTERS: dict[ChartFamily, Callable[..., Figure]] = {
    ChartFamily.PIE: plot_pie,
    ChartFamily.STACKED_BAR: plot_stacked_bar,
    ChartFamily.SIDE_BY_SIDE_BAR: plot_side_by_side_bar,
    ChartFamily.VIOLIN: plot_violin,
    ChartFamily.RIDGELINE: plot_ridgeline,
    ChartFamily.BOXPLOT: plot_boxplot,
    ChartFamily.SINA: plot_sina,
    ChartFamily.SCATTER_3D: plot_scatter_3d,
}


def resolve_data(spec: ChartSpec, data: pd.DataFrame | None = None) -> pd.DataFrame:
    """Pick the chart's data: explicit frame, then inline rows, then a dataset.

    Raises
    ------
    ConfigError
        When no source is available or the named dataset does not exist.
    """
    if data is not None:
        return data
    if spec.rows is not None:
        return records_to_frame(spec.rows)
    if spec.dataset is not None:
        try:
            return load_dataset(spec.dataset)
        except KeyError as exc:
            msg = f"Chart {spec.name!r}: {exc.args[0]}"
            raise ConfigError(msg) from exc
    msg = f"Chart {spec.name!r} has no data: pass a DataFrame, 'rows' or 'dataset'"
    raise ConfigError(msg)


def render_chart(
    spec: ChartSpec,
    data: pd.DataFrame | None = None,
    context: str = "paper",
) -> Figure:
    """Draw *spec* and return the open figure.

    Parameters
    ----------
    spec:
        Chart specification.
    data:
        Optional tidy DataFrame overriding the spec's own data source.
    context:
        Seaborn plotting context.

    Returns
    -------
    matplotlib Figure. The caller owns it and should close it.

    Raises
    ------
    ConfigError, DataValidationError
        For unusable specs or data.
    RenderError
        When matplotlib or seaborn fails while drawing.
    """
    df = resolve_data(spec, data)
    plotter = PLOTTERS[spec.family]
    open_before = set(plt.get_fignums())
    try:
        return plotter(df, spec, context=context)
    except FigurebookError:
        _close_new_figures(open_before)
        raise
    except (ValueError, TypeError, KeyError, np.linalg.LinAlgError) as exc:
        _close_new_figures(open_before)
        msg = f"Failed to render {spec.family.value} chart {spec.name!r}: {exc}"
        raise RenderError(msg) from exc


def _close_new_figures(open_before: set[int]) -> None:
    """Close figures opened since *open_before*; the caller's stay open."""
    for num in set(plt.get_fignums()) - open_before:
        plt.close(num)


def render_to_file(
    spec: ChartSpec,
    output_dir: Path | None = None,
    data: pd.DataFrame | None = None,
    dpi: int = 300,
    context: str = "paper",
) -> Path | None:
    """Render *spec*, save it in every requested format and close the figure.

    A JSON sidecar records the spec and row count for reproducibility.

    Returns
    -------
    Path to the first saved file.
    """
    df = resolve_data(spec, data)
    fig = render_chart(spec, df, context=context)
    sidecar: dict[str, Any] = {
        "spec": spec.model_dump(mode="json", exclude={"rows"}),
        "n_rows": len(df),
    }
    try:
        return save_figure(
            fig,
            spec.name,
            output_dir=output_dir,
            formats=spec.formats,
            data=sidecar,
            dpi=dpi,
        )
    finally:
        plt.close(fig)
