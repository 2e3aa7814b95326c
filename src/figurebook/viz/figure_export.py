"""Multi-format figure export with optional JSON data.

Exports PNG/JPG (raster at the requested DPI), SVG/PDF/EPS (vector) with an
optional reproducibility JSON alongside each figure.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from figurebook.config.models import SUPPORTED_FORMATS
from figurebook.exceptions import ExportError

if TYPE_CHECKING:
    from matplotlib.figure import Figure

logger = logging.getLogger(__name__)

DEFAULT_FORMATS = ("png",)


def save_figure(
    fig: Figure,
    name: str,
    output_dir: Path | None = None,
    formats: list[str] | None = None,
    data: dict[str, Any] | None = None,
    dpi: int = 300,
) -> Path | None:
    """Save figure in multiple formats with optional data export.

    Parameters
    ----------
    fig:
        Matplotlib figure to save.
    name:
        Base filename (without extension).
    output_dir:
        Output directory. Defaults to current working directory.
    formats:
        List of formats (``"png"``, ``"svg"``, ``"pdf"``, ``"eps"``, ``"jpg"``).
        Defaults to ``["png"]``.
    data:
        Optional reproducibility data to save as JSON alongside the figure.
    dpi:
        Raster resolution.

    Returns
    -------
    Path to the first saved file, or ``None`` if nothing was saved.

    Raises
    ------
    ExportError
        For an unsupported format or when writing fails.
    """
    if output_dir is None:
        output_dir = Path.cwd()

    fmt_list = [fmt.lower() for fmt in formats] if formats else list(DEFAULT_FORMATS)
    unsupported = sorted(set(fmt_list) - SUPPORTED_FORMATS)
    if unsupported:
        msg = f"Unsupported export formats {unsupported} for figure {name!r}"
        raise ExportError(msg)

    output_dir.mkdir(parents=True, exist_ok=True)
    first_path: Path | None = None

    for fmt in fmt_list:
        out_path = output_dir / f"{name}.{fmt}"
        try:
            fig.savefig(str(out_path), format=fmt, dpi=dpi, bbox_inches="tight")
        except (OSError, ValueError) as exc:
            msg = f"Failed to write {out_path}: {exc}"
            raise ExportError(msg) from exc
        logger.info("Saved figure: %s", out_path)
        if first_path is None:
            first_path = out_path

    if data is not None:
        json_path = output_dir / f"{name}.json"
        json_path.write_text(
            json.dumps(data, indent=2, default=str),
            encoding="utf-8",
        )
        logger.info("Saved figure data: %s", json_path)

    return first_path
