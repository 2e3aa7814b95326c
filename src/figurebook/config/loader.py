"""YAML loader for chart specifications.

A figure file holds a top-level ``figures`` list, each entry a
:class:`~figurebook.config.models.ChartSpec`, plus optional output
settings::

    output_dir: docs/figures
    context: paper
    figures:
      - name: bundestag_pie
        family: pie
        dataset: bundestag
        x: party
        y: seats
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from figurebook.config.models import FigureBookConfig
from figurebook.exceptions import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def load_chart_specs(yaml_path: Path) -> FigureBookConfig:
    """Load and validate a figure file.

    Parameters
    ----------
    yaml_path:
        Path to the YAML figure file.

    Returns
    -------
    FigureBookConfig
        Validated configuration with one spec per figure.

    Raises
    ------
    FileNotFoundError
        When *yaml_path* does not exist.
    ConfigError
        When the YAML cannot be parsed, lacks a ``figures`` list, or any
        spec fails validation.
    """
    if not yaml_path.exists():
        msg = f"Figure config not found: {yaml_path}"
        raise FileNotFoundError(msg)

    try:
        with yaml_path.open(encoding="utf-8") as fh:
            data: Any = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        msg = f"Malformed YAML in {yaml_path}: {exc}"
        raise ConfigError(msg) from exc

    if not isinstance(data, dict) or not isinstance(data.get("figures"), list):
        msg = f"Figure config at {yaml_path} must contain a top-level 'figures' list"
        raise ConfigError(msg)

    try:
        config = FigureBookConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid figure config {yaml_path}: {exc}"
        raise ConfigError(msg) from exc

    logger.info("Loaded %d chart specs from %s", len(config.figures), yaml_path)
    return config
