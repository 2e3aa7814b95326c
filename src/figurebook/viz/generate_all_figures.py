"""Master figure generation orchestrator.

Registry-based system for generating every figure in the book.
Each registered figure has a name, a chart spec, and a category.

Usage::

    python -m figurebook.viz.generate_all_figures
    python -m figurebook.viz.generate_all_figures --list
    python -m figurebook.viz.generate_all_figures --figure bundestag_pie
    python -m figurebook.viz.generate_all_figures --config configs/figures.yaml
    python -m figurebook.viz.generate_all_figures --review
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import matplotlib.pyplot as plt

from figurebook.config.loader import load_chart_specs
from figurebook.config.models import ChartSpec, FigureBookConfig
from figurebook.exceptions import FigurebookError
from figurebook.viz.advice import AdviceResult, review_chart
from figurebook.viz.render import render_to_file

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("docs/figures")

_PARTY_COLORS: dict[str, str] = {
    "CDU/CSU": "#4D4D4D",
    "SPD": "#CC3311",
    "FDP": "#CCBB44",
    "Die Linke": "#AA3377",
    "Grüne": "#228833",
}


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

FIGURE_REGISTRY: list[dict[str, Any]] = [
    {
        "name": "bundestag_pie",
        "category": "proportions",
        "spec": {
            "family": "pie",
            "dataset": "bundestag",
            "x": "party",
            "y": "seats",
            "style": {"colors": _PARTY_COLORS, "title": "Bundestag seats, 2005"},
        },
    },
    {
        "name": "bundestag_bars",
        "category": "proportions",
        "spec": {
            "family": "side_by_side_bar",
            "dataset": "bundestag",
            "x": "party",
            "y": "seats",
            "style": {"colors": _PARTY_COLORS, "y_label": "seats"},
        },
    },
    {
        "name": "market_share_stacked",
        "category": "proportions",
        "spec": {
            "family": "stacked_bar",
            "dataset": "market_share",
            "x": "year",
            "y": "share",
            "fill": "company",
            "style": {"y_label": "market share (%)"},
        },
    },
    {
        "name": "market_share_side_by_side",
        "category": "proportions",
        "spec": {
            "family": "side_by_side_bar",
            "dataset": "market_share",
            "x": "year",
            "y": "share",
            "fill": "company",
            "preset": "wide",
            "style": {"y_label": "market share (%)"},
        },
    },
    {
        "name": "market_share_faceted",
        "category": "proportions",
        "spec": {
            "family": "side_by_side_bar",
            "dataset": "market_share",
            "x": "company",
            "y": "share",
            "facet": {"column": "year", "n_cols": 3},
            "preset": "wide",
            "style": {"y_label": "market share (%)"},
        },
    },
    {
        "name": "market_share_pies",
        "category": "proportions",
        "spec": {
            "family": "pie",
            "dataset": "market_share",
            "x": "company",
            "y": "share",
            "facet": {"column": "year", "n_cols": 3},
            "preset": "wide",
        },
    },
    {
        "name": "temperature_boxplot",
        "category": "distributions",
        "spec": {
            "family": "boxplot",
            "dataset": "temperatures",
            "x": "month",
            "y": "mean_temp",
            "preset": "wide",
            "style": {"palette": "tol_muted", "y_label": "mean temperature (°F)"},
        },
    },
    {
        "name": "temperature_violin",
        "category": "distributions",
        "spec": {
            "family": "violin",
            "dataset": "temperatures",
            "x": "month",
            "y": "mean_temp",
            "preset": "wide",
            "style": {"palette": "tol_muted", "y_label": "mean temperature (°F)"},
        },
    },
    {
        "name": "temperature_sina",
        "category": "distributions",
        "spec": {
            "family": "sina",
            "dataset": "temperatures",
            "x": "month",
            "y": "mean_temp",
            "preset": "wide",
            "style": {"palette": "tol_muted", "y_label": "mean temperature (°F)"},
        },
    },
    {
        "name": "temperature_ridgeline",
        "category": "distributions",
        "spec": {
            "family": "ridgeline",
            "dataset": "temperatures",
            "x": "month",
            "y": "mean_temp",
            "preset": "tall",
            "style": {"palette": "tol_muted", "x_label": "mean temperature (°F)"},
        },
    },
    {
        "name": "mtcars_3d",
        "category": "three_d",
        "spec": {
            "family": "scatter_3d",
            "dataset": "mtcars",
            "x": "disp",
            "y": "hp",
            "z": "wt",
            "fill": "cylinders",
            "preset": "square",
            "style": {
                "x_label": "displacement (cu. in.)",
                "y_label": "power (hp)",
                "z_label": "weight (1000 lbs)",
            },
        },
    },
]


def list_figures() -> list[str]:
    """Return list of all registered figure names."""
    return [entry["name"] for entry in FIGURE_REGISTRY]


def registry_specs() -> list[ChartSpec]:
    """Build a validated :class:`ChartSpec` for every registered figure."""
    return [
        ChartSpec.model_validate({"name": entry["name"], **entry["spec"]})
        for entry in FIGURE_REGISTRY
    ]


def _find_spec(name: str, specs: list[ChartSpec]) -> ChartSpec | None:
    return next((spec for spec in specs if spec.name == name), None)


def generate_figure(
    name: str,
    output_dir: Path | None = None,
    config: FigureBookConfig | None = None,
) -> Path | None:
    """Generate a single figure by name.

    Parameters
    ----------
    name:
        Registered figure name (or a name from *config*).
    output_dir:
        Output directory. Defaults to the config's, else cwd.
    config:
        Optional user figure config searched instead of the registry.

    Returns
    -------
    Path to the saved figure, or None if not found or failed.
    """
    specs = config.figures if config is not None else registry_specs()
    spec = _find_spec(name, specs)
    if spec is None:
        logger.warning("Unknown figure name: %s", name)
        return None

    out_dir = output_dir or (config.output_dir if config is not None else None)
    context = config.context if config is not None else "paper"
    dpi = config.dpi if config is not None else 300
    try:
        return render_to_file(spec, output_dir=out_dir, dpi=dpi, context=context)
    except FigurebookError:
        logger.exception("Failed to generate figure: %s", name)
        plt.close("all")
        return None


def generate_all_figures(
    output_dir: Path | None = None,
    config: FigureBookConfig | None = None,
) -> dict[str, list[str]]:
    """Generate every figure from the registry or from *config*.

    Parameters
    ----------
    output_dir:
        Output directory for all figures.
    config:
        Optional user figure config replacing the built-in registry.

    Returns
    -------
    Summary dict with 'succeeded' and 'failed' lists of figure names.
    """
    specs = config.figures if config is not None else registry_specs()
    out_dir = output_dir or (config.output_dir if config is not None else None)
    context = config.context if config is not None else "paper"
    dpi = config.dpi if config is not None else 300

    succeeded: list[str] = []
    failed: list[str] = []

    for spec in specs:
        try:
            render_to_file(spec, output_dir=out_dir, dpi=dpi, context=context)
            succeeded.append(spec.name)
            logger.info("Generated: %s", spec.name)
        except FigurebookError:
            logger.exception("Failed: %s", spec.name)
            plt.close("all")
            failed.append(spec.name)

    logger.info(
        "Figure generation complete: %d succeeded, %d failed",
        len(succeeded),
        len(failed),
    )
    return {"succeeded": succeeded, "failed": failed}


def review_figures(config: FigureBookConfig | None = None) -> list[AdviceResult]:
    """Run the design review over every figure."""
    specs = config.figures if config is not None else registry_specs()
    return [review_chart(spec) for spec in specs]


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figurebook",
        description="Generate the book's figures from declarative chart specs",
    )
    parser.add_argument("--figure", help="Generate a specific figure by name")
    parser.add_argument(
        "--list", action="store_true", help="List all registered figures"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML figure file to render instead of the built-in registry",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help=f"Output directory (default: config's output_dir or {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--review",
        action="store_true",
        help="Print design advice for each figure instead of rendering",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Parameters
    ----------
    argv:
        CLI argument list. Defaults to ``sys.argv[1:]`` when ``None``.

    Returns
    -------
    Process exit code: 0 on success, 1 if any figure failed.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = _build_arg_parser().parse_args(argv)

    config: FigureBookConfig | None = None
    if args.config is not None:
        try:
            config = load_chart_specs(args.config)
        except (FileNotFoundError, FigurebookError) as exc:
            logger.error("%s", exc)
            return 1

    output_dir = args.output_dir
    if output_dir is None and config is None:
        output_dir = DEFAULT_OUTPUT_DIR

    if args.list:
        if config is not None:
            for spec in config.figures:
                print(f"  {spec.name:30s}  [{spec.family.value}]")
        else:
            for entry in FIGURE_REGISTRY:
                print(f"  {entry['name']:30s}  [{entry['category']}]")
        return 0

    if args.review:
        results = review_figures(config)
        for result in results:
            print(f"  {result.chart:30s}  {result.flag.value}")
            for reason in result.reasons:
                print(f"      - {reason}")
        return 0

    if args.figure:
        result = generate_figure(args.figure, output_dir=output_dir, config=config)
        if result:
            print(f"Saved: {result}")
            return 0
        print(f"Failed or unknown: {args.figure}")
        return 1

    summary = generate_all_figures(output_dir=output_dir, config=config)
    print(f"Succeeded: {len(summary['succeeded'])}, Failed: {len(summary['failed'])}")
    if summary["failed"]:
        print(f"Failed figures: {summary['failed']}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
