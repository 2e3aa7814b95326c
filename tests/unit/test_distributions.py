"""Tests for boxplot, violin, sina and ridgeline charts."""

from __future__ import annotations

from typing import Any

import pytest
from matplotlib.collections import PathCollection, PolyCollection

from figurebook.config.models import ChartSpec
from figurebook.data import load_dataset
from figurebook.data.datasets import MONTHS
from figurebook.data.validation import records_to_frame
from figurebook.exceptions import DataValidationError
from figurebook.viz.distributions import (
    plot_boxplot,
    plot_ridgeline,
    plot_sina,
    plot_violin,
)


def _spec(family: str, **kwargs: Any) -> ChartSpec:
    base = {
        "name": "temps",
        "family": family,
        "dataset": "temperatures",
        "x": "month",
        "y": "mean_temp",
    }
    base.update(kwargs)
    return ChartSpec.model_validate(base)


def _xtick_labels(ax: Any) -> list[str]:
    return [t.get_text() for t in ax.get_xticklabels()]


@pytest.fixture
def temps() -> Any:
    return load_dataset("temperatures")


class TestPlotBoxplot:
    def test_one_box_per_month(self, temps: Any) -> None:
        fig = plot_boxplot(temps, _spec("boxplot"))
        ax = fig.axes[0]
        assert _xtick_labels(ax) == MONTHS
        assert ax.get_ylabel() == "mean_temp"

    def test_custom_labels(self, temps: Any) -> None:
        spec = _spec("boxplot", style={"x_label": "Month", "y_label": "°F"})
        ax = plot_boxplot(temps, spec).axes[0]
        assert ax.get_xlabel() == "Month"
        assert ax.get_ylabel() == "°F"

    def test_outlined_boxes(self, temps: Any) -> None:
        fig = plot_boxplot(temps, _spec("boxplot", style={"filled": False}))
        assert fig.axes[0].get_xticklabels()

    def test_non_numeric_values_rejected(self, temps: Any) -> None:
        spec = _spec("boxplot", y="date", x="month")
        temps["date"] = temps["date"].astype(str)
        with pytest.raises(DataValidationError, match="numeric"):
            plot_boxplot(temps, spec)


class TestPlotViolin:
    def test_violins_drawn(self, temps: Any) -> None:
        ax = plot_violin(temps, _spec("violin")).axes[0]
        assert _xtick_labels(ax) == MONTHS
        assert any(isinstance(c, PolyCollection) for c in ax.collections)

    def test_outlined_violins(self, temps: Any) -> None:
        ax = plot_violin(temps, _spec("violin", style={"filled": False})).axes[0]
        assert ax.collections or ax.lines

    def test_no_axes_legend(self, temps: Any) -> None:
        ax = plot_violin(temps, _spec("violin")).axes[0]
        assert ax.get_legend() is None


class TestPlotSina:
    def test_one_point_cloud_per_month(self, temps: Any) -> None:
        ax = plot_sina(temps, _spec("sina")).axes[0]
        clouds = [c for c in ax.collections if isinstance(c, PathCollection)]
        assert len(clouds) == 12
        assert len(clouds[0].get_offsets()) == 31
        assert len(clouds[1].get_offsets()) == 29

    def test_points_stay_in_slot(self, temps: Any) -> None:
        spec = _spec("sina", style={"sina_width": 0.3})
        ax = plot_sina(temps, spec).axes[0]
        clouds = [c for c in ax.collections if isinstance(c, PathCollection)]
        for pos, cloud in enumerate(clouds):
            xs = cloud.get_offsets()[:, 0]
            assert (abs(xs - pos) <= 0.3 + 1e-9).all()

    def test_same_seed_same_layout(self, temps: Any) -> None:
        first = plot_sina(temps, _spec("sina")).axes[0].collections[0].get_offsets()
        second = plot_sina(temps, _spec("sina")).axes[0].collections[0].get_offsets()
        assert (first == second).all()


class TestPlotRidgeline:
    def test_first_month_on_top(self, temps: Any) -> None:
        ax = plot_ridgeline(temps, _spec("ridgeline")).axes[0]
        ticks = dict(
            zip(
                ax.get_yticks(),
                (t.get_text() for t in ax.get_yticklabels()),
                strict=True,
            )
        )
        assert ticks[11.0] == "Jan"
        assert ticks[0.0] == "Dec"

    def test_filled_ridges(self, temps: Any) -> None:
        ax = plot_ridgeline(temps, _spec("ridgeline")).axes[0]
        ridges = [c for c in ax.collections if isinstance(c, PolyCollection)]
        assert len(ridges) == 12

    def test_outlined_ridges(self, temps: Any) -> None:
        spec = _spec("ridgeline", style={"filled": False})
        ax = plot_ridgeline(temps, spec).axes[0]
        assert not [c for c in ax.collections if isinstance(c, PolyCollection)]

    def test_value_axis_label(self, temps: Any) -> None:
        spec = _spec("ridgeline", style={"x_label": "temperature"})
        ax = plot_ridgeline(temps, spec).axes[0]
        assert ax.get_xlabel() == "temperature"
        assert ax.get_ylabel() == "month"

    def test_overlap_sets_headroom(self, temps: Any) -> None:
        spec = _spec("ridgeline", style={"ridge_overlap": 3.0})
        ax = plot_ridgeline(temps, spec).axes[0]
        assert ax.get_ylim()[1] == pytest.approx(11 + 3.0 + 0.1)

    def test_constant_group_does_not_fail(self) -> None:
        rows = [
            {"g": "flat", "v": 5.0},
            {"g": "flat", "v": 5.0},
            {"g": "spread", "v": 1.0},
            {"g": "spread", "v": 9.0},
            {"g": "spread", "v": 4.0},
        ]
        spec = ChartSpec.model_validate(
            {"name": "r", "family": "ridgeline", "rows": rows, "x": "g", "y": "v"}
        )
        ax = plot_ridgeline(records_to_frame(rows), spec).axes[0]
        assert len(ax.get_yticks()) == 2
