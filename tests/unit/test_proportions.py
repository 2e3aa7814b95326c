"""Tests for pie, stacked-bar and side-by-side bar charts."""

from __future__ import annotations

from typing import Any

import matplotlib.patches as mpatches
import pytest

from figurebook.config.models import ChartSpec
from figurebook.data import load_dataset
from figurebook.data.validation import records_to_frame
from figurebook.exceptions import DataValidationError
from figurebook.viz.proportions import (
    plot_pie,
    plot_side_by_side_bar,
    plot_stacked_bar,
)


def _spec(family: str, **kwargs: Any) -> ChartSpec:
    return ChartSpec.model_validate({"name": "test", "family": family, **kwargs})


def _wedges(ax: Any) -> list[mpatches.Wedge]:
    return [p for p in ax.patches if isinstance(p, mpatches.Wedge)]


def _bars(ax: Any) -> list[mpatches.Rectangle]:
    return [p for p in ax.patches if isinstance(p, mpatches.Rectangle)]


# ---------------------------------------------------------------------------
# Pie
# ---------------------------------------------------------------------------


class TestPlotPie:
    @pytest.fixture
    def spec(self) -> ChartSpec:
        return _spec("pie", dataset="bundestag", x="party", y="seats")

    def test_one_wedge_per_party(self, spec: ChartSpec) -> None:
        fig = plot_pie(load_dataset("bundestag"), spec)
        wedges = _wedges(fig.axes[0])
        assert [w.get_label() for w in wedges] == [
            "CDU/CSU",
            "SPD",
            "FDP",
            "Die Linke",
            "Grüne",
        ]

    def test_angles_cover_circle_from_top(self, spec: ChartSpec) -> None:
        fig = plot_pie(load_dataset("bundestag"), spec)
        wedges = _wedges(fig.axes[0])
        assert sum(w.theta2 - w.theta1 for w in wedges) == pytest.approx(360.0)
        assert wedges[0].theta2 == pytest.approx(90.0)
        share = (wedges[0].theta2 - wedges[0].theta1) / 360.0
        assert share == pytest.approx(226 / 614)

    def test_percent_labels(self, spec: ChartSpec) -> None:
        fig = plot_pie(load_dataset("bundestag"), spec)
        texts = [t.get_text() for t in fig.axes[0].texts]
        assert "CDU/CSU\n37%" in texts

    def test_percent_labels_disabled(self) -> None:
        spec = _spec(
            "pie",
            dataset="bundestag",
            x="party",
            y="seats",
            style={"show_percent": False},
        )
        fig = plot_pie(load_dataset("bundestag"), spec)
        assert all("%" not in t.get_text() for t in fig.axes[0].texts)

    def test_color_overrides(self) -> None:
        spec = _spec(
            "pie",
            dataset="bundestag",
            x="party",
            y="seats",
            style={"colors": {"SPD": "#ff0000"}},
        )
        fig = plot_pie(load_dataset("bundestag"), spec)
        spd = next(w for w in _wedges(fig.axes[0]) if w.get_label() == "SPD")
        assert spd.get_facecolor()[:3] == pytest.approx((1.0, 0.0, 0.0))

    def test_zero_slice_skipped(self) -> None:
        rows = [{"k": "a", "v": 1}, {"k": "b", "v": 0}, {"k": "c", "v": 3}]
        spec = _spec("pie", rows=rows, x="k", y="v")
        fig = plot_pie(records_to_frame(rows), spec)
        assert [w.get_label() for w in _wedges(fig.axes[0])] == ["a", "c"]

    def test_values_summed_per_category(self) -> None:
        rows = [{"k": "a", "v": 1}, {"k": "a", "v": 1}, {"k": "b", "v": 2}]
        spec = _spec("pie", rows=rows, x="k", y="v")
        wedges = _wedges(plot_pie(records_to_frame(rows), spec).axes[0])
        assert wedges[0].theta2 - wedges[0].theta1 == pytest.approx(180.0)

    def test_negative_value_rejected(self) -> None:
        rows = [{"k": "a", "v": 1}, {"k": "b", "v": -1}]
        spec = _spec("pie", rows=rows, x="k", y="v")
        with pytest.raises(DataValidationError, match="non-negative"):
            plot_pie(records_to_frame(rows), spec)

    def test_faceted_pies(self) -> None:
        spec = _spec(
            "pie",
            dataset="market_share",
            x="company",
            y="share",
            facet={"column": "year"},
        )
        fig = plot_pie(load_dataset("market_share"), spec)
        visible = [ax for ax in fig.axes if ax.get_visible()]
        assert [ax.get_title() for ax in visible] == [
            "year = 2015",
            "year = 2016",
            "year = 2017",
        ]
        for ax in visible:
            assert len(_wedges(ax)) == 5


# ---------------------------------------------------------------------------
# Bars
# ---------------------------------------------------------------------------


class TestPlotStackedBar:
    @pytest.fixture
    def spec(self) -> ChartSpec:
        return _spec(
            "stacked_bar", dataset="market_share", x="year", y="share", fill="company"
        )

    def test_segment_count(self, spec: ChartSpec) -> None:
        fig = plot_stacked_bar(load_dataset("market_share"), spec)
        assert len(_bars(fig.axes[0])) == 15

    def test_bar_tops_equal_totals(self, spec: ChartSpec) -> None:
        fig = plot_stacked_bar(load_dataset("market_share"), spec)
        tops: dict[float, float] = {}
        for rect in _bars(fig.axes[0]):
            centre = round(rect.get_x() + rect.get_width() / 2, 6)
            tops[centre] = max(tops.get(centre, 0.0), rect.get_y() + rect.get_height())
        assert sorted(tops) == [0.0, 1.0, 2.0]
        assert list(tops.values()) == pytest.approx([100.0, 100.0, 100.0])

    def test_figure_legend_for_fill(self, spec: ChartSpec) -> None:
        fig = plot_stacked_bar(load_dataset("market_share"), spec)
        assert len(fig.legends) == 1
        labels = [t.get_text() for t in fig.legends[0].get_texts()]
        assert labels == ["A", "B", "C", "D", "E"]

    def test_legend_disabled(self) -> None:
        spec = _spec(
            "stacked_bar",
            dataset="market_share",
            x="year",
            y="share",
            fill="company",
            style={"legend": False},
        )
        fig = plot_stacked_bar(load_dataset("market_share"), spec)
        assert fig.legends == []

    def test_tick_labels(self, spec: ChartSpec) -> None:
        fig = plot_stacked_bar(load_dataset("market_share"), spec)
        labels = [t.get_text() for t in fig.axes[0].get_xticklabels()]
        assert labels == ["2015", "2016", "2017"]

    def test_negative_rejected(self) -> None:
        rows = [{"g": "a", "s": "x", "v": 1}, {"g": "a", "s": "y", "v": -2}]
        spec = _spec("stacked_bar", rows=rows, x="g", y="v", fill="s")
        with pytest.raises(DataValidationError, match="negative"):
            plot_stacked_bar(records_to_frame(rows), spec)

    def test_missing_column(self) -> None:
        spec = _spec("stacked_bar", dataset="market_share", x="year", y="revenue")
        with pytest.raises(DataValidationError, match="revenue"):
            plot_stacked_bar(load_dataset("market_share"), spec)


class TestPlotSideBySideBar:
    def test_dodged_bars(self) -> None:
        spec = _spec(
            "side_by_side_bar",
            dataset="market_share",
            x="year",
            y="share",
            fill="company",
        )
        fig = plot_side_by_side_bar(load_dataset("market_share"), spec)
        bars = _bars(fig.axes[0])
        assert len(bars) == 15
        assert all(b.get_width() == pytest.approx(0.16) for b in bars)
        assert all(b.get_y() == 0.0 for b in bars)

    def test_colors_by_category_without_fill(self) -> None:
        spec = _spec(
            "side_by_side_bar",
            dataset="bundestag",
            x="party",
            y="seats",
            style={"colors": {"SPD": "#ff0000"}},
        )
        fig = plot_side_by_side_bar(load_dataset("bundestag"), spec)
        bars = _bars(fig.axes[0])
        assert len(bars) == 5
        assert bars[1].get_facecolor()[:3] == pytest.approx((1.0, 0.0, 0.0))
        assert fig.legends == []

    def test_negative_values_allowed(self) -> None:
        rows = [{"g": "a", "v": 2.0}, {"g": "b", "v": -1.0}]
        spec = _spec("side_by_side_bar", rows=rows, x="g", y="v")
        fig = plot_side_by_side_bar(records_to_frame(rows), spec)
        heights = [b.get_height() for b in _bars(fig.axes[0])]
        assert heights == [2.0, -1.0]

    def test_facets_share_value_axis(self) -> None:
        spec = _spec(
            "side_by_side_bar",
            dataset="market_share",
            x="company",
            y="share",
            facet={"column": "year", "n_cols": 2},
        )
        fig = plot_side_by_side_bar(load_dataset("market_share"), spec)
        visible = [ax for ax in fig.axes if ax.get_visible()]
        assert len(visible) == 3
        assert len(fig.axes) == 4
        limits = {ax.get_ylim() for ax in visible}
        assert len(limits) == 1

    def test_title_on_single_panel(self) -> None:
        spec = _spec(
            "side_by_side_bar",
            dataset="bundestag",
            x="party",
            y="seats",
            style={"title": "Seats"},
        )
        fig = plot_side_by_side_bar(load_dataset("bundestag"), spec)
        assert fig.axes[0].get_title() == "Seats"
