"""Tests for loading chart specs from YAML."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from figurebook.config import ChartFamily, load_chart_specs
from figurebook.exceptions import ConfigError

REPO_ROOT = Path(__file__).resolve().parents[2]

_VALID_YAML = """\
output_dir: out
dpi: 150
figures:
  - name: seats
    family: pie
    dataset: bundestag
    x: party
    y: seats
  - name: inline_bars
    family: side_by_side_bar
    x: store
    y: sold
    rows:
      - {store: North, sold: 3}
      - {store: South, sold: 5}
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "figures.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadChartSpecs:
    def test_valid_file(self, tmp_path: Path) -> None:
        config = load_chart_specs(_write(tmp_path, _VALID_YAML))
        assert [spec.name for spec in config.figures] == ["seats", "inline_bars"]
        assert config.figures[0].family is ChartFamily.PIE
        assert config.figures[1].rows == [
            {"store": "North", "sold": 3},
            {"store": "South", "sold": 5},
        ]
        assert config.output_dir == Path("out")
        assert config.dpi == 150

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_chart_specs(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Malformed YAML"):
            load_chart_specs(_write(tmp_path, "figures: [\n  - name: a\n"))

    @pytest.mark.parametrize("text", ["", "dpi: 300\n", "figures: not-a-list\n"])
    def test_figures_list_required(self, tmp_path: Path, text: str) -> None:
        with pytest.raises(ConfigError, match="'figures' list"):
            load_chart_specs(_write(tmp_path, text))

    def test_invalid_spec_names_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "figures:\n  - name: bad\n    family: pie\n    x: party\n",
        )
        with pytest.raises(ConfigError, match="figures.yaml") as excinfo:
            load_chart_specs(path)
        assert isinstance(excinfo.value.__cause__, ValidationError)

    def test_unknown_family(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "figures:\n  - name: a\n    family: donut\n    x: p\n    y: q\n",
        )
        with pytest.raises(ConfigError):
            load_chart_specs(path)

    def test_unknown_preset_fails_at_load(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "figures:\n"
            "  - name: a\n"
            "    family: pie\n"
            "    dataset: bundestag\n"
            "    x: party\n"
            "    y: seats\n"
            "    preset: billboard\n",
        )
        with pytest.raises(ConfigError, match="Preset"):
            load_chart_specs(path)

    def test_shipped_example_config(self) -> None:
        config = load_chart_specs(REPO_ROOT / "configs" / "figures.yaml")
        names = [spec.name for spec in config.figures]
        assert "fruit_side_by_side" in names
        assert len(names) == len(set(names))
