"""Tests for the end-to-end pipeline and the command line tool."""

import os
from pathlib import Path

import pytest

from py_riverbuilder import pipeline
from py_riverbuilder.cli import build_parser, main
from py_riverbuilder.config.config import Settings
from py_riverbuilder.core.errors import ConfigurationError, OutputExistsError
from py_riverbuilder.export.csv_export import CHART_FILES, CSV_FILES
from py_riverbuilder.pipeline import build_river_valley
from py_riverbuilder.visualize import charts

from conftest import MINIMAL_INPUT

EXAMPLE_INPUT = Path(__file__).resolve().parent.parent / "examples" / "Input.txt"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("RIVERBUILDER_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "Input.txt"
    path.write_text(MINIMAL_INPUT)
    return path


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "out"
    path.mkdir()
    return path


class TestPipeline:
    """Test build_river_valley."""

    def test_csv_only_run(self, input_file, output_dir):
        settings = Settings(output_dir=str(output_dir), write_charts=False, seed=1)
        model = build_river_valley(input_file, settings)
        assert model.station_count == 2
        assert sorted(p.name for p in output_dir.iterdir()) == sorted(CSV_FILES)

    def test_charts_written(self, output_dir):
        settings = Settings(output_dir=str(output_dir), seed=2024)
        build_river_valley(EXAMPLE_INPUT, settings)
        for name in CHART_FILES + CSV_FILES:
            assert (output_dir / name).stat().st_size > 0

    def test_existing_outputs_checked_before_parsing(self, tmp_path, output_dir):
        (output_dir / CSV_FILES[0]).write_text("old")
        settings = Settings(output_dir=str(output_dir), write_charts=False)
        # The input does not even exist; the overwrite check fires first
        with pytest.raises(OutputExistsError):
            build_river_valley(tmp_path / "missing.txt", settings)
        assert (output_dir / CSV_FILES[0]).read_text() == "old"

    def test_existing_chart_blocks_csv_only_run(self, input_file, output_dir):
        (output_dir / CHART_FILES[0]).write_text("old")
        settings = Settings(output_dir=str(output_dir), write_charts=False)
        with pytest.raises(OutputExistsError, match=CHART_FILES[0]):
            build_river_valley(input_file, settings)
        assert sorted(p.name for p in output_dir.iterdir()) == [CHART_FILES[0]]

    def test_failed_chart_removes_partial_outputs(self, input_file, output_dir, monkeypatch):
        def broken_render(model, directory, dpi):
            (directory / CHART_FILES[0]).write_text("partial")
            raise RuntimeError("renderer crashed")

        monkeypatch.setattr(charts, "render_charts", broken_render)
        settings = Settings(output_dir=str(output_dir), seed=1)
        with pytest.raises(RuntimeError, match="renderer crashed"):
            build_river_valley(input_file, settings)
        assert list(output_dir.iterdir()) == []

    def test_failed_overwrite_keeps_earlier_outputs(self, input_file, output_dir, monkeypatch):
        build_river_valley(input_file, Settings(output_dir=str(output_dir), write_charts=False))

        def broken_export(model, directory):
            raise OSError("disk full")

        monkeypatch.setattr(pipeline, "export_csv", broken_export)
        settings = Settings(output_dir=str(output_dir), write_charts=False, overwrite=True)
        with pytest.raises(OSError, match="disk full"):
            build_river_valley(input_file, settings)
        assert sorted(p.name for p in output_dir.iterdir()) == sorted(CSV_FILES)

    def test_invalid_input_writes_nothing(self, tmp_path, output_dir):
        bad = tmp_path / "bad.txt"
        bad.write_text(MINIMAL_INPUT.replace("Datum=1", "Datum=one"))
        settings = Settings(output_dir=str(output_dir), write_charts=False)
        with pytest.raises(ConfigurationError):
            build_river_valley(bad, settings)
        assert list(output_dir.iterdir()) == []


class TestCommandLine:
    """Test argument parsing and exit codes."""

    def test_parser_defaults_are_unset(self):
        args = build_parser().parse_args(["Input.txt"])
        assert args.input == "Input.txt"
        assert args.overwrite is None
        assert args.write_charts is None
        assert args.seed is None

    def test_parser_flags(self):
        args = build_parser().parse_args(
            ["Input.txt", "-o", "out", "--overwrite", "--no-charts", "--seed", "9"]
        )
        assert args.output_dir == "out"
        assert args.overwrite is True
        assert args.write_charts is False
        assert args.seed == 9

    def test_successful_run(self, input_file, output_dir):
        status = main([str(input_file), "-o", str(output_dir), "--no-charts", "--seed", "1"])
        assert status == 0
        assert (output_dir / "CartesianCoordinates.csv").exists()

    def test_existing_outputs_fail_without_overwrite(self, input_file, output_dir):
        argv = [str(input_file), "-o", str(output_dir), "--no-charts"]
        assert main(argv) == 0
        assert main(argv) == 1
        assert main(argv + ["--overwrite"]) == 0

    def test_missing_input_fails(self, tmp_path, output_dir):
        status = main([str(tmp_path / "missing.txt"), "-o", str(output_dir), "--no-charts"])
        assert status == 1
