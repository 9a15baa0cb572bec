"""Tests for the CSV writers."""

import pandas as pd
import pytest

from py_riverbuilder.config.input_file import parse_input_text
from py_riverbuilder.core.errors import OutputExistsError
from py_riverbuilder.core.lcg_prng import LCGPRNG
from py_riverbuilder.core.valley import RiverValleyGenerator
from py_riverbuilder.export.csv_export import (
    BOUNDARY_FILE,
    COORDINATES_FILE,
    CSV_FILES,
    DATA_FILE,
    check_existing_outputs,
    export_csv,
    resolve_output_dir,
    summary_rows,
)

from conftest import MINIMAL_INPUT


@pytest.fixture
def minimal_model():
    river = parse_input_text(MINIMAL_INPUT)
    return RiverValleyGenerator(river.parameters, river.curves, LCGPRNG(1)).generate()


@pytest.fixture
def meandering_model(make_parameters, meandering_curves):
    p = make_parameters(station_count=20, cross_section_points=7)
    return RiverValleyGenerator(p, meandering_curves, LCGPRNG(5)).generate()


class TestCoordinates:
    """Test CartesianCoordinates.csv."""

    def test_header_and_row_count(self, meandering_model, tmp_path):
        export_csv(meandering_model, tmp_path)
        lines = (tmp_path / COORDINATES_FILE).read_text().splitlines()
        assert lines[0] == "X,Y,Z"
        assert len(lines) == 1 + meandering_model.expected_rows

    def test_first_row_precision(self, meandering_model, tmp_path):
        export_csv(meandering_model, tmp_path)
        first = (tmp_path / COORDINATES_FILE).read_text().splitlines()[1]
        for value in first.split(","):
            assert len(value.split(".")[1]) == 6

    def test_values_round_trip(self, meandering_model, tmp_path):
        export_csv(meandering_model, tmp_path)
        frame = pd.read_csv(tmp_path / COORDINATES_FILE)
        assert list(frame.columns) == ["X", "Y", "Z"]
        assert frame.to_numpy() == pytest.approx(meandering_model.points, abs=1e-3)


class TestBoundaryAndSummary:
    """Test BoundaryPoints.csv and Data.csv."""

    def test_boundary_points(self, minimal_model, tmp_path):
        export_csv(minimal_model, tmp_path)
        lines = (tmp_path / BOUNDARY_FILE).read_text().splitlines()
        assert [int(line) for line in lines] == minimal_model.boundary_indices

    def test_summary_labels(self, minimal_model):
        rows = summary_rows(minimal_model)
        assert list(rows) == [
            "Coefficient of Variation (Wbf):",
            "Standard Deviation (Wbf):",
            "Average (Wbf):",
            "Coefficient of Variation (Hbf):",
            "Standard Deviation (Hbf):",
            "Average (Hbf):",
            "wr:",
            "wp:",
            "hres:",
            "hr:",
            "GCS (-):",
            "GCS (+):",
            "Sinuosity:",
            "Channel Slope:",
        ]

    def test_summary_file(self, minimal_model, tmp_path):
        export_csv(minimal_model, tmp_path)
        lines = (tmp_path / DATA_FILE).read_text().splitlines()
        values = dict(line.split("\t") for line in lines)
        assert values["Average (Wbf):"] == "1"
        assert values["Average (Hbf):"] == "1"
        assert values["GCS (-):"] == "0%"
        assert values["GCS (+):"] == "0%"
        assert values["Sinuosity:"] == "1"
        assert values["Channel Slope:"] == "0"


class TestOutputDirectory:
    """Test directory resolution and the overwrite check."""

    def test_existing_directory_kept(self, tmp_path):
        assert resolve_output_dir(tmp_path) == tmp_path
        assert resolve_output_dir(str(tmp_path)) == tmp_path

    @pytest.mark.parametrize("requested", ["", None, "/no/such/riverbuilder/dir"])
    def test_fallback_to_temporary_directory(self, requested):
        directory = resolve_output_dir(requested)
        assert directory.is_dir()
        assert directory.name.startswith("riverbuilder_")

    def test_existing_outputs_refused(self, minimal_model, tmp_path):
        export_csv(minimal_model, tmp_path)
        with pytest.raises(OutputExistsError, match=COORDINATES_FILE):
            check_existing_outputs(tmp_path, overwrite=False, files=CSV_FILES)

    def test_overwrite_allowed(self, minimal_model, tmp_path):
        export_csv(minimal_model, tmp_path)
        check_existing_outputs(tmp_path, overwrite=True)

    def test_empty_directory_passes(self, tmp_path):
        check_existing_outputs(tmp_path, overwrite=False)
