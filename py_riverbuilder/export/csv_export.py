"""
CSV export of a synthesized river valley.

Writes the three tabular outputs consumed by GIS/3D tools:
- CartesianCoordinates.csv: the ordered X, Y, Z point cloud
- BoundaryPoints.csv: offsets into the point cloud outlining the floodplain
- Data.csv: labelled summary statistics
"""

import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd
import structlog

from ..core.errors import OutputExistsError
from ..core.valley import ValleyModel

logger = structlog.get_logger()

COORDINATES_FILE = "CartesianCoordinates.csv"
BOUNDARY_FILE = "BoundaryPoints.csv"
DATA_FILE = "Data.csv"

CSV_FILES = [BOUNDARY_FILE, DATA_FILE, COORDINATES_FILE]
CHART_FILES = [
    "ChannelElevation.png",
    "CrossSection.png",
    "GCS.png",
    "LongitudinalProfile.png",
    "Planform.png",
]
OUTPUT_FILES = CHART_FILES + CSV_FILES


def resolve_output_dir(directory: Optional[Union[str, Path]]) -> Path:
    """
    Return the output directory, falling back to a temporary one.

    An empty or non-existent directory is replaced by a fresh temporary
    directory and a warning is logged.
    """
    if directory and Path(directory).is_dir():
        return Path(directory)
    fallback = Path(tempfile.mkdtemp(prefix="riverbuilder_"))
    logger.warning(
        "Empty or invalid output directory, writing to a temporary location",
        requested=str(directory) if directory else None,
        directory=str(fallback),
    )
    return fallback


def check_existing_outputs(
    directory: Path, overwrite: bool, files: Optional[List[str]] = None
) -> None:
    """
    Refuse to run when outputs already exist and overwriting is disabled.

    Raises:
        OutputExistsError: If any of the output files is present
    """
    if overwrite:
        return
    existing = [name for name in (files or OUTPUT_FILES) if (directory / name).exists()]
    if existing:
        raise OutputExistsError(
            f"One or more output files already exist in {str(directory)!r}: "
            + ", ".join(existing)
        )


def summary_rows(model: ValleyModel) -> Dict[str, str]:
    """Labelled values of Data.csv, in file order."""
    s = model.statistics
    return {
        "Coefficient of Variation (Wbf):": _fmt(s.width.cv),
        "Standard Deviation (Wbf):": _fmt(s.width.std),
        "Average (Wbf):": _fmt(s.width.mean),
        "Coefficient of Variation (Hbf):": _fmt(s.depth.cv),
        "Standard Deviation (Hbf):": _fmt(s.depth.std),
        "Average (Hbf):": _fmt(s.depth.mean),
        "wr:": _fmt(s.wr),
        "wp:": _fmt(s.wp),
        "hres:": _fmt(s.hres),
        "hr:": _fmt(s.hr),
        "GCS (-):": _fmt(s.negative_gcs_percent) + "%",
        "GCS (+):": _fmt(s.positive_gcs_percent) + "%",
        "Sinuosity:": _fmt(s.sinuosity),
        "Channel Slope:": _fmt(s.channel_slope, digits=5),
    }


def write_coordinates(model: ValleyModel, directory: Path) -> Path:
    """Write the point cloud; the first point keeps six decimals."""
    path = directory / COORDINATES_FILE
    first = model.points[0]
    rest = pd.DataFrame(np.round(model.points[1:], 3) + 0.0, columns=["X", "Y", "Z"])

    with open(path, "w", newline="") as handle:
        handle.write("X,Y,Z\n")
        handle.write(",".join(f"{value:.6f}" for value in first) + "\n")
        rest.to_csv(handle, header=False, index=False, lineterminator="\n")

    logger.info("Coordinates written", path=str(path), rows=len(model.points))
    return path


def write_boundary_points(model: ValleyModel, directory: Path) -> Path:
    """Write the 17 boundary offsets, one per line."""
    path = directory / BOUNDARY_FILE
    pd.Series(model.boundary_indices, dtype=int).to_csv(
        path, header=False, index=False, lineterminator="\n"
    )
    logger.info("Boundary points written", path=str(path))
    return path


def write_summary(model: ValleyModel, directory: Path) -> Path:
    """Write the labelled statistics, tab separated."""
    path = directory / DATA_FILE
    pd.Series(summary_rows(model)).to_csv(
        path, sep="\t", header=False, lineterminator="\n"
    )
    logger.info("Summary written", path=str(path))
    return path


def export_csv(model: ValleyModel, directory: Path) -> List[Path]:
    """Write every CSV output into directory."""
    return [
        write_boundary_points(model, directory),
        write_summary(model, directory),
        write_coordinates(model, directory),
    ]


def _fmt(value: float, digits: int = 3) -> str:
    rounded = round(float(value), digits) + 0.0
    return np.format_float_positional(rounded, trim="-")
