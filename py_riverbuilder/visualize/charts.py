"""
Diagnostic charts of a synthesized river valley.

Five PNG figures are produced:
- ChannelElevation.png: channel alignment against arc length
- CrossSection.png: lateral profile of the middle station
- GCS.png: geometric covariance structures along the valley
- LongitudinalProfile.png: valley top, valley floor, bank top and thalweg
- Planform.png: centerline, banks, toes and terrace tops seen from above
"""

from pathlib import Path
from typing import Iterable, List, Tuple

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import structlog

from ..core.valley import ValleyModel
from ..export.csv_export import CHART_FILES

logger = structlog.get_logger()

FIGURE_SIZE = (10, 7.5)

Series = Tuple[np.ndarray, np.ndarray, str, str]  # x, y, label, colour


def _plot_series(ax, series: Iterable[Series]) -> None:
    for x, y, label, colour in series:
        ax.plot(np.round(x, 3), np.round(y, 3), "o-", color=colour, label=label,
                markersize=3, linewidth=1)


def _save(fig, path: Path, dpi: int) -> Path:
    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    logger.debug("Chart written", path=str(path))
    return path


def plot_channel_elevation(model: ValleyModel, path: Path, dpi: int = 100) -> Path:
    c = model.centerline
    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    _plot_series(ax, [(c.arc_length, c.alignment, "Channel elevation", "darkblue")])
    ax.set_ylim(c.alignment.min() - 0.05, c.alignment.max() + 0.05)
    ax.set_title("Channel Elevation")
    ax.set_xlabel("S (meters)")
    ax.set_ylabel("Elevation (meters)")
    return _save(fig, path, dpi)


def plot_cross_section(model: ValleyModel, path: Path, dpi: int = 100) -> Path:
    """Plot the station halfway down the valley."""
    station = model.station_count // 2
    lateral = model.sections.lateral[station]
    z = model.sections.z[station]

    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    _plot_series(ax, [(lateral, z, f"Station {station}", "darkblue")])
    ax.set_ylim(z.min() - 5, z.max() + 5)
    ax.set_title("Cross Section")
    ax.set_xlabel("Y (meters)")
    ax.set_ylabel("Elevation (meters)")
    return _save(fig, path, dpi)


def plot_gcs(model: ValleyModel, path: Path, dpi: int = 100) -> Path:
    x = model.centerline.position
    s = model.statistics
    low = min(s.cov_width_thalweg.min(), s.cov_thalweg_alignment.min()) - 0.5
    high = max(s.cov_width_thalweg.max(), s.cov_thalweg_alignment.max()) + 0.5

    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    _plot_series(ax, [
        (x, s.cov_width_thalweg, "C(Wbf*Zt)", "forestgreen"),
        (x, s.cov_thalweg_alignment, "C(Zt*Cs)", "darkred"),
    ])
    ax.set_ylim(low, high)
    ax.set_title("Geometric Covariance Structures")
    ax.set_xlabel("X (meters)")
    ax.set_ylabel("Correlation")
    ax.legend(loc="upper right")
    return _save(fig, path, dpi)


def plot_longitudinal_profile(model: ValleyModel, path: Path, dpi: int = 100) -> Path:
    c = model.centerline
    f = model.floodplain
    x = c.position

    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    _plot_series(ax, [
        (x, f.top_elevation, "Valley Top", "black"),
        (x, f.toe_elevation, "Valley Floor", "chocolate"),
        (x, c.top_of_bank, "Bank Top", "olivedrab"),
        (x, c.thalweg, "Thalweg Elevation", "dimgray"),
    ])
    ax.set_ylim(c.thalweg.min() - 5, f.top_elevation.max() + 5)
    ax.set_title("Longitudinal Profile")
    ax.set_xlabel("X (meters)")
    ax.set_ylabel("Elevation (meters)")
    ax.legend(loc="upper right")
    return _save(fig, path, dpi)


def plot_planform(model: ValleyModel, path: Path, dpi: int = 100) -> Path:
    c = model.centerline
    f = model.floodplain
    y = model.sections.y
    x = c.position

    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    _plot_series(ax, [
        (x, c.meander, "Channel Meander", "darkblue"),
        (x, y[:, -1], "L/R Channel Banks", "olivedrab"),
        (x, y[:, 0], None, "olivedrab"),
        (x, f.right_toe, "L/R Valley Floors", "chocolate"),
        (x, f.left_toe, None, "chocolate"),
        (x, f.right_top, "L/R Valley Tops", "black"),
        (x, f.left_top, None, "black"),
    ])
    ax.set_ylim(f.left_top.min() - 5, f.right_top.max() + 5)
    ax.set_title("Planform")
    ax.set_xlabel("X (meters)")
    ax.set_ylabel("Y (meters)")
    ax.legend(loc="upper right")
    return _save(fig, path, dpi)


def render_charts(model: ValleyModel, directory: Path, dpi: int = 100) -> List[Path]:
    """
    Render every diagnostic chart into directory.

    Args:
        model: Finished valley model
        directory: Output directory
        dpi: Figure resolution

    Returns:
        Paths of the written PNG files
    """
    logger.info("Rendering charts", directory=str(directory))
    plotters = [
        plot_channel_elevation,
        plot_cross_section,
        plot_gcs,
        plot_longitudinal_profile,
        plot_planform,
    ]
    # Same order as CHART_FILES
    return [plot(model, directory / name, dpi) for plot, name in zip(plotters, CHART_FILES)]
