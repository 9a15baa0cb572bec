"""
Floodplain geometry: valley-floor toes and terrace tops on both sides.

Toe offsets are anchored to the extreme bank positions and the extreme
floodplain waveforms over all stations, so they can only be computed once
every cross-section is known.
"""

from dataclasses import dataclass

import numpy as np
import structlog

from .centerline import Centerline
from .cross_section import CrossSections
from .parameters import ParameterSet

logger = structlog.get_logger()


@dataclass
class Floodplain:
    """Per-station floodplain edges."""

    right_toe: np.ndarray  # Lateral position of the right valley-floor edge
    left_toe: np.ndarray
    right_top: np.ndarray  # Lateral position of the right terrace edge
    left_top: np.ndarray
    toe_elevation: np.ndarray  # Shared by left and right toes
    top_elevation: np.ndarray  # Shared by left and right tops
    max_right_bank: float
    min_left_bank: float
    max_right_wave: float
    min_left_wave: float

    @property
    def outer_extent(self) -> float:
        """Largest right terrace offset, used for the boundary rows."""
        return float(np.max(self.right_top))


def compute_floodplain(
    parameters: ParameterSet, centerline: Centerline, sections: CrossSections
) -> Floodplain:
    """
    Compute toe and terrace offsets and elevations for every station.

    Args:
        parameters: Resolved scalar parameters
        centerline: First-pass arrays
        sections: Completed cross-section grids

    Returns:
        Floodplain edges
    """
    max_right_bank = float(np.max(sections.y))
    min_left_bank = float(np.min(sections.y))
    max_right_wave = float(np.max(centerline.right_wave))
    min_left_wave = float(np.min(centerline.left_wave))

    right_toe = (
        centerline.right_wave + parameters.floodplain_width + max_right_bank + max_right_wave
    )
    left_toe = (
        -centerline.left_wave - parameters.floodplain_width + min_left_bank + min_left_wave
    )
    toe_elevation = centerline.top_of_bank + parameters.floodplain_height

    floodplain = Floodplain(
        right_toe=right_toe,
        left_toe=left_toe,
        right_top=right_toe + parameters.terrace_width,
        left_top=left_toe - parameters.terrace_width,
        toe_elevation=toe_elevation,
        top_elevation=toe_elevation + parameters.terrace_height,
        max_right_bank=max_right_bank,
        min_left_bank=min_left_bank,
        max_right_wave=max_right_wave,
        min_left_wave=min_left_wave,
    )

    logger.info(
        "Floodplain computed",
        max_right_bank=max_right_bank,
        min_left_bank=min_left_bank,
    )
    return floodplain
