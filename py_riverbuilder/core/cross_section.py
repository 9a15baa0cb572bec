"""
Cross-section generator: the second pass over the stations.

Builds the transverse elevation profile of every station with one of three
shape families and projects the lateral points onto the plane through the
station's direction cosines, so that sections stay perpendicular to the
curving centerline.

The asymmetric shape needs the alignment summary of a completed first pass;
this pass must therefore run after CenterlineEngine.run().
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List

import numpy as np
import structlog

from .centerline import AlignmentSummary, Centerline
from .parameters import CrossSectionShape, ParameterSet

logger = structlog.get_logger()

LN2 = math.log(2)


class PointRole(Enum):
    """Role of a lateral index in a trapezoidal section."""

    BANK = "bank"
    LEFT_SLOPE = "left_slope"
    BASE = "base"
    RIGHT_SLOPE = "right_slope"


def lateral_offsets(point_count: int) -> np.ndarray:
    """
    Normalised lateral offsets in [-1, 1], symmetric about the centerline.

    Offsets step by 1/floor(M/2); the centre point is dropped for an even
    point count so exactly point_count offsets are returned.
    """
    half = point_count // 2
    offsets = np.round(np.arange(-half, half + 1) / half, 5)
    if point_count % 2 == 0:
        offsets = offsets[offsets != 0]
    return offsets


def trapezoid_layout(point_count: int, base_edges: int) -> List[PointRole]:
    """
    Assign a role to every lateral index of a trapezoidal section.

    A base edge count of 0 gives a triangle, 1 to M-2 a trapezoid and the
    last few values up to M a rectangle.
    """
    half = point_count // 2
    if base_edges % 2 == 0:
        partition, extra = base_edges // 2, 1
    else:
        partition, extra = math.ceil(base_edges / 2), 0
    base_end = half + partition + extra

    roles = []
    for j in range(1, point_count + 1):
        if j == 1 or j == point_count:
            roles.append(PointRole.BANK)
        elif j <= half - partition:
            roles.append(PointRole.LEFT_SLOPE)
        elif j > base_end:
            roles.append(PointRole.RIGHT_SLOPE)
        else:
            roles.append(PointRole.BASE)
    return roles


@dataclass
class CrossSections:
    """Station x lateral-index point grids."""

    offsets: np.ndarray  # Normalised lateral offsets, shape (M,)
    lateral: np.ndarray  # Lateral distance from the centerline, shape (N, M)
    x: np.ndarray  # Planar x, shape (N, M)
    y: np.ndarray  # Planar y, shape (N, M)
    z: np.ndarray  # Elevation, shape (N, M)
    skew: np.ndarray  # Curvature ratio b in (0, 1), shape (N,)
    exponent: np.ndarray  # Shape exponent k, shape (N,)


class CrossSectionGenerator:
    """Generates the lateral profile of every station."""

    def __init__(
        self,
        parameters: ParameterSet,
        centerline: Centerline,
        summary: AlignmentSummary,
    ):
        self.parameters = parameters
        self.centerline = centerline
        self.summary = summary
        self.offsets = lateral_offsets(parameters.cross_section_points)

        # The shape is fixed for the whole run
        profiles = {
            CrossSectionShape.SYMMETRIC_U: self._symmetric_profile,
            CrossSectionShape.ASYMMETRIC_U: self._asymmetric_profile,
            CrossSectionShape.TRAPEZOID: self._trapezoid_profile,
        }
        self._profile = profiles[parameters.shape]
        self._roles = None
        if parameters.shape is CrossSectionShape.TRAPEZOID:
            self._roles = np.array(
                [role.value for role in trapezoid_layout(
                    parameters.cross_section_points, parameters.base_edges
                )]
            )

    def skew(self, alignment: float) -> float:
        """Curvature ratio b: 0.5 when straight, toward 1 for positive alignment."""
        if alignment == 0 or self.summary.max_alignment == 0:
            return 0.5
        return 0.5 * (1 + alignment / self.summary.max_alignment)

    @staticmethod
    def exponent(alignment: float, skew: float) -> float:
        """Superelliptic exponent k derived from the curvature ratio."""
        if alignment < 0:
            return -LN2 / math.log(skew)
        return -LN2 / math.log(1 - skew)

    def run(self) -> CrossSections:
        """Compute every station's section in station order."""
        c = self.centerline
        n = c.station_count
        m = len(self.offsets)

        logger.info(
            "Generating cross-sections",
            shape=self.parameters.shape.value,
            stations=n,
            points=m,
        )

        skew = np.array([self.skew(a) for a in c.alignment])
        exponent = np.array([self.exponent(a, b) for a, b in zip(c.alignment, skew)])

        lateral = np.outer(c.width / 2, self.offsets)
        x = c.position[:, None] - lateral * c.dy_ds[:, None]
        y = c.meander[:, None] + lateral * c.dx_ds[:, None]
        z = np.empty((n, m))

        for i in range(n):
            z[i] = self._profile(i, lateral[i], exponent[i])

        logger.info("Cross-sections generated", points=int(z.size))

        return CrossSections(
            offsets=self.offsets,
            lateral=lateral,
            x=x,
            y=y,
            z=z,
            skew=skew,
            exponent=exponent,
        )

    def _symmetric_profile(self, i: int, lateral: np.ndarray, k: float) -> np.ndarray:
        top = self.centerline.top_of_bank[i]
        depth = self.centerline.depth[i]
        half_width = self.centerline.width[i] / 2
        if half_width == 0:
            return np.full(len(lateral), top)
        ratio = np.clip(1 - (lateral / half_width) ** 2, 0.0, None)
        return top - depth * np.sqrt(ratio)

    def _asymmetric_profile(self, i: int, lateral: np.ndarray, k: float) -> np.ndarray:
        top = self.centerline.top_of_bank[i]
        depth = self.centerline.depth[i]
        width = self.centerline.width[i]
        if width == 0:
            return np.full(len(lateral), top)

        # Fraction of the width measured from the right bank, 0 at right and 1 at left
        u = np.clip((width / 2 - lateral) / width, 0.0, 1.0)
        if self.centerline.alignment[i] > 0:
            shaped = u ** k
        else:
            shaped = (1 - u) ** k
        return top - 4 * depth * shaped * (1 - shaped)

    def _trapezoid_profile(self, i: int, lateral: np.ndarray, k: float) -> np.ndarray:
        top = self.centerline.top_of_bank[i]
        depth = self.centerline.depth[i]
        z = np.full(len(lateral), top)
        if self.centerline.width[i] == 0:
            return z

        roles = self._roles
        base = np.flatnonzero(roles == PointRole.BASE.value)
        if len(base) == 0:
            return z
        z[base] = top - depth

        # Sloped segments run straight from the bank tops to the base edges
        left = np.flatnonzero(roles == PointRole.LEFT_SLOPE.value)
        if len(left):
            start, end = lateral[0], lateral[base[0]]
            z[left] = top - depth * (lateral[left] - start) / (end - start)

        right = np.flatnonzero(roles == PointRole.RIGHT_SLOPE.value)
        if len(right):
            start, end = lateral[base[-1]], lateral[-1]
            z[right] = top - depth * (end - lateral[right]) / (end - start)

        return z
