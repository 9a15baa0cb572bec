"""
Centerline engine: the first pass over the stations.

This module implements:
- Station positions (linear and angular) and the meander offset
- Arc length by Euclidean steps between consecutive stations
- Direction cosines used to project lateral offsets
- Thalweg, bankfull width and channel alignment per station
- The alignment summary handed to the cross-section pass
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog

from .errors import GeometryError
from .functions import CurveName, CurveSet, Periodic, StationVariables, VariabilityEvaluator
from .parameters import CrossSectionShape, ParameterSet

logger = structlog.get_logger()

# Headroom applied to the largest alignment magnitude
ALIGNMENT_HEADROOM = 1.2


@dataclass
class Centerline:
    """Per-station arrays produced by the first pass."""

    index: np.ndarray  # Station index
    angle: np.ndarray  # Station angle, i * 2*pi/N
    position: np.ndarray  # Linear position along the valley
    meander: np.ndarray  # Lateral meander offset of the channel centerline
    step: np.ndarray  # Arc-length increment (first increment duplicated at station 0)
    arc_length: np.ndarray  # Cumulative arc length
    arc_angle: np.ndarray  # 2*pi * arc_length / length
    dx_ds: np.ndarray  # Direction cosine along the valley
    dy_ds: np.ndarray  # Direction cosine across the valley
    right_wave: np.ndarray  # Right floodplain curve value
    left_wave: np.ndarray  # Left floodplain curve value
    thalweg_wave: np.ndarray  # Thalweg curve value
    thalweg: np.ndarray  # Thalweg elevation
    thalweg_detrended: np.ndarray  # Thalweg elevation with the channel slope removed
    width_wave: np.ndarray  # Bankfull width curve value
    width: np.ndarray  # Bankfull width
    first_derivative: np.ndarray
    second_derivative: np.ndarray
    alignment: np.ndarray  # Channel alignment value including curvature correction
    top_of_bank: np.ndarray  # Top of bank elevation
    depth: np.ndarray  # Local bankfull depth

    @property
    def station_count(self) -> int:
        return len(self.index)


@dataclass(frozen=True)
class AlignmentSummary:
    """Global values that need a completed first pass."""

    max_alignment: float  # 1.2 * max |alignment|
    sinuosity: float  # Total arc length over total linear length
    channel_slope: float  # Thalweg slope actually applied


class CenterlineEngine:
    """Walks the stations in order and builds the centerline arrays."""

    def __init__(
        self,
        parameters: ParameterSet,
        curves: CurveSet,
        evaluator: Optional[VariabilityEvaluator] = None,
    ):
        """
        Initialize the engine.

        Args:
            parameters: Resolved scalar parameters
            curves: Variability functions per curve slot
            evaluator: Evaluator owning the noise state; created when omitted
        """
        self.parameters = parameters
        self.curves = curves
        self.evaluator = evaluator or VariabilityEvaluator(curves)

        # Only the leading alignment term drives the curvature correction
        self._curvature_term: Optional[Periodic] = None
        if parameters.shape is CrossSectionShape.ASYMMETRIC_U:
            leading = curves.leading(CurveName.ALIGNMENT)
            if isinstance(leading, Periodic):
                self._curvature_term = leading

    def run(self) -> Centerline:
        """
        Compute every station in increasing index order.

        Returns:
            Completed centerline arrays

        Raises:
            GeometryError: On fewer than two stations, a non-positive length
                or a degenerate arc step
        """
        p = self.parameters
        n = p.station_count
        if n < 2:
            raise GeometryError("At least two stations are required")
        if not p.length > 0:
            raise GeometryError(f"Valley length must be positive, got {p.length}")

        logger.info("Computing centerline", stations=n, length=p.length)

        index = np.arange(n)
        angle = index * p.angle_spacing
        position = index / n * p.length

        meander = np.zeros(n)
        step = np.zeros(n)
        arc_length = np.zeros(n)
        arc_angle = np.zeros(n)
        right_wave = np.zeros(n)
        left_wave = np.zeros(n)
        thalweg_wave = np.zeros(n)
        width_wave = np.zeros(n)
        alignment_wave = np.zeros(n)
        first = np.zeros(n)
        second = np.zeros(n)

        skip_alignment = 1 if self._curvature_term is not None else 0

        for i in range(n):
            station = StationVariables(angle=angle[i], position=position[i], index=i)
            meander[i] = self.evaluator.evaluate(CurveName.CENTERLINE, station)

            if i >= 1:
                step[i] = math.hypot(meander[i] - meander[i - 1], position[i] - position[i - 1])
                if i == 1:
                    step[0] = step[1]
                arc_length[i] = arc_length[i - 1] + step[i]

            arc_angle[i] = 2 * math.pi * arc_length[i] / p.length
            along = StationVariables(angle=arc_angle[i], position=position[i], index=i)

            right_wave[i] = self.evaluator.evaluate(CurveName.RIGHT_FLOODPLAIN, station)
            left_wave[i] = self.evaluator.evaluate(CurveName.LEFT_FLOODPLAIN, station)
            thalweg_wave[i] = self.evaluator.evaluate(CurveName.THALWEG, along)
            width_wave[i] = self.evaluator.evaluate(CurveName.WIDTH, along)
            alignment_wave[i] = self.evaluator.evaluate(
                CurveName.ALIGNMENT, along, skip=skip_alignment
            )

            if self._curvature_term is not None:
                first[i], second[i] = self._curvature_term.derivatives(arc_angle[i])

        if not np.all(np.isfinite(step) & (step > 0)):
            raise GeometryError("Zero-length or non-finite arc step between consecutive stations")

        dx_ds = np.empty(n)
        dy_ds = np.empty(n)
        dx_ds[1:] = np.diff(position) / step[1:]
        dy_ds[1:] = np.diff(meander) / step[1:]
        # Station 0 has no predecessor and reuses the first increment
        dx_ds[0] = dx_ds[1]
        dy_ds[0] = dy_ds[1]

        alignment = alignment_wave.copy()
        alignment[1:] += second[1:] / (1 + first[1:] ** 2) ** 1.5

        width = np.maximum(p.bankfull_width * (1 + width_wave), p.bankfull_width_min)

        sinuosity = arc_length[-1] / position[-1]
        slope = self.channel_slope(sinuosity)
        thalweg = p.datum + p.depth * thalweg_wave + arc_length * slope
        thalweg_detrended = thalweg - (arc_length - arc_length[0]) * slope

        top_of_bank = (
            thalweg_detrended.max() + p.depth + (arc_length - arc_length[0]) * p.valley_slope
        )

        logger.info(
            "Centerline computed",
            arc_length=float(arc_length[-1]),
            sinuosity=float(sinuosity),
        )

        return Centerline(
            index=index,
            angle=angle,
            position=position,
            meander=meander,
            step=step,
            arc_length=arc_length,
            arc_angle=arc_angle,
            dx_ds=dx_ds,
            dy_ds=dy_ds,
            right_wave=right_wave,
            left_wave=left_wave,
            thalweg_wave=thalweg_wave,
            thalweg=thalweg,
            thalweg_detrended=thalweg_detrended,
            width_wave=width_wave,
            width=width,
            first_derivative=first,
            second_derivative=second,
            alignment=alignment,
            top_of_bank=top_of_bank,
            depth=top_of_bank - thalweg,
        )

    def channel_slope(self, sinuosity: float) -> float:
        """Configured thalweg slope, or valley slope over sinuosity."""
        if self.parameters.channel_slope is not None:
            return self.parameters.channel_slope
        return self.parameters.valley_slope / sinuosity

    def summarize(self, centerline: Centerline) -> AlignmentSummary:
        """Build the alignment summary from a completed first pass."""
        sinuosity = float(centerline.arc_length[-1] / centerline.position[-1])
        return AlignmentSummary(
            max_alignment=float(np.max(np.abs(centerline.alignment))) * ALIGNMENT_HEADROOM,
            sinuosity=sinuosity,
            channel_slope=self.channel_slope(sinuosity),
        )
