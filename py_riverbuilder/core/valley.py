"""
River valley generator.

Runs the synthesis as two explicit stages:
1. Centerline pass: stations, arc length, alignment and the alignment summary
2. Cross-section pass: lateral profiles, then floodplain, statistics and the
   boundary point cloud

The second stage only starts once the first has finished, since the
asymmetric shape normalises curvature by the maximum over all stations.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import structlog

from .boundary import FLOODPLAIN_ROWS, assemble_point_cloud, boundary_index_table
from .centerline import AlignmentSummary, Centerline, CenterlineEngine
from .cross_section import CrossSectionGenerator, CrossSections
from .errors import ConfigurationError
from .floodplain import Floodplain, compute_floodplain
from .functions import CurveName, CurveSet, FunctionFamily, VariabilityEvaluator
from .lcg_prng import LCGPRNG
from .parameters import CrossSectionShape, ParameterSet
from .statistics import ValleyStatistics, compute_statistics

logger = structlog.get_logger()


@dataclass
class ValleyModel:
    """Everything derived from one run."""

    parameters: ParameterSet
    centerline: Centerline
    summary: AlignmentSummary
    sections: CrossSections
    floodplain: Floodplain
    statistics: ValleyStatistics
    points: np.ndarray  # (N*(M+6), 3) ordered X, Y, Z
    boundary_indices: List[int]

    @property
    def station_count(self) -> int:
        return self.centerline.station_count

    @property
    def point_count(self) -> int:
        return self.sections.z.shape[1]

    @property
    def expected_rows(self) -> int:
        return self.station_count * (self.point_count + FLOODPLAIN_ROWS)


def validate_curves(parameters: ParameterSet, curves: CurveSet) -> None:
    """
    Check curve bindings that depend on the chosen shape.

    Raises:
        ConfigurationError: If the asymmetric shape lacks a leading SIN
            alignment term
    """
    if parameters.shape is CrossSectionShape.ASYMMETRIC_U:
        leading = curves.leading(CurveName.ALIGNMENT)
        if leading is None or leading.family is not FunctionFamily.SIN:
            raise ConfigurationError(
                "The AU cross-sectional shape needs a SIN function as the first "
                "Channel Elevation Function"
            )


class RiverValleyGenerator:
    """Synthesizes a river valley from parameters and variability curves."""

    def __init__(
        self,
        parameters: ParameterSet,
        curves: CurveSet,
        prng: Optional[LCGPRNG] = None,
    ):
        """
        Initialize the generator.

        Args:
            parameters: Resolved scalar parameters
            curves: Variability functions per curve slot
            prng: Random stream for smoothed-noise terms

        Raises:
            ConfigurationError: If the curves do not suit the shape
        """
        validate_curves(parameters, curves)
        self.parameters = parameters
        self.curves = curves
        self.evaluator = VariabilityEvaluator(curves, prng)

    def generate(self) -> ValleyModel:
        """Run both stages and return the finished model."""
        logger.info(
            "Starting river valley synthesis",
            shape=self.parameters.shape.value,
            seed=self.evaluator.prng.seed,
        )

        # Stage 1
        engine = CenterlineEngine(self.parameters, self.curves, self.evaluator)
        centerline = engine.run()
        summary = engine.summarize(centerline)

        # Stage 2
        sections = CrossSectionGenerator(self.parameters, centerline, summary).run()
        floodplain = compute_floodplain(self.parameters, centerline, sections)
        statistics = compute_statistics(self.parameters, self.curves, centerline, summary)
        points = assemble_point_cloud(self.parameters, centerline, sections, floodplain)

        model = ValleyModel(
            parameters=self.parameters,
            centerline=centerline,
            summary=summary,
            sections=sections,
            floodplain=floodplain,
            statistics=statistics,
            points=points,
            boundary_indices=boundary_index_table(
                centerline.station_count, sections.z.shape[1]
            ),
        )

        logger.info("River valley synthesis completed", points=len(points))
        return model
