"""
Scalar parameters of a synthetic river valley.

The parameter set is immutable once built.  Bankfull depth may be left out
and derived from the Shields criterion; channel slope may be left out and is
then derived from the valley slope after the centerline pass.
"""

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Submerged specific gravity of quartz sediment (rho_s / rho - 1)
RELATIVE_DENSITY = 1.65


class CrossSectionShape(str, Enum):
    """Cross-section shape families."""

    SYMMETRIC_U = "SU"
    ASYMMETRIC_U = "AU"
    TRAPEZOID = "TZ"


class ParameterSet(BaseModel):
    """Resolved scalar inputs of one run."""

    model_config = ConfigDict(frozen=True)

    # Domain
    datum: float = Field(..., description="Datum elevation")
    length: float = Field(..., gt=0, description="Valley length")
    station_count: int = Field(..., ge=2, description="Number of longitudinal stations")
    cross_section_points: int = Field(..., ge=2, description="Points per cross-section")

    # Dimensionless
    valley_slope: float = Field(..., description="Valley slope")
    channel_slope: Optional[float] = Field(
        None, description="Thalweg slope along the channel; derived when omitted"
    )
    critical_shields_stress: float = Field(..., ge=0, description="Critical Shields stress")

    # Channel
    bankfull_width: float = Field(..., gt=0, description="Base bankfull width")
    bankfull_width_min: float = Field(..., ge=0, description="Minimum bankfull width")
    bankfull_depth: Optional[float] = Field(
        None, description="Base bankfull depth; derived from Shields when omitted"
    )
    median_sediment_size: float = Field(..., ge=0, description="Median sediment size D50")

    # Floodplain
    floodplain_width: float = Field(..., description="Lateral offset from bank extreme to toe")
    terrace_width: float = Field(..., description="Lateral offset from toe to terrace top")
    floodplain_height: float = Field(..., description="Toe height above top of bank")
    terrace_height: float = Field(..., description="Terrace top height above toe")
    boundary_width: float = Field(..., description="Outer boundary offset beyond the terrace")

    # Shape
    shape: CrossSectionShape = Field(CrossSectionShape.SYMMETRIC_U, description="Cross-section shape")
    base_edges: int = Field(0, description="Base edge count for the TZ shape")

    @model_validator(mode="after")
    def _check_consistency(self) -> "ParameterSet":
        if self.bankfull_width_min > self.bankfull_width:
            raise ValueError("Minimum bankfull width is greater than base bankfull width")
        if self.shape is CrossSectionShape.TRAPEZOID and not (
            0 <= self.base_edges <= self.cross_section_points
        ):
            raise ValueError(
                f"Trapezoid base edge count {self.base_edges} outside "
                f"[0, {self.cross_section_points}]"
            )
        if self.bankfull_depth is None and self.valley_slope == 0:
            raise ValueError("Bankfull depth cannot be derived with a zero valley slope")
        return self

    @property
    def depth(self) -> float:
        """Bankfull depth, given or derived from the Shields criterion."""
        if self.bankfull_depth is not None:
            return self.bankfull_depth
        return (
            self.critical_shields_stress
            * RELATIVE_DENSITY
            * self.median_sediment_size
            / self.valley_slope
        )

    @property
    def station_spacing(self) -> float:
        return self.length / self.station_count

    @property
    def angle_spacing(self) -> float:
        """Angle step between stations, 2*pi / N."""
        return 2 * math.pi / self.station_count

    @property
    def width_to_depth_ratio(self) -> float:
        return self.bankfull_width / self.depth if self.depth else 0.0

    @property
    def confinement_ratio(self) -> float:
        total = self.floodplain_width + self.terrace_width + self.bankfull_width
        return self.bankfull_width / total if total else 0.0

    @property
    def manning_n(self) -> float:
        """Manning roughness from the Strickler relation, ks = 6.1 * D50."""
        return 0.034 * (6.1 * self.median_sediment_size) ** (1 / 6)
