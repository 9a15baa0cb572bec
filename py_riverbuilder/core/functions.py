"""
Variability functions and their evaluator.

A named curve (centerline offset, channel alignment, bankfull width, thalweg
elevation, left and right floodplain) is the sum of zero or more variability
functions.  This module implements:
- The five function families (SIN, COS, SIN_SQ, LINE, PERL)
- The curve table binding functions to curve slots
- The evaluator, which owns the smoothed-noise anchor state per curve
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

import structlog

from .errors import ConfigurationError
from .lcg_prng import LCGPRNG

logger = structlog.get_logger()


class CurveName(str, Enum):
    """Curve slots a variability function can be attached to."""

    CENTERLINE = "centerline"
    ALIGNMENT = "alignment"
    WIDTH = "width"
    THALWEG = "thalweg"
    LEFT_FLOODPLAIN = "left_floodplain"
    RIGHT_FLOODPLAIN = "right_floodplain"


class FunctionFamily(str, Enum):
    """Function family tags as written in input files."""

    SIN = "SIN"
    COS = "COS"
    SIN_SQ = "SIN_SQ"
    LINE = "LINE"
    PERL = "PERL"

    @property
    def arity(self) -> int:
        """Number of numeric arguments the family takes."""
        if self in (FunctionFamily.LINE, FunctionFamily.PERL):
            return 2
        return 3


@dataclass(frozen=True)
class StationVariables:
    """Independent variables of one station."""

    angle: float  # Station angle or arc-length angle, in radians
    position: float  # Linear position along the valley
    index: int  # Station index


@dataclass(frozen=True)
class Periodic:
    """amplitude * sin(frequency * x + phase), or cos when cosine is set."""

    amplitude: float
    frequency: float
    phase: float
    cosine: bool = False

    @property
    def family(self) -> FunctionFamily:
        return FunctionFamily.COS if self.cosine else FunctionFamily.SIN

    @property
    def coefficients(self) -> Tuple[float, ...]:
        return (self.amplitude, self.frequency, self.phase)

    def value(self, angle: float) -> float:
        wave = math.cos if self.cosine else math.sin
        return self.amplitude * wave(self.frequency * angle + self.phase)

    def derivatives(self, angle: float) -> Tuple[float, float]:
        """
        First and second derivative estimates used for the curvature term.

        The frequency factor is left out, matching the published model.
        """
        argument = self.frequency * angle + self.phase
        return (
            self.amplitude * math.cos(argument),
            -self.amplitude * math.sin(argument),
        )


@dataclass(frozen=True)
class PeriodicSquared:
    """amplitude * sin(frequency * x + phase)^2"""

    amplitude: float
    frequency: float
    phase: float

    @property
    def family(self) -> FunctionFamily:
        return FunctionFamily.SIN_SQ

    @property
    def coefficients(self) -> Tuple[float, ...]:
        return (self.amplitude, self.frequency, self.phase)

    def value(self, angle: float) -> float:
        return self.amplitude * math.sin(self.frequency * angle + self.phase) ** 2


@dataclass(frozen=True)
class Linear:
    """slope * x + intercept, with x the linear station position."""

    slope: float
    intercept: float

    @property
    def family(self) -> FunctionFamily:
        return FunctionFamily.LINE

    @property
    def coefficients(self) -> Tuple[float, ...]:
        return (self.slope, self.intercept)

    def value(self, position: float) -> float:
        return self.slope * position + self.intercept


@dataclass(frozen=True)
class SmoothedNoise:
    """Cosine-eased random wave with the given amplitude and wavelength in stations."""

    amplitude: float
    wavelength: float

    def __post_init__(self):
        if self.wavelength <= 0:
            raise ConfigurationError(
                f"PERL wavelength must be positive, got {self.wavelength}"
            )

    @property
    def family(self) -> FunctionFamily:
        return FunctionFamily.PERL

    @property
    def coefficients(self) -> Tuple[float, ...]:
        return (self.amplitude, self.wavelength)


VariabilityFunction = Union[Periodic, PeriodicSquared, Linear, SmoothedNoise]


def make_function(family: FunctionFamily, args: Sequence[float]) -> VariabilityFunction:
    """
    Build a variability function from its family tag and numeric arguments.

    Args:
        family: Function family
        args: Numeric arguments in input-file order

    Returns:
        The matching function value

    Raises:
        ConfigurationError: If the argument count does not match the family
    """
    if len(args) != family.arity:
        raise ConfigurationError(
            f"{family.value} takes {family.arity} arguments, got {len(args)}"
        )

    if family is FunctionFamily.SIN:
        return Periodic(*args)
    if family is FunctionFamily.COS:
        return Periodic(*args, cosine=True)
    if family is FunctionFamily.SIN_SQ:
        return PeriodicSquared(*args)
    if family is FunctionFamily.LINE:
        return Linear(*args)
    if family is FunctionFamily.PERL:
        return SmoothedNoise(*args)
    raise ConfigurationError(f"Unknown function family: {family}")


def ease(start: float, end: float, t: float) -> float:
    """Cosine interpolation between two anchors, t in [0, 1]."""
    f = (1 - math.cos(t * math.pi)) * 0.5
    return start * (1 - f) + end * f


@dataclass
class CurveSet:
    """Variability functions attached to each curve slot, in input order."""

    terms: Dict[CurveName, List[VariabilityFunction]] = field(
        default_factory=lambda: {name: [] for name in CurveName}
    )

    def add(self, curve: CurveName, function: VariabilityFunction) -> None:
        self.terms.setdefault(curve, []).append(function)

    def get(self, curve: CurveName) -> List[VariabilityFunction]:
        return self.terms.get(curve, [])

    def leading(self, curve: CurveName) -> Optional[VariabilityFunction]:
        """First function attached to a curve, if any."""
        functions = self.get(curve)
        return functions[0] if functions else None

    def leading_coefficient(self, curve: CurveName, position: int) -> float:
        """Argument of the first attached function, or 0 when the slot is empty."""
        function = self.leading(curve)
        if function is None:
            return 0.0
        return float(function.coefficients[position])


class VariabilityEvaluator:
    """
    Evaluates curve sums station by station.

    The evaluator owns the smoothed-noise state: the shared random stream and
    the last two anchors of every curve.  PERL terms on one curve share that
    anchor pair in term order.  PERL terms are order-sensitive, so stations
    must be evaluated in increasing index order.
    """

    def __init__(self, curves: CurveSet, prng: Optional[LCGPRNG] = None):
        """
        Initialize the evaluator.

        Args:
            curves: Functions attached to each curve slot
            prng: Random stream for PERL terms; seeded randomly when omitted
        """
        self.curves = curves
        self.prng = prng or LCGPRNG()

        # Anchors used by the first PERL evaluation of every curve
        self.initial_anchors = (self.prng.random(), self.prng.random())
        self._anchors: Dict[CurveName, Tuple[float, float]] = {}

    def evaluate(
        self, curve: CurveName, variables: StationVariables, skip: int = 0
    ) -> float:
        """
        Sum every function attached to a curve at one station.

        Args:
            curve: Curve slot to evaluate
            variables: Independent variables of the station
            skip: Number of leading terms to leave out of the sum

        Returns:
            The summed curve value
        """
        total = 0.0
        for position, function in enumerate(self.curves.get(curve)):
            if position < skip:
                continue
            total += self._evaluate_one(curve, function, variables)
        return total

    def anchors(self, curve: CurveName) -> Tuple[float, float]:
        """Current smoothed-noise anchor pair of a curve."""
        return self._anchors.get(curve, self.initial_anchors)

    def _evaluate_one(
        self,
        curve: CurveName,
        function: VariabilityFunction,
        variables: StationVariables,
    ) -> float:
        if isinstance(function, (Periodic, PeriodicSquared)):
            return function.value(variables.angle)
        if isinstance(function, Linear):
            return function.value(variables.position)
        if isinstance(function, SmoothedNoise):
            return self._smoothed_noise(curve, function, variables.index)
        raise ConfigurationError(f"Unsupported variability function: {function!r}")

    def _smoothed_noise(
        self, curve: CurveName, function: SmoothedNoise, index: int
    ) -> float:
        start, end = self.anchors(curve)
        phase = index % function.wavelength

        if phase < 1:
            # Crossing a wavelength boundary starts a new sub-wave
            start, end = end, self.prng.random()
            value = 2 * start * function.amplitude
        else:
            value = 2 * function.amplitude * ease(start, end, phase / function.wavelength)

        self._anchors[curve] = (start, end)
        return value
