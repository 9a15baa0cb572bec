"""
Reader for RiverBuilder input files.

An input file is a list of ``key=value`` lines:

    Datum=100
    Length=1000
    Valley Slope (Sv)=0.001
    Cross-Sectional Shape=TZ(3)
    SIN1=SIN(5, 2, PI/2)
    Meandering Centerline Function=SIN1
    Bankfull Width Function=PERL(0.1, 10)

Keys ending in a parenthesised note are matched without it.  Blank lines and
lines starting with ``#`` are ignored.
"""

import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

import structlog
from pydantic import ValidationError

from ..core.errors import ConfigurationError
from ..core.functions import (
    CurveName,
    CurveSet,
    FunctionFamily,
    VariabilityFunction,
    make_function,
)
from ..core.parameters import CrossSectionShape, ParameterSet
from ..core.valley import validate_curves

logger = structlog.get_logger()

PARAMETER_KEYS: Dict[str, str] = {
    "datum": "datum",
    "length": "length",
    "valley slope": "valley_slope",
    "channel slope": "channel_slope",
    "critical shields stress": "critical_shields_stress",
    "number of stations": "station_count",
    "cross-section points": "cross_section_points",
    "bankfull width": "bankfull_width",
    "bankfull width minimum": "bankfull_width_min",
    "bankfull depth": "bankfull_depth",
    "median sediment size": "median_sediment_size",
    "terrace height": "terrace_height",
    "floodplain width": "floodplain_width",
    "terrace width": "terrace_width",
    "floodplain height": "floodplain_height",
    "boundary width": "boundary_width",
}

CURVE_KEYS: Dict[str, CurveName] = {
    "meandering centerline function": CurveName.CENTERLINE,
    "channel elevation function": CurveName.ALIGNMENT,
    "bankfull width function": CurveName.WIDTH,
    "thalweg elevation function": CurveName.THALWEG,
    "left floodplain function": CurveName.LEFT_FLOODPLAIN,
    "right floodplain function": CurveName.RIGHT_FLOODPLAIN,
}

SHAPE_KEY = "cross-sectional shape"

_FAMILIES = "SIN_SQ|SIN|COS|LINE|PERL"
FUNCTION_CALL = re.compile(rf"^({_FAMILIES})\s*\((.*)\)$")
FUNCTION_NAME = re.compile(rf"^({_FAMILIES})(\w*)$")
TRAPEZOID = re.compile(r"^TZ\s*\((.*)\)$")
PI_LITERAL = re.compile(r"^(?:(.+)\*)?PI(?:/(.+))?$")


@dataclass
class RiverInput:
    """Parameters and curves read from one input file."""

    parameters: ParameterSet
    curves: CurveSet
    functions: Dict[str, VariabilityFunction]  # User-defined functions by name
    source: Optional[Path] = None


def normalize_key(key: str) -> str:
    """Lower-case a key and drop parenthesised notes and extra spaces."""
    key = re.sub(r"\([^)]*\)", " ", key)
    return " ".join(key.lower().split())


def parse_numeric(text: str) -> float:
    """
    Parse a number, accepting ``PI``, ``k*PI``, ``PI/m`` and ``k*PI/m``.

    Raises:
        ConfigurationError: If the text is not a number
    """
    text = text.strip()
    try:
        match = PI_LITERAL.match(text)
        if match:
            factor = float(match.group(1)) if match.group(1) else 1.0
            divisor = float(match.group(2)) if match.group(2) else 1.0
            return factor * math.pi / divisor
        return float(text)
    except (ValueError, ZeroDivisionError):
        raise ConfigurationError(f"Invalid numeric value: {text!r}") from None


def parse_function_call(text: str) -> Optional[VariabilityFunction]:
    """Parse ``FAMILY(args)``; returns None when text is not a call."""
    match = FUNCTION_CALL.match(text.strip())
    if not match:
        return None
    family = FunctionFamily(match.group(1))
    raw_args = [arg for arg in re.split(r"[,\s]+", match.group(2)) if arg]
    return make_function(family, [parse_numeric(arg) for arg in raw_args])


class InputFileParser:
    """Resolves an input file into a parameter set and curve table."""

    def __init__(self):
        self.values: Dict[str, float] = {}
        self.functions: Dict[str, VariabilityFunction] = {}
        self.curves = CurveSet()
        self.shape = CrossSectionShape.SYMMETRIC_U
        self.base_edges = 0

    def parse(self, text: str, source: Optional[Path] = None) -> RiverInput:
        """
        Parse the full text of an input file.

        Args:
            text: File contents
            source: Path the text came from, for reporting

        Returns:
            Resolved input

        Raises:
            ConfigurationError: On any malformed, undefined or missing entry
        """
        for line_number, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                raise ConfigurationError(f"Line {line_number}: expected key=value, got {line!r}")
            key, value = (part.strip() for part in line.split("=", 1))
            try:
                self._assign(key, value)
            except ConfigurationError as exc:
                raise ConfigurationError(f"Line {line_number}: {exc}") from None

        parameters = self._build_parameters()
        validate_curves(parameters, self.curves)

        logger.info(
            "Input parsed",
            source=str(source) if source else None,
            shape=parameters.shape.value,
            functions=sum(len(terms) for terms in self.curves.terms.values()),
        )
        return RiverInput(
            parameters=parameters,
            curves=self.curves,
            functions=dict(self.functions),
            source=source,
        )

    def _assign(self, key: str, value: str) -> None:
        # User-defined function, e.g. SIN1=SIN(a, f, ps)
        if FUNCTION_NAME.match(key):
            self._define_function(key, value)
            return

        normalized = normalize_key(key)
        curve = self._curve_for(normalized)
        if curve is not None:
            self.curves.add(curve, self._resolve_function(value))
            return

        if "," in value:
            raise ConfigurationError(
                f"Attempted to assign values to {key!r} without a specific function"
            )

        if normalized == SHAPE_KEY:
            self._set_shape(value)
            return

        field_name = PARAMETER_KEYS.get(normalized)
        if field_name is None:
            raise ConfigurationError(f"Unknown parameter {key!r}")
        self.values[field_name] = parse_numeric(value)

    def _define_function(self, name: str, value: str) -> None:
        if name in self.functions or not re.search(r"\d", name):
            raise ConfigurationError(
                f"User-defined function {name!r} has an invalid name or was defined more than once"
            )
        function = parse_function_call(value)
        if function is None:
            raise ConfigurationError(f"Function {name!r} needs a definition like SIN(a, f, ps)")
        self.functions[name] = function

    def _resolve_function(self, value: str) -> VariabilityFunction:
        function = parse_function_call(value)
        if function is not None:
            return function
        if value in self.functions:
            return self.functions[value]
        if FUNCTION_NAME.match(value):
            raise ConfigurationError(f"Attempted to assign with an undefined function {value!r}")
        if "," in value:
            raise ConfigurationError("Attempted to assign with values but no specific function")
        raise ConfigurationError(f"Expected a variability function, got {value!r}")

    @staticmethod
    def _curve_for(normalized: str) -> Optional[CurveName]:
        for label, curve in CURVE_KEYS.items():
            if label in normalized:
                return curve
        return None

    def _set_shape(self, value: str) -> None:
        value = value.strip()
        match = TRAPEZOID.match(value)
        if match:
            argument = match.group(1).strip()
            if not argument.isdigit():
                raise ConfigurationError(f"Invalid input for trapezoidal cross section: {value!r}")
            self.shape = CrossSectionShape.TRAPEZOID
            self.base_edges = int(argument)
            return
        try:
            self.shape = CrossSectionShape(value)
        except ValueError:
            raise ConfigurationError(f"Invalid cross-sectional shape: {value!r}") from None
        if self.shape is CrossSectionShape.TRAPEZOID:
            raise ConfigurationError("The TZ shape needs a base edge count, e.g. TZ(2)")

    def _build_parameters(self) -> ParameterSet:
        try:
            return ParameterSet(shape=self.shape, base_edges=self.base_edges, **self.values)
        except ValidationError as exc:
            problems: List[str] = []
            for error in exc.errors():
                location = ".".join(str(part) for part in error["loc"]) or "parameters"
                if error["type"] == "missing":
                    problems.append(f"required parameter {location} was not set")
                else:
                    problems.append(f"{location}: {error['msg']}")
            raise ConfigurationError("; ".join(problems)) from None


def parse_input_text(text: str) -> RiverInput:
    """Parse input-file text."""
    return InputFileParser().parse(text)


def load_input(path: Union[str, Path]) -> RiverInput:
    """
    Read and parse an input file.

    Raises:
        ConfigurationError: If the file does not exist or is invalid
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Input file {str(path)!r} was not found")
    return InputFileParser().parse(path.read_text(encoding="utf-8"), source=path)
