"""
Exception types raised by the river valley synthesis.

Every error is fatal: callers are expected to stop the run and report the
message rather than retry.
"""


class RiverBuilderError(Exception):
    """Base class for all river builder failures."""


class ConfigurationError(RiverBuilderError, ValueError):
    """Input file, parameter or function definition problem."""


class GeometryError(RiverBuilderError, ArithmeticError):
    """Degenerate geometry found while walking the stations."""


class OutputExistsError(RiverBuilderError, FileExistsError):
    """Output files already exist and overwriting is disabled."""
