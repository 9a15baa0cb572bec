"""
py-riverbuilder: synthetic river valley geometry.

Generates the centerline, channel cross-sections, banks, floodplain and
terrace edges of a meandering river valley from scalar parameters and
variability functions, and exports them as a point cloud with summary
statistics.
"""

from .core import (
    ConfigurationError,
    CurveName,
    CurveSet,
    GeometryError,
    LCGPRNG,
    OutputExistsError,
    ParameterSet,
    RiverBuilderError,
    RiverValleyGenerator,
    ValleyModel,
)
from .pipeline import build_river_valley

__version__ = "0.1.0"

__all__ = ['ConfigurationError', 'CurveName', 'CurveSet', 'GeometryError', 'LCGPRNG',
           'OutputExistsError', 'ParameterSet', 'RiverBuilderError', 'RiverValleyGenerator',
           'ValleyModel', 'build_river_valley']
