"""
Core river valley synthesis.
"""

from .errors import ConfigurationError, GeometryError, OutputExistsError, RiverBuilderError
from .functions import CurveName, CurveSet, FunctionFamily, VariabilityEvaluator, make_function
from .lcg_prng import LCGPRNG
from .parameters import CrossSectionShape, ParameterSet
from .valley import RiverValleyGenerator, ValleyModel

__all__ = ['ConfigurationError', 'GeometryError', 'OutputExistsError', 'RiverBuilderError',
           'CurveName', 'CurveSet', 'FunctionFamily', 'VariabilityEvaluator', 'make_function',
           'LCGPRNG', 'CrossSectionShape', 'ParameterSet',
           'RiverValleyGenerator', 'ValleyModel']
