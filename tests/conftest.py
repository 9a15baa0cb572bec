"""Shared fixtures for river valley tests."""

import pytest

from py_riverbuilder.core.functions import CurveName, CurveSet, make_function, FunctionFamily
from py_riverbuilder.core.parameters import CrossSectionShape, ParameterSet

BASE_VALUES = dict(
    datum=100.0,
    length=1000.0,
    station_count=50,
    cross_section_points=11,
    valley_slope=0.001,
    channel_slope=0.001,
    critical_shields_stress=0.06,
    bankfull_width=20.0,
    bankfull_width_min=5.0,
    bankfull_depth=2.0,
    median_sediment_size=0.04,
    floodplain_width=10.0,
    terrace_width=15.0,
    floodplain_height=0.5,
    terrace_height=3.0,
    boundary_width=5.0,
)

# Two stations, two points, zero variability, unit depth and datum
MINIMAL_INPUT = """
Datum=1
Length=2
Number of Stations=2
Cross-Section Points=2
Valley Slope=0
Critical Shields Stress=0.06
Bankfull Width=1
Bankfull Width Minimum=0
Bankfull Depth=1
Median Sediment Size=0.04
Floodplain Width=0
Terrace Width=0
Floodplain Height=0
Terrace Height=0
Boundary Width=0
Cross-Sectional Shape=SU
Meandering Centerline Function=SIN(0, 1, 0)
Channel Elevation Function=SIN(0, 1, 0)
Bankfull Width Function=SIN(0, 1, 0)
Thalweg Elevation Function=SIN(0, 1, 0)
Left Floodplain Function=SIN(0, 1, 0)
Right Floodplain Function=SIN(0, 1, 0)
"""


@pytest.fixture
def make_parameters():
    """Factory building a parameter set from defaults plus overrides."""

    def factory(**overrides):
        values = dict(BASE_VALUES)
        values.update(overrides)
        return ParameterSet(**values)

    return factory


@pytest.fixture
def make_curves():
    """Factory building a curve set from {curve: [(family, args), ...]}."""

    def factory(terms_by_curve=None):
        curves = CurveSet()
        for curve, terms in (terms_by_curve or {}).items():
            for family, args in terms:
                curves.add(CurveName(curve), make_function(FunctionFamily(family), args))
        return curves

    return factory


@pytest.fixture
def meandering_curves(make_curves):
    """Meandering channel with varying width and thalweg."""
    return make_curves({
        "centerline": [("SIN", (40, 2, 0))],
        "alignment": [("SIN", (1, 2, 0)), ("COS", (0.1, 6, 0))],
        "width": [("SIN", (0.2, 4, 1.5))],
        "thalweg": [("SIN", (0.3, 4, 0))],
        "left_floodplain": [("SIN", (3, 1, 0))],
        "right_floodplain": [("COS", (3, 1, 0))],
    })


@pytest.fixture
def asymmetric_parameters(make_parameters):
    return make_parameters(shape=CrossSectionShape.ASYMMETRIC_U)
