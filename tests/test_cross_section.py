"""Tests for the cross-section pass."""

import dataclasses

import numpy as np
import pytest

from py_riverbuilder.core.centerline import AlignmentSummary, CenterlineEngine
from py_riverbuilder.core.cross_section import (
    CrossSectionGenerator,
    PointRole,
    lateral_offsets,
    trapezoid_layout,
)
from py_riverbuilder.core.functions import VariabilityEvaluator
from py_riverbuilder.core.lcg_prng import LCGPRNG
from py_riverbuilder.core.parameters import CrossSectionShape


def generate(parameters, curves):
    engine = CenterlineEngine(parameters, curves, VariabilityEvaluator(curves, LCGPRNG(4)))
    centerline = engine.run()
    summary = engine.summarize(centerline)
    return centerline, CrossSectionGenerator(parameters, centerline, summary).run()


class TestLateralOffsets:
    """Test the normalised lateral grid."""

    @pytest.mark.parametrize("points", range(2, 16))
    def test_exact_count(self, points):
        offsets = lateral_offsets(points)
        assert len(offsets) == points
        assert offsets[0] == -1.0
        assert offsets[-1] == 1.0
        np.testing.assert_allclose(offsets, -offsets[::-1])

    def test_odd_count_keeps_centre(self):
        np.testing.assert_allclose(lateral_offsets(5), [-1, -0.5, 0, 0.5, 1])

    def test_even_count_drops_centre(self):
        np.testing.assert_allclose(lateral_offsets(4), [-1, -0.5, 0.5, 1])
        np.testing.assert_allclose(lateral_offsets(2), [-1, 1])


class TestTrapezoidLayout:
    """Test point roles of trapezoidal sections."""

    def test_triangle(self):
        roles = trapezoid_layout(5, 0)
        assert roles == [
            PointRole.BANK,
            PointRole.LEFT_SLOPE,
            PointRole.BASE,
            PointRole.RIGHT_SLOPE,
            PointRole.BANK,
        ]

    def test_rectangle(self):
        roles = trapezoid_layout(7, 7)
        assert roles[0] is PointRole.BANK
        assert roles[-1] is PointRole.BANK
        assert all(role is PointRole.BASE for role in roles[1:-1])

    def test_banks_always_at_ends(self):
        for base in range(0, 10):
            roles = trapezoid_layout(9, base)
            assert roles[0] is PointRole.BANK and roles[-1] is PointRole.BANK


class TestProfiles:
    """Test the three shape families."""

    def test_symmetric_profile(self, make_parameters, make_curves):
        c, sections = generate(make_parameters(), make_curves())
        # Banks at top of bank, centre one depth below
        np.testing.assert_allclose(sections.z[:, 0], c.top_of_bank)
        np.testing.assert_allclose(sections.z[:, -1], c.top_of_bank)
        np.testing.assert_allclose(sections.z[:, 5], c.top_of_bank - 2.0)
        assert np.all(sections.z <= c.top_of_bank[:, None] + 1e-9)

    def test_asymmetric_endpoints_at_bank_top(self, asymmetric_parameters, meandering_curves):
        c, sections = generate(asymmetric_parameters, meandering_curves)
        np.testing.assert_allclose(sections.z[:, 0], c.top_of_bank)
        np.testing.assert_allclose(sections.z[:, -1], c.top_of_bank)
        assert np.all(sections.z >= c.top_of_bank[:, None] - c.depth[:, None] - 1e-9)

    def test_asymmetric_skew_range(self, asymmetric_parameters, meandering_curves):
        _, sections = generate(asymmetric_parameters, meandering_curves)
        assert np.all(sections.skew > 0)
        assert np.all(sections.skew < 1)
        assert np.all(sections.exponent > 0)

    def test_asymmetric_continuous_through_zero_alignment(
        self, asymmetric_parameters, make_curves
    ):
        """Tiny alignments of either sign give nearly the straight profile."""
        straight, _ = generate(asymmetric_parameters, make_curves(
            {"alignment": [("SIN", (0.0, 1, 0))]}
        ))
        centerline = dataclasses.replace(
            straight, alignment=np.resize([-1e-9, 0.0, 1e-9], straight.station_count)
        )
        summary = AlignmentSummary(max_alignment=1.0, sinuosity=1.0, channel_slope=0.001)
        sections = CrossSectionGenerator(asymmetric_parameters, centerline, summary).run()

        relative = sections.z - centerline.top_of_bank[:, None]
        np.testing.assert_allclose(relative[0], relative[1], atol=1e-6)
        np.testing.assert_allclose(relative[2], relative[1], atol=1e-6)
        assert sections.exponent[1] == pytest.approx(1.0)
        assert sections.skew[1] == 0.5

    def test_trapezoid_apex(self, make_parameters, make_curves):
        p = make_parameters(shape=CrossSectionShape.TRAPEZOID, base_edges=0)
        c, sections = generate(p, make_curves())
        np.testing.assert_allclose(sections.z[:, 5], c.top_of_bank - 2.0)
        assert np.sum(np.isclose(sections.z[0], c.top_of_bank[0] - 2.0)) == 1

    def test_trapezoid_rectangle(self, make_parameters, make_curves):
        p = make_parameters(shape=CrossSectionShape.TRAPEZOID, base_edges=11)
        c, sections = generate(p, make_curves())
        base = np.repeat((c.top_of_bank - 2.0)[:, None], 9, axis=1)
        np.testing.assert_allclose(sections.z[:, 1:-1], base)
        np.testing.assert_allclose(sections.z[:, 0], c.top_of_bank)

    def test_trapezoid_slopes_monotonic(self, make_parameters, make_curves):
        p = make_parameters(shape=CrossSectionShape.TRAPEZOID, base_edges=3)
        _, sections = generate(p, make_curves())
        row = sections.z[0]
        lowest = np.argmin(row)
        assert np.all(np.diff(row[: lowest + 1]) <= 0)
        assert np.all(np.diff(row[lowest:]) >= -1e-12)


class TestPlanarProjection:
    """Test that sections stay perpendicular to the centerline."""

    def test_offsets_perpendicular(self, make_parameters, meandering_curves):
        c, sections = generate(make_parameters(), meandering_curves)
        dx = sections.x - c.position[:, None]
        dy = sections.y - c.meander[:, None]
        along = dx * c.dx_ds[:, None] + dy * c.dy_ds[:, None]
        np.testing.assert_allclose(along, 0.0, atol=1e-9)
        np.testing.assert_allclose(np.hypot(dx, dy), np.abs(sections.lateral), atol=1e-9)

    def test_lateral_spans_width(self, make_parameters, meandering_curves):
        c, sections = generate(make_parameters(), meandering_curves)
        np.testing.assert_allclose(sections.lateral[:, -1] - sections.lateral[:, 0], c.width)
