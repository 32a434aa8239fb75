"""
Unit tests for point transforms.
"""

import math

import pytest

from chipcarve.transform2d import (
    angle_between_vectors,
    apply_transform,
    deg_to_rad,
    mirror_point,
    rad_to_deg,
    rotate_point,
    scale_point,
    translate_point,
)


class TestRotate:
    """Rotation about the origin and about a pivot."""

    def test_quarter_turn(self):
        p = rotate_point((1, 0), math.pi / 2)
        assert p.x == pytest.approx(0.0, abs=1e-12)
        assert p.y == pytest.approx(1.0)

    def test_about_pivot(self):
        p = rotate_point((2, 1), math.pi, (1, 1))
        assert p.x == pytest.approx(0.0, abs=1e-12)
        assert p.y == pytest.approx(1.0)

    def test_full_turn_is_identity(self):
        p = rotate_point((3.5, -2.25), 2 * math.pi, (1, 1))
        assert p.x == pytest.approx(3.5)
        assert p.y == pytest.approx(-2.25)


class TestMirror:
    """Reflection across arbitrary lines."""

    def test_horizontal_line(self):
        assert mirror_point((3, 4), (0, 1), (1, 1)) == pytest.approx((3.0, -2.0))

    def test_diagonal_line(self):
        p = mirror_point((1, 0), (0, 0), (1, 1))
        assert p.x == pytest.approx(0.0, abs=1e-12)
        assert p.y == pytest.approx(1.0)

    def test_involution(self):
        once = mirror_point((7, -3), (2, 5), (-1, 9))
        twice = mirror_point(once, (2, 5), (-1, 9))
        assert twice.x == pytest.approx(7.0)
        assert twice.y == pytest.approx(-3.0)

    def test_degenerate_line_returns_point(self):
        assert mirror_point((3, 4), (1, 1), (1, 1)) == (3.0, 4.0)


class TestScaleTranslate:
    """Scaling, translation and the combined transform."""

    def test_uniform_scale(self):
        assert scale_point((2, 3), 2) == (4, 6)

    def test_scale_about_center(self):
        assert scale_point((2, 2), 3, 1, (1, 1)) == (4, 2)

    def test_translate(self):
        assert translate_point((1, 2), (3, -4)) == (4, -2)

    def test_apply_order(self):
        p = apply_transform((1, 0), translate=(10, 0), rotate=math.pi / 2, scale=2.0)
        assert p.x == pytest.approx(10.0)
        assert p.y == pytest.approx(2.0)


class TestAngles:
    """Angle conversion and vector angles."""

    def test_angle_between_quarter(self):
        assert angle_between_vectors((1, 0), (0, 1)) == pytest.approx(math.pi / 2)

    def test_angle_between_clockwise_wraps(self):
        assert angle_between_vectors((1, 0), (0, -1)) == pytest.approx(3 * math.pi / 2)

    def test_degree_round_trip(self):
        assert deg_to_rad(180.0) == pytest.approx(math.pi)
        assert rad_to_deg(math.pi / 2) == pytest.approx(90.0)
