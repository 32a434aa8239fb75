"""
Unit tests for the Leaf (vesica) shape.
"""

import math

import numpy as np
import pytest

from chipcarve.datatypes import HitRegion
from chipcarve.errors import GeometryError
from chipcarve.leaf import LEAF_RADIUS_FACTOR, Leaf


class TestConstruction:
    """Creating leaves from foci."""

    def test_default_radius(self, leaf):
        """Radius defaults to 0.65 of the focus distance."""
        assert leaf.radius == pytest.approx(10.0 * LEAF_RADIUS_FACTOR)
        assert leaf.sagitta == pytest.approx(6.5 - math.sqrt(6.5 ** 2 - 25.0))

    def test_explicit_radius(self):
        assert Leaf((0, 0), (10, 0), radius=10.0).radius == 10.0

    def test_half_chord_radius_is_allowed(self):
        leaf = Leaf((0, 0), (10, 0), radius=5.0)
        assert leaf.sagitta == pytest.approx(5.0)

    @pytest.mark.parametrize("radius", [4.0, 0.0, -1.0, float("nan"), float("inf")])
    def test_impossible_radius_raises(self, radius):
        with pytest.raises(GeometryError):
            Leaf((0, 0), (10, 0), radius=radius)

    def test_generated_ids_are_unique(self):
        assert Leaf((0, 0), (1, 0)).id != Leaf((0, 0), (1, 0)).id

    def test_explicit_id(self):
        assert Leaf((0, 0), (1, 0), shape_id="leaf-1").id == "leaf-1"


class TestDerivedGeometry:
    """Centre, handles, arcs and bounds."""

    def test_center_is_midpoint(self, leaf):
        assert leaf.center == (5.0, 0.0)

    def test_arc_midpoints(self, leaf):
        s = leaf.sagitta
        m0, m1 = leaf.arc_midpoints()
        assert m0.x == pytest.approx(5.0)
        assert m0.y == pytest.approx(-s)
        assert m1.y == pytest.approx(s)

    def test_arc_offsets(self, leaf):
        assert leaf.arc_offsets() == pytest.approx([-leaf.sagitta, leaf.sagitta])

    def test_arc_normals_point_at_handles(self, leaf):
        assert leaf.arc_normal(0) == pytest.approx((0.0, -1.0))
        assert leaf.arc_normal(1) == pytest.approx((0.0, 1.0))

    def test_arc_parameters(self, leaf):
        params = leaf.arc_parameters(0)
        h = math.sqrt(6.5 ** 2 - 25.0)
        assert params.radius == pytest.approx(6.5)
        assert params.center.x == pytest.approx(5.0)
        assert params.center.y == pytest.approx(h)

    def test_arc_index_out_of_range(self, leaf):
        with pytest.raises(IndexError):
            leaf.arc_chord(2)

    def test_bounds(self):
        leaf = Leaf((0, 0), (10, 0), radius=10.0)
        b = leaf.bounds
        s = 10.0 - math.sqrt(75.0)
        assert b.min_x == pytest.approx(0.0)
        assert b.max_x == pytest.approx(10.0)
        assert b.min_y == pytest.approx(-s, abs=1e-6)
        assert b.max_y == pytest.approx(s, abs=1e-6)

    def test_outline_is_closed(self, leaf):
        pts = leaf.outline()
        assert np.allclose(pts[0], pts[-1])

    def test_coincident_foci_have_no_handles(self):
        leaf = Leaf((3, 3), (3, 3), radius=1.0)
        assert leaf.arc_midpoints() == []
        assert leaf.arc_parameters(0) is None
        assert not leaf.contains((3, 3))


class TestContains:
    """Lens containment."""

    def test_inside(self, leaf):
        assert leaf.contains((5, 2))
        assert leaf.contains((5, 0))

    def test_outside(self, leaf):
        assert not leaf.contains((5, 3))
        assert not leaf.contains((-1, 0))

    def test_foci_are_inside(self, leaf):
        assert leaf.contains((0, 0))
        assert leaf.contains((10, 0))


class TestEditing:
    """Vertex and arc drags."""

    def test_move_arc_sets_sagitta(self, leaf):
        leaf.move_arc(0, 4.0)
        assert leaf.radius == pytest.approx(5.125)
        assert leaf.sagitta == pytest.approx(4.0)

    def test_move_arc_uses_magnitude(self, leaf):
        leaf.move_arc(1, -4.0)
        assert leaf.sagitta == pytest.approx(4.0)

    def test_move_arc_limits_to_half_circle(self, leaf):
        leaf.move_arc(0, 20.0)
        assert leaf.radius == pytest.approx(5.0)

    def test_move_arc_has_minimum(self, leaf):
        leaf.move_arc(0, 0.0)
        assert leaf.sagitta == pytest.approx(10.0 * 0.0005)
        assert math.isfinite(leaf.radius)

    def test_move_arc_ignores_nan(self, leaf):
        leaf.move_arc(0, float("nan"))
        assert leaf.radius == pytest.approx(6.5)

    def test_set_arc_midpoint(self, leaf):
        leaf.set_arc_midpoint(1, (5.0, 4.0))
        assert leaf.sagitta == pytest.approx(4.0)

    def test_move_vertex_keeps_proportions(self, leaf):
        leaf.move_vertex(1, (20.0, 0.0))
        assert leaf.vertices[1] == (20.0, 0.0)
        assert leaf.radius == pytest.approx(13.0)

    def test_move_vertex_index_error(self, leaf):
        with pytest.raises(IndexError):
            leaf.move_vertex(2, (0, 0))

    def test_radius_stays_valid_after_edits(self, leaf):
        for target in [(1, 0), (0.5, 0.5), (40, -30), (0.001, 0)]:
            leaf.move_vertex(1, target)
            assert leaf.radius >= leaf.chord_length / 2.0 - 1e-9

    def test_jiggle_radius_bounds(self, leaf, rng):
        for _ in range(50):
            leaf.jiggle_radius(90.0, rng)
            assert leaf.radius >= leaf.chord_length / 2.0 + 0.1 - 1e-9


class TestHitTest:
    """Handle and body classification."""

    def test_vertex(self, leaf):
        assert leaf.hit_test((0.5, 0.0), 1.0).region is HitRegion.VERTEX

    def test_arc_handle_at_high_zoom(self, leaf):
        hit = leaf.hit_test((5.0, leaf.sagitta), 20.0)
        assert hit.region is HitRegion.ARC
        assert hit.arc_index == 1

    def test_body_at_high_zoom(self, leaf):
        assert leaf.hit_test((5.0, 0.0), 20.0).region is HitRegion.BODY

    def test_miss(self, leaf):
        assert leaf.hit_test((50.0, 50.0), 1.0).region is HitRegion.NONE


class TestPersistence:
    """JSON conversion."""

    def test_to_json(self, leaf):
        data = leaf.to_json()
        assert data["type"] == "LEAF"
        assert data["radius"] == pytest.approx(6.5)
        assert data["vertices"] == [{"x": 0.0, "y": 0.0}, {"x": 10.0, "y": 0.0}]
        assert data["selected"] is False
        assert data["id"] == leaf.id
