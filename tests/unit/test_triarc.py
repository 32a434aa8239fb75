"""
Unit tests for the TriArc (concave triangle) shape.
"""

import numpy as np
import pytest

from chipcarve.datatypes import HitRegion
from chipcarve.errors import GeometryError
from chipcarve.triarc import BULGE_MAX, BULGE_MIN, DEFAULT_BULGE, TriArc, clamp_bulge


class TestConstruction:
    """Creating triangles and clamping bulges."""

    def test_default_bulges(self, equilateral):
        assert equilateral.bulges == [DEFAULT_BULGE] * 3

    def test_bulges_are_clamped(self):
        tri = TriArc((0, 0), (10, 0), (5, 8), bulges=[0.5, -2.0, -0.3])
        assert tri.bulges[0] == BULGE_MAX
        assert BULGE_MIN < tri.bulges[1] < BULGE_MIN + 1e-5
        assert tri.bulges[2] == pytest.approx(-0.3)

    def test_zero_length_edge_raises(self):
        with pytest.raises(GeometryError):
            TriArc((0, 0), (0, 0), (5, 5))

    def test_wrong_bulge_count_raises(self):
        with pytest.raises(GeometryError):
            TriArc((0, 0), (10, 0), (5, 8), bulges=[-0.1, -0.1])

    def test_clamp_bulge_nan(self):
        assert clamp_bulge(float("nan")) == DEFAULT_BULGE


class TestDerivedGeometry:
    """Handles, normals and arc parameters."""

    def test_center_is_vertex_mean(self, triarc):
        c = triarc.center
        assert c.x == pytest.approx(50.0)
        assert c.y == pytest.approx(100.0 / 3.0)

    def test_sagitta(self, triarc):
        assert triarc.sagitta(0) == pytest.approx(12.5)
        assert triarc.arc_offsets()[0] == pytest.approx(12.5)

    def test_arc_midpoint_points_inward(self, triarc):
        m0 = triarc.arc_midpoints()[0]
        assert m0.x == pytest.approx(50.0)
        assert m0.y == pytest.approx(12.5)

    def test_normals_point_at_centroid_for_either_winding(self):
        cw = TriArc((0, 0), (50, 100), (100, 0), bulges=[-0.25] * 3)
        ccw = TriArc((0, 0), (100, 0), (50, 100), bulges=[-0.25] * 3)
        for tri in (cw, ccw):
            for i in range(3):
                a, b = tri.arc_chord(i)
                mid = ((a.x + b.x) / 2, (a.y + b.y) / 2)
                n = tri.arc_normal(i)
                to_center = (tri.center.x - mid[0], tri.center.y - mid[1])
                assert n.x * to_center[0] + n.y * to_center[1] > 0

    def test_arc_parameters(self, triarc):
        params = triarc.arc_parameters(0)
        assert params.radius == pytest.approx(106.25)
        assert params.center.x == pytest.approx(50.0)
        assert params.center.y == pytest.approx(-93.75)

    def test_bounds_follow_vertices(self, triarc):
        b = triarc.bounds
        assert (b.min_x, b.min_y, b.max_x, b.max_y) == (0.0, 0.0, 100.0, 100.0)


class TestContains:
    """Concave-outline containment."""

    def test_inside(self, triarc):
        assert triarc.contains((50, 50))

    def test_between_chord_and_arc_is_outside(self, triarc):
        assert not triarc.contains((50, 5))

    def test_far_outside(self, triarc):
        assert not triarc.contains((-10, -10))


class TestEditing:
    """Vertex, arc and curvature edits."""

    def test_move_arc(self, triarc):
        triarc.move_arc(0, 20.0)
        assert triarc.bulges[0] == pytest.approx(-0.4)

    def test_deeper_arc_only_changes_that_bulge(self, triarc):
        handle_distance = triarc.arc_offsets()[0]
        triarc.move_arc(0, handle_distance + 3.0)
        assert triarc.bulges[0] < -0.25
        assert triarc.bulges[1:] == [-0.25, -0.25]

    def test_move_arc_outward_clamps(self, triarc):
        triarc.move_arc(0, -5.0)
        assert triarc.bulges[0] == BULGE_MAX

    def test_move_arc_deep_clamps(self, triarc):
        triarc.move_arc(0, 80.0)
        assert BULGE_MIN < triarc.bulges[0] < -0.98

    def test_move_vertex_keeps_adjacent_sagittas(self, triarc):
        before = [triarc.sagitta(0), triarc.sagitta(1)]
        triarc.move_vertex(1, (200.0, 0.0))
        assert triarc.bulges[0] == pytest.approx(-0.125)
        assert triarc.bulges[1] == pytest.approx(-0.15504, abs=1e-5)
        assert triarc.bulges[2] == pytest.approx(-0.25)
        assert [triarc.sagitta(0), triarc.sagitta(1)] == pytest.approx(before)

    def test_move_vertex_onto_neighbour_keeps_bulge(self, triarc):
        triarc.move_vertex(1, (0.0, 0.0))
        assert triarc.bulges[0] == pytest.approx(-0.25)

    def test_set_arc_midpoint_projects_toward_centroid(self, triarc):
        triarc.set_arc_midpoint(0, (80.0, 20.0))
        assert triarc.bulges[0] == pytest.approx(-0.4)
        triarc.set_arc_midpoint(0, (50.0, -10.0))
        assert triarc.bulges[0] == BULGE_MAX

    def test_random_edit_sequence_stays_concave(self, triarc, rng):
        for _ in range(300):
            if rng.random() < 0.5:
                index = int(rng.integers(3))
                if rng.random() < 0.2:
                    target = triarc.vertices[(index + 1 + int(rng.integers(2))) % 3]
                else:
                    target = tuple(rng.uniform(-200.0, 200.0, size=2))
                triarc.move_vertex(index, target)
            else:
                triarc.move_arc(int(rng.integers(3)), float(rng.uniform(-500.0, 500.0)))
            assert all(BULGE_MIN < b <= BULGE_MAX for b in triarc.bulges)
            triarc.hit_test((0.0, 0.0), 1.0)
            bounds = triarc.bounds
            assert bounds.min_x <= bounds.max_x and bounds.min_y <= bounds.max_y
            assert np.isfinite(triarc.outline()).all()

    def test_set_bulge(self, triarc):
        triarc.set_bulge(2, -0.5)
        assert triarc.bulges[2] == -0.5

    def test_jiggle_radius_stays_in_range(self, triarc, rng):
        for _ in range(100):
            triarc.jiggle_radius(90.0, rng)
            assert all(BULGE_MIN < b <= BULGE_MAX for b in triarc.bulges)


class TestHitTest:
    """Handle and body classification."""

    def test_arc_handle(self, triarc):
        hit = triarc.hit_test((50.0, 12.5), 1.0)
        assert hit.region is HitRegion.ARC
        assert hit.arc_index == 0

    def test_vertex(self, triarc):
        hit = triarc.hit_test((99.0, 1.0), 1.0)
        assert hit.region is HitRegion.VERTEX
        assert hit.vertex_index == 1

    def test_body(self, triarc):
        assert triarc.hit_test((50.0, 50.0), 10.0).region is HitRegion.BODY

    def test_miss_in_concave_gap(self, triarc):
        assert triarc.hit_test((50.0, 5.0), 10.0).region is HitRegion.NONE


class TestPersistence:
    """JSON conversion."""

    def test_to_json(self, triarc):
        data = triarc.to_json()
        assert data["type"] == "TRI_ARC"
        assert data["curvatures"] == [-0.25, -0.25, -0.25]
        assert len(data["vertices"]) == 3

    def test_outline_sample_count(self, triarc):
        pts = triarc.outline(samples_per_arc=5)
        assert pts.shape == (13, 2)
        assert np.allclose(pts[0], pts[-1])
