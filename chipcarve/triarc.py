"""TriArc shape: a triangle whose three edges are concave circular arcs."""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from chipcarve.datatypes import Bounds, Point, PointLike, ShapeType, as_point
from chipcarve.errors import GeometryError
from chipcarve.geometry import (
    bulge_to_sagitta,
    chord_midpoint,
    distance,
    perpendicular_normal,
    radius_from_chord_and_sagitta,
    sagitta_to_bulge,
)
from chipcarve.hittest import bounds_from_points, point_in_polygon
from chipcarve.intersect2d import dot, sub
from chipcarve.schema import TriArcModel
from chipcarve.shapes import EPS, ArcParameters, Shape, signed_uniform

DEFAULT_BULGE = -0.125
BULGE_MIN = -0.99
BULGE_MAX = -0.01
# stored bulges stay strictly above BULGE_MIN
_BULGE_FLOOR = BULGE_MIN + 1e-6
_MIN_CHORD = 1e-6
_JIGGLE_BULGE_SPAN = 0.98


def clamp_bulge(bulge: float) -> float:
    """Force ``bulge`` into the concave range ``(-0.99, -0.01]``."""
    if math.isnan(bulge):
        return DEFAULT_BULGE
    return min(max(bulge, _BULGE_FLOOR), BULGE_MAX)


class TriArc(Shape):
    """Concave triangle; edge ``i`` runs from ``v[i]`` to ``v[(i + 1) % 3]``.

    Each edge carries a negative bulge (``2 * sagitta / chord``). Arcs always
    curve toward the centroid regardless of vertex winding.
    """

    shape_type = ShapeType.TRI_ARC
    arc_count = 3

    def __init__(
        self,
        v1: PointLike,
        v2: PointLike,
        v3: PointLike,
        bulges: Optional[Sequence[float]] = None,
        shape_id: Optional[str] = None,
    ) -> None:
        super().__init__(shape_id)
        self._vertices = [as_point(v1), as_point(v2), as_point(v3)]
        for i in range(3):
            a, b = self.arc_chord(i)
            if distance(a, b) < EPS:
                raise GeometryError(f"TriArc edge {i} has zero length")
        if bulges is None:
            bulges = (DEFAULT_BULGE,) * 3
        if len(bulges) != 3:
            raise GeometryError(f"TriArc needs 3 bulge factors, got {len(bulges)}")
        self._bulges = [clamp_bulge(float(b)) for b in bulges]

    # ------------------------------------------------------------------
    # Storage

    @property
    def vertices(self) -> List[Point]:
        return list(self._vertices)

    def _replace_vertices(self, vertices: Sequence[Point]) -> None:
        self._vertices = [as_point(v) for v in vertices[:3]]

    @property
    def bulges(self) -> List[float]:
        return list(self._bulges)

    def set_bulge(self, index: int, bulge: float) -> None:
        self.arc_chord(index)
        self._bulges[index] = clamp_bulge(bulge)

    def chord_length(self, index: int) -> float:
        a, b = self.arc_chord(index)
        return distance(a, b)

    def sagitta(self, index: int) -> float:
        """Depth of arc ``index`` measured from its chord toward the centroid."""
        return abs(bulge_to_sagitta(self._bulges[index], self.chord_length(index)))

    # ------------------------------------------------------------------
    # Derived geometry

    def arc_chord(self, index: int) -> Tuple[Point, Point]:
        if not 0 <= index < 3:
            raise IndexError(f"TriArc has no edge {index}")
        return self._vertices[index], self._vertices[(index + 1) % 3]

    def arc_normal(self, index: int) -> Point:
        """Chord normal flipped to point at the centroid."""
        a, b = self.arc_chord(index)
        n = perpendicular_normal(a, b)
        if dot(n, sub(self.center, chord_midpoint(a, b))) < 0.0:
            return Point(-n.x, -n.y)
        return n

    def arc_midpoints(self) -> List[Point]:
        mids: List[Point] = []
        for i in range(3):
            a, b = self.arc_chord(i)
            mid = chord_midpoint(a, b)
            n = self.arc_normal(i)
            s = self.sagitta(i)
            mids.append(Point(mid.x + n.x * s, mid.y + n.y * s))
        return mids

    def arc_offsets(self) -> List[float]:
        return [self.sagitta(i) for i in range(3)]

    def arc_parameters(self, index: int) -> Optional[ArcParameters]:
        chord = self.chord_length(index)
        sagitta = self.sagitta(index)
        if chord < EPS or sagitta < EPS:
            return None
        return self._arc_parameters_from(index, radius_from_chord_and_sagitta(chord, sagitta), sagitta)

    @property
    def bounds(self) -> Bounds:
        return bounds_from_points(self._vertices)

    def contains(self, point: PointLike) -> bool:
        return point_in_polygon(point, self.outline())

    # ------------------------------------------------------------------
    # Editing

    def _edges_at(self, vertex: int) -> Tuple[int, int]:
        return (vertex - 1) % 3, vertex

    def move_vertex(self, index: int, position: PointLike) -> None:
        """Move vertex ``index``; the two edges meeting there keep their sagitta."""
        if not 0 <= index < 3:
            raise IndexError(f"TriArc has no vertex {index}")
        edges = self._edges_at(index)
        kept = {e: self.sagitta(e) for e in edges}
        self._vertices[index] = as_point(position)
        for e in edges:
            chord = self.chord_length(e)
            if chord < _MIN_CHORD:
                continue
            self._bulges[e] = clamp_bulge(-sagitta_to_bulge(kept[e], chord))

    def move_arc(self, index: int, offset: float) -> None:
        """Set arc ``index``'s depth toward the centroid to ``offset``."""
        chord = self.chord_length(index)
        if chord < _MIN_CHORD or math.isnan(offset):
            return
        self._bulges[index] = clamp_bulge(-sagitta_to_bulge(offset, chord))

    def jiggle_radius(self, variation_pct: float, rng: Optional[np.random.Generator] = None) -> None:
        span = _JIGGLE_BULGE_SPAN * variation_pct / 100.0
        self._bulges = [clamp_bulge(b + signed_uniform(rng) * span) for b in self._bulges]

    # ------------------------------------------------------------------
    # Copy and persistence

    def to_json(self) -> Dict[str, Any]:
        data = self._base_json()
        data["curvatures"] = list(self._bulges)
        return data

    @classmethod
    def from_model(cls, model: TriArcModel) -> "TriArc":
        pts = [(v.x, v.y) for v in model.vertices]
        tri = cls(*pts, bulges=model.curvatures, shape_id=model.id)
        tri.selected = model.selected
        return tri


__all__ = ["DEFAULT_BULGE", "BULGE_MIN", "BULGE_MAX", "clamp_bulge", "TriArc"]
