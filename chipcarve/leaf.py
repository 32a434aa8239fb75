"""Leaf (vesica) shape: two equal-radius arcs through a pair of foci."""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from chipcarve.datatypes import Point, PointLike, ShapeType, as_point
from chipcarve.errors import GeometryError
from chipcarve.geometry import (
    chord_midpoint,
    distance,
    perpendicular_normal,
    radius_from_chord_and_sagitta,
)
from chipcarve.schema import LeafModel
from chipcarve.shapes import EPS, ArcParameters, Shape, signed_uniform

LEAF_RADIUS_FACTOR = 0.65
# sagitta/chord used when a vertex drag starts from coincident foci
_FALLBACK_SAGITTA_RATIO = 0.25
_MIN_SAGITTA_RATIO = 0.0005


class Leaf(Shape):
    """Symmetric lens between ``focus1`` and ``focus2``.

    Both boundary arcs share ``radius``; the lens bulges by the same sagitta
    on either side of the chord. The radius can never be smaller than half
    the focus distance.
    """

    shape_type = ShapeType.LEAF
    arc_count = 2

    def __init__(
        self,
        focus1: PointLike,
        focus2: PointLike,
        radius: Optional[float] = None,
        shape_id: Optional[str] = None,
    ) -> None:
        super().__init__(shape_id)
        self._foci = [as_point(focus1), as_point(focus2)]
        chord = self.chord_length
        if radius is None:
            radius = chord * LEAF_RADIUS_FACTOR
        radius = float(radius)
        if not math.isfinite(radius) or radius <= 0.0:
            raise GeometryError(f"Leaf radius must be positive, got {radius!r}")
        if radius < chord / 2.0 - EPS:
            raise GeometryError(f"Leaf radius {radius:.6g} cannot span foci {chord:.6g} apart")
        self._radius = max(radius, chord / 2.0)

    # ------------------------------------------------------------------
    # Storage

    @property
    def vertices(self) -> List[Point]:
        return list(self._foci)

    def _replace_vertices(self, vertices: Sequence[Point]) -> None:
        self._foci = [as_point(vertices[0]), as_point(vertices[1])]

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def chord_length(self) -> float:
        return distance(self._foci[0], self._foci[1])

    @property
    def sagitta(self) -> float:
        return self._radius - self._circle_offset()

    def _circle_offset(self) -> float:
        """Distance from the chord midpoint to either arc's circle centre."""
        half = self.chord_length / 2.0
        return math.sqrt(max(0.0, self._radius * self._radius - half * half))

    # ------------------------------------------------------------------
    # Derived geometry

    @property
    def center(self) -> Point:
        return chord_midpoint(self._foci[0], self._foci[1])

    def arc_chord(self, index: int) -> Tuple[Point, Point]:
        if index == 0:
            return self._foci[0], self._foci[1]
        if index == 1:
            return self._foci[1], self._foci[0]
        raise IndexError(f"Leaf has no arc {index}")

    def arc_midpoints(self) -> List[Point]:
        if self.chord_length < EPS:
            return []
        mid = self.center
        n = perpendicular_normal(self._foci[0], self._foci[1])
        s = self.sagitta
        return [Point(mid.x - n.x * s, mid.y - n.y * s), Point(mid.x + n.x * s, mid.y + n.y * s)]

    def arc_offsets(self) -> List[float]:
        s = self.sagitta
        return [-s, s]

    def arc_parameters(self, index: int) -> Optional[ArcParameters]:
        self.arc_chord(index)
        if self.chord_length < EPS:
            return None
        return self._arc_parameters_from(index, self._radius, self.sagitta)

    def contains(self, point: PointLike) -> bool:
        """Inside both circles whose intersection forms the lens."""
        chord = self.chord_length
        if chord < EPS or chord > 2.0 * self._radius + EPS:
            return False
        mid = self.center
        n = perpendicular_normal(self._foci[0], self._foci[1])
        h = self._circle_offset()
        c1 = Point(mid.x + n.x * h, mid.y + n.y * h)
        c2 = Point(mid.x - n.x * h, mid.y - n.y * h)
        limit = self._radius + 1e-9
        return distance(point, c1) <= limit and distance(point, c2) <= limit

    # ------------------------------------------------------------------
    # Editing

    def move_vertex(self, index: int, position: PointLike) -> None:
        """Move one focus, keeping the lens' sagitta-to-chord ratio."""
        if index not in (0, 1):
            raise IndexError(f"Leaf has no vertex {index}")
        old_chord = self.chord_length
        ratio = self.sagitta / old_chord if old_chord > EPS else _FALLBACK_SAGITTA_RATIO
        self._foci[index] = as_point(position)
        chord = self.chord_length
        sagitta = ratio * chord
        if chord < EPS or sagitta < EPS:
            return
        self._radius = radius_from_chord_and_sagitta(chord, min(sagitta, chord / 2.0))

    def move_arc(self, index: int, offset: float) -> None:
        """Set both arcs' sagitta to ``|offset|``, limited to a half-circle."""
        self.arc_chord(index)
        chord = self.chord_length
        if chord < EPS or math.isnan(offset):
            return
        sagitta = min(max(abs(offset), chord * _MIN_SAGITTA_RATIO), chord / 2.0)
        self._radius = radius_from_chord_and_sagitta(chord, sagitta)

    def jiggle_radius(self, variation_pct: float, rng: Optional[np.random.Generator] = None) -> None:
        chord = self.chord_length
        lower = max(0.1, chord / 2.0 + 0.1)
        upper = max(self._radius * 3.0, lower)
        candidate = self._radius + signed_uniform(rng) * (variation_pct / 100.0) * self._radius
        self._radius = min(max(candidate, lower), upper)

    # ------------------------------------------------------------------
    # Copy and persistence

    def to_json(self) -> Dict[str, Any]:
        data = self._base_json()
        data["radius"] = self._radius
        return data

    @classmethod
    def from_model(cls, model: LeafModel) -> "Leaf":
        f1, f2 = model.vertices
        leaf = cls((f1.x, f1.y), (f2.x, f2.y), model.radius, shape_id=model.id)
        leaf.selected = model.selected
        return leaf


__all__ = ["LEAF_RADIUS_FACTOR", "Leaf"]
