"""Shared contract for editable carving shapes.

A shape owns a fixed number of vertices plus one curvature value per arc.
Everything else (centre, bounds, handles, outline) is derived on demand from
that storage so nothing can drift out of sync after an edit.
"""
from __future__ import annotations

import copy
import math
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from chipcarve.config import DEFAULT_CONFIG
from chipcarve.datatypes import NO_HIT, Bounds, HitRegion, HitResult, MirrorAxis, Point, PointLike, ShapeType
from chipcarve.geometry import (
    arc_points_through,
    chord_midpoint,
    distance,
    is_angle_in_arc_sweep,
    perpendicular_normal,
)
from chipcarve.hittest import bounds_from_points
from chipcarve.intersect2d import EPS, dot, sub
from chipcarve.transform2d import deg_to_rad, mirror_point, rotate_point, translate_point

HANDLE_HIT_PX = DEFAULT_CONFIG.handle_hit_px

MAX_JIGGLE_POSITION_MM = 50.0
MAX_JIGGLE_ROTATION_DEG = 180.0
MAX_JIGGLE_RADIUS_PCT = 90.0
JIGGLE_SAFETY_BOUND_MM = 1000.0


@dataclass(frozen=True)
class ArcParameters:
    center: Point
    radius: float
    start_angle: float
    end_angle: float
    counter_clockwise: bool


def signed_uniform(rng: Optional[np.random.Generator]) -> float:
    """Signed sample in ``[-1, 1)``."""
    gen = rng if rng is not None else np.random.default_rng()
    return (float(gen.random()) - 0.5) * 2.0


class Shape(ABC):
    shape_type: ShapeType
    arc_count: int

    def __init__(self, shape_id: Optional[str] = None) -> None:
        self.id = shape_id or uuid.uuid4().hex
        self.selected = False
        self.active_hit: Optional[HitResult] = None

    def __repr__(self) -> str:
        pts = ", ".join(f"({p.x:.3f}, {p.y:.3f})" for p in self.vertices)
        return f"{type(self).__name__}(id={self.id!r}, vertices=[{pts}])"

    # ------------------------------------------------------------------
    # Storage and derived geometry

    @property
    @abstractmethod
    def vertices(self) -> List[Point]:
        ...

    @abstractmethod
    def _replace_vertices(self, vertices: Sequence[Point]) -> None:
        """Swap in transformed vertices without touching curvature."""

    @property
    def center(self) -> Point:
        pts = self.vertices
        return Point(sum(p.x for p in pts) / len(pts), sum(p.y for p in pts) / len(pts))

    @property
    def bounds(self) -> Bounds:
        return bounds_from_points(self.outline())

    @abstractmethod
    def arc_chord(self, index: int) -> Tuple[Point, Point]:
        ...

    @abstractmethod
    def arc_midpoints(self) -> List[Point]:
        """Handle positions, one per arc, at the arc's peak."""

    @abstractmethod
    def arc_offsets(self) -> List[float]:
        ...

    @abstractmethod
    def arc_parameters(self, index: int) -> Optional[ArcParameters]:
        ...

    @abstractmethod
    def contains(self, point: PointLike) -> bool:
        ...

    def arc_normal(self, index: int) -> Point:
        """Unit normal of arc ``index``'s chord, pointing from the chord toward its handle."""
        a, b = self.arc_chord(index)
        n = perpendicular_normal(a, b)
        mids = self.arc_midpoints()
        if index < len(mids) and dot(n, sub(mids[index], chord_midpoint(a, b))) < 0.0:
            return Point(-n.x, -n.y)
        return n

    def _arc_parameters_from(self, index: int, radius: float, sagitta: float) -> ArcParameters:
        a, b = self.arc_chord(index)
        mid = chord_midpoint(a, b)
        n = self.arc_normal(index)
        center = Point(mid.x - n.x * (radius - sagitta), mid.y - n.y * (radius - sagitta))
        peak = Point(mid.x + n.x * sagitta, mid.y + n.y * sagitta)
        start = math.atan2(a.y - center.y, a.x - center.x)
        end = math.atan2(b.y - center.y, b.x - center.x)
        through = math.atan2(peak.y - center.y, peak.x - center.x)
        return ArcParameters(center, radius, start, end, is_angle_in_arc_sweep(through, start, end, True))

    def outline(self, samples_per_arc: int = 33) -> np.ndarray:
        """Closed boundary polyline (first point repeated at the end)."""
        mids = self.arc_midpoints()
        if len(mids) != self.arc_count:
            return np.asarray(self.vertices, dtype=float)
        parts = []
        for i, peak in enumerate(mids):
            a, b = self.arc_chord(i)
            pts = arc_points_through(a, peak, b, samples_per_arc)
            parts.append(pts if i == 0 else pts[1:])
        return np.vstack(parts)

    # ------------------------------------------------------------------
    # Hit testing

    def hit_test(self, point: PointLike, scale: float, handle_px: float = HANDLE_HIT_PX) -> HitResult:
        """Classify ``point``: vertex handle, then arc handle, then body."""
        radius = handle_px / scale
        best_vertex: Optional[int] = None
        best_dist = math.inf
        for i, v in enumerate(self.vertices):
            d = distance(point, v)
            if d <= radius and d < best_dist:
                best_vertex, best_dist = i, d
        if best_vertex is not None:
            return HitResult(HitRegion.VERTEX, vertex_index=best_vertex)

        best_arc: Optional[int] = None
        best_dist = math.inf
        for i, m in enumerate(self.arc_midpoints()):
            dx = abs(point[0] - m.x)
            dy = abs(point[1] - m.y)
            if dx <= radius and dy <= radius:
                d = math.hypot(dx, dy)
                if d < best_dist:
                    best_arc, best_dist = i, d
        if best_arc is not None:
            return HitResult(HitRegion.ARC, arc_index=best_arc)

        if self.contains(point):
            return HitResult(HitRegion.BODY)
        return NO_HIT

    # ------------------------------------------------------------------
    # Editing

    @abstractmethod
    def move_vertex(self, index: int, position: PointLike) -> None:
        ...

    @abstractmethod
    def move_arc(self, index: int, offset: float) -> None:
        ...

    def set_arc_midpoint(self, index: int, point: PointLike) -> None:
        """Drag arc ``index``'s handle to ``point`` (projected onto the chord normal)."""
        a, b = self.arc_chord(index)
        self.move_arc(index, dot(sub(point, chord_midpoint(a, b)), self.arc_normal(index)))

    @abstractmethod
    def jiggle_radius(self, variation_pct: float, rng: Optional[np.random.Generator] = None) -> None:
        ...

    def move(self, delta: PointLike) -> None:
        self._replace_vertices([translate_point(v, delta) for v in self.vertices])

    def rotate(self, angle: float, center: Optional[PointLike] = None) -> None:
        pivot = self.center if center is None else center
        self._replace_vertices([rotate_point(v, angle, pivot) for v in self.vertices])

    def mirror(self, axis: MirrorAxis | str, center: Optional[PointLike] = None) -> None:
        """Reflect across the horizontal or vertical line through ``center``."""
        axis = MirrorAxis(axis)
        c = self.center if center is None else Point(float(center[0]), float(center[1]))
        if axis is MirrorAxis.HORIZONTAL:
            line = (Point(c[0] - 1.0, c[1]), Point(c[0] + 1.0, c[1]))
        else:
            line = (Point(c[0], c[1] - 1.0), Point(c[0], c[1] + 1.0))
        self._replace_vertices([mirror_point(v, *line) for v in self.vertices])

    def jiggle(
        self,
        position_variation: float = 1.0,
        rotation_variation: float = 5.0,
        radius_variation: float = 5.0,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Randomly nudge position (mm), rotation (degrees) and curvature (percent)."""
        position_variation = min(max(position_variation, 0.0), MAX_JIGGLE_POSITION_MM)
        rotation_variation = min(max(rotation_variation, 0.0), MAX_JIGGLE_ROTATION_DEG)
        radius_variation = min(max(radius_variation, 0.0), MAX_JIGGLE_RADIUS_PCT)

        if position_variation > 0.0:
            delta = Point(signed_uniform(rng) * position_variation, signed_uniform(rng) * position_variation)
            c = self.center
            if abs(c.x + delta.x) > JIGGLE_SAFETY_BOUND_MM or abs(c.y + delta.y) > JIGGLE_SAFETY_BOUND_MM:
                logger.warning("Skipping jiggle translation of {}: centre would leave the safe area", self.id)
            else:
                self.move(delta)

        if rotation_variation > 0.0:
            self.rotate(deg_to_rad(signed_uniform(rng) * rotation_variation))

        if radius_variation > 0.0:
            self.jiggle_radius(radius_variation, rng)

    # ------------------------------------------------------------------
    # Copy and persistence

    def clone(self, fresh_id: bool = False) -> "Shape":
        """Deep value copy; keeps the id unless ``fresh_id`` is set."""
        twin = copy.deepcopy(self)
        twin.active_hit = None
        if fresh_id:
            twin.id = uuid.uuid4().hex
        return twin

    @abstractmethod
    def to_json(self) -> Dict[str, Any]:
        ...

    def _base_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.shape_type.value,
            "selected": self.selected,
            "vertices": [{"x": v.x, "y": v.y} for v in self.vertices],
        }

    @staticmethod
    def from_json(data: Dict[str, Any]) -> "Shape":
        from chipcarve.factory import shape_from_json

        return shape_from_json(data)


def vertices_close(a: Shape, b: Shape, tol: float = 1e-9) -> bool:
    """True if both shapes have the same vertices within ``tol``."""
    va, vb = a.vertices, b.vertices
    return len(va) == len(vb) and all(distance(p, q) <= tol for p, q in zip(va, vb))


__all__ = [
    "HANDLE_HIT_PX",
    "MAX_JIGGLE_POSITION_MM",
    "MAX_JIGGLE_ROTATION_DEG",
    "MAX_JIGGLE_RADIUS_PCT",
    "JIGGLE_SAFETY_BOUND_MM",
    "EPS",
    "ArcParameters",
    "signed_uniform",
    "Shape",
    "vertices_close",
]
