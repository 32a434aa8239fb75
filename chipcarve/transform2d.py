"""Point transforms used by shape editing and the transformation manager."""
from __future__ import annotations

import math
from typing import Optional

from chipcarve.datatypes import Point, PointLike
from chipcarve.geometry import normalize_angle
from chipcarve.intersect2d import EPS, cross, dot

_ORIGIN = Point(0.0, 0.0)


def rotate_point(p: PointLike, angle: float, center: PointLike = _ORIGIN) -> Point:
    """Rotate ``p`` by ``angle`` radians (counter-clockwise) about ``center``."""
    c = math.cos(angle)
    s = math.sin(angle)
    dx = p[0] - center[0]
    dy = p[1] - center[1]
    return Point(center[0] + dx * c - dy * s, center[1] + dx * s + dy * c)


def mirror_point(p: PointLike, line_start: PointLike, line_end: PointLike) -> Point:
    """Reflect ``p`` across the infinite line through ``line_start`` and ``line_end``."""
    dx = line_end[0] - line_start[0]
    dy = line_end[1] - line_start[1]
    length_sq = dx * dx + dy * dy
    if length_sq < EPS:
        return Point(float(p[0]), float(p[1]))
    t = ((p[0] - line_start[0]) * dx + (p[1] - line_start[1]) * dy) / length_sq
    foot_x = line_start[0] + t * dx
    foot_y = line_start[1] + t * dy
    return Point(2.0 * foot_x - p[0], 2.0 * foot_y - p[1])


def scale_point(p: PointLike, sx: float, sy: Optional[float] = None, center: PointLike = _ORIGIN) -> Point:
    sy = sx if sy is None else sy
    return Point(center[0] + (p[0] - center[0]) * sx, center[1] + (p[1] - center[1]) * sy)


def translate_point(p: PointLike, delta: PointLike) -> Point:
    return Point(p[0] + delta[0], p[1] + delta[1])


def apply_transform(
    p: PointLike,
    translate: PointLike = _ORIGIN,
    rotate: float = 0.0,
    scale: float = 1.0,
    center: PointLike = _ORIGIN,
) -> Point:
    """Scale, then rotate about ``center``, then translate."""
    out = scale_point(p, scale, scale, center)
    if rotate:
        out = rotate_point(out, rotate, center)
    return translate_point(out, translate)


def angle_between_vectors(v1: PointLike, v2: PointLike) -> float:
    """Counter-clockwise angle from ``v1`` to ``v2`` in ``[0, 2π)``."""
    return normalize_angle(math.atan2(cross(v1, v2), dot(v1, v2)))


def deg_to_rad(degrees: float) -> float:
    return degrees * math.pi / 180.0


def rad_to_deg(radians: float) -> float:
    return radians * 180.0 / math.pi


__all__ = [
    "rotate_point",
    "mirror_point",
    "scale_point",
    "translate_point",
    "apply_transform",
    "angle_between_vectors",
    "deg_to_rad",
    "rad_to_deg",
]
