"""2D vector and intersection helpers for chipcarve geometry."""
from __future__ import annotations

from typing import List, Tuple
import math

from chipcarve.datatypes import Point, PointLike

EPS = 1e-9


def dot(a: PointLike, b: PointLike) -> float:
    return a[0] * b[0] + a[1] * b[1]


def cross(a: PointLike, b: PointLike) -> float:
    return a[0] * b[1] - a[1] * b[0]


def sub(a: PointLike, b: PointLike) -> Point:
    return Point(a[0] - b[0], a[1] - b[1])


def add(a: PointLike, b: PointLike) -> Point:
    return Point(a[0] + b[0], a[1] + b[1])


def mul(a: PointLike, s: float) -> Point:
    return Point(a[0] * s, a[1] * s)


def norm(a: PointLike) -> float:
    return math.hypot(a[0], a[1])


def project_point_to_segment(p: PointLike, a: PointLike, b: PointLike) -> Tuple[Point, float]:
    """Closest point on segment ``ab`` to ``p`` and its clamped parameter ``t``."""
    ab = sub(b, a)
    ab2 = dot(ab, ab)
    if ab2 < EPS:
        return Point(float(a[0]), float(a[1])), 0.0
    t = dot(sub(p, a), ab) / ab2
    t = max(0.0, min(1.0, t))
    return add(a, mul(ab, t)), t


def circle_circle_intersections(c1: PointLike, r1: float, c2: PointLike, r2: float) -> List[Point]:
    """Intersections of two circles, left-of-centre-line point first."""
    d = norm(sub(c2, c1))
    if d < EPS or d > r1 + r2 + EPS or d < abs(r1 - r2) - EPS:
        return []
    a = (r1 * r1 - r2 * r2 + d * d) / (2 * d)
    h2 = r1 * r1 - a * a
    if h2 < -EPS:
        return []
    h = math.sqrt(max(0.0, h2))
    x0 = c1[0] + a * (c2[0] - c1[0]) / d
    y0 = c1[1] + a * (c2[1] - c1[1]) / d
    rx = -(c2[1] - c1[1]) * (h / d)
    ry = (c2[0] - c1[0]) * (h / d)
    p_a = Point(x0 + rx, y0 + ry)
    p_b = Point(x0 - rx, y0 - ry)
    return [p_a] if h < 1e-12 else [p_a, p_b]


__all__ = [
    "EPS",
    "dot",
    "cross",
    "sub",
    "add",
    "mul",
    "norm",
    "project_point_to_segment",
    "circle_circle_intersections",
]
