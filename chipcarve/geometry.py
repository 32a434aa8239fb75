"""Arc and curve geometry for chipcarve shapes.

Curved edges are stored as a chord (two vertices) plus a signed offset or
bulge rather than as explicit curve points. The helpers below convert between
those parametrisations and produce sampled polylines for hit-testing and
drawing. Everything here is pure; no function mutates its inputs.

Angles are in radians and measured counter-clockwise from +x in world
coordinates (y up).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from chipcarve.datatypes import Point, PointLike
from chipcarve.errors import GeometryError
from chipcarve.intersect2d import EPS, circle_circle_intersections, cross, norm, sub

TWO_PI = 2.0 * math.pi


def distance(a: PointLike, b: PointLike) -> float:
    """Return the Euclidean distance between two points."""
    return float(math.hypot(float(b[0]) - float(a[0]), float(b[1]) - float(a[1])))


def chord_midpoint(p1: PointLike, p2: PointLike) -> Point:
    return Point((p1[0] + p2[0]) / 2.0, (p1[1] + p2[1]) / 2.0)


def perpendicular_normal(p1: PointLike, p2: PointLike) -> Point:
    """Left-hand unit normal of ``p1 -> p2``; ``(0, 0)`` for a degenerate chord."""
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    length = math.hypot(dx, dy)
    if length < EPS:
        return Point(0.0, 0.0)
    return Point(-dy / length, dx / length)


def arc_center_from_chord_and_offset(p1: PointLike, p2: PointLike, offset: float) -> Point:
    """Point ``offset`` units along the left-hand normal from the chord midpoint."""
    mid = chord_midpoint(p1, p2)
    n = perpendicular_normal(p1, p2)
    return Point(mid.x + n.x * offset, mid.y + n.y * offset)


# ---------------------------------------------------------------------------
# Sagitta / bulge conversions


def sagitta_from_radius_and_chord(radius: float, chord: float) -> float:
    half = chord / 2.0
    if radius < half:
        raise GeometryError(f"radius {radius:.6g} is smaller than half the chord {half:.6g}")
    return radius - math.sqrt(max(0.0, radius * radius - half * half))


def radius_from_chord_and_sagitta(chord: float, sagitta: float) -> float:
    if sagitta <= 0.0:
        raise GeometryError("sagitta must be positive")
    half = chord / 2.0
    return (half * half + sagitta * sagitta) / (2.0 * sagitta)


def bulge_to_sagitta(bulge: float, chord: float) -> float:
    return bulge * chord / 2.0


def sagitta_to_bulge(sagitta: float, chord: float) -> float:
    if chord < EPS:
        return 0.0
    return 2.0 * sagitta / chord


# ---------------------------------------------------------------------------
# Circles and angles


def arc_intersection(c1: PointLike, r1: float, c2: PointLike, r2: float) -> Optional[Point]:
    """Intersection of two circles on the left of ``c1 -> c2``.

    Returns ``None`` for disjoint, nested or concentric circles.
    """
    hits = circle_circle_intersections(c1, r1, c2, r2)
    return hits[0] if hits else None


def circle_center_from_three_points(a: PointLike, b: PointLike, c: PointLike) -> Optional[Point]:
    d = 2.0 * (a[0] * (b[1] - c[1]) + b[0] * (c[1] - a[1]) + c[0] * (a[1] - b[1]))
    if abs(d) < 1e-10:
        return None
    a2 = a[0] * a[0] + a[1] * a[1]
    b2 = b[0] * b[0] + b[1] * b[1]
    c2 = c[0] * c[0] + c[1] * c[1]
    x = (a2 * (b[1] - c[1]) + b2 * (c[1] - a[1]) + c2 * (a[1] - b[1])) / d
    y = (a2 * (c[0] - b[0]) + b2 * (a[0] - c[0]) + c2 * (b[0] - a[0])) / d
    return Point(x, y)


def normalize_angle(angle: float) -> float:
    """Wrap ``angle`` into ``[0, 2π)``."""
    wrapped = math.fmod(angle, TWO_PI)
    if wrapped < 0.0:
        wrapped += TWO_PI
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped


def is_angle_in_arc_sweep(angle: float, start: float, end: float, counter_clockwise: bool) -> bool:
    """True if ``angle`` lies on the sweep from ``start`` to ``end``.

    ``counter_clockwise`` sweeps with increasing angle, otherwise decreasing.
    Sweeps that pass through 0 are handled by the wraparound branches.
    """
    a = normalize_angle(angle)
    s = normalize_angle(start)
    e = normalize_angle(end)
    if counter_clockwise:
        if s <= e:
            return s <= a <= e
        return a >= s or a <= e
    if e <= s:
        return e <= a <= s
    return a >= e or a <= s


@dataclass(frozen=True)
class ArcFit:
    start: Point
    end: Point
    center: Point
    radius: float
    counter_clockwise: bool


def fit_arc_through_points(p1: PointLike, p2: PointLike, p3: PointLike) -> Optional[ArcFit]:
    """Circular arc from ``p1`` through ``p2`` to ``p3``; ``None`` if collinear."""
    center = circle_center_from_three_points(p1, p2, p3)
    if center is None:
        return None
    radius = distance(p1, center)
    # p2 right of p1->p3 means the arc turns left around the centre
    turn = cross(sub(p3, p1), sub(p2, p1))
    return ArcFit(
        start=Point(float(p1[0]), float(p1[1])),
        end=Point(float(p3[0]), float(p3[1])),
        center=center,
        radius=radius,
        counter_clockwise=turn < 0.0,
    )


def arc_sweep(fit: ArcFit) -> float:
    """Signed sweep angle of ``fit`` (positive counter-clockwise)."""
    a0 = math.atan2(fit.start.y - fit.center.y, fit.start.x - fit.center.x)
    a1 = math.atan2(fit.end.y - fit.center.y, fit.end.x - fit.center.x)
    if fit.counter_clockwise:
        return normalize_angle(a1 - a0)
    return -normalize_angle(a0 - a1)


def arc_points_through(start: PointLike, peak: PointLike, end: PointLike, samples: int = 32) -> np.ndarray:
    """Sample the circular arc ``start -> peak -> end`` as a polyline.

    Collinear inputs fall back to the straight segment ``start -> end``.
    """
    samples = max(2, int(samples))
    p0 = np.asarray(start, dtype=float)
    p1 = np.asarray(end, dtype=float)
    fit = fit_arc_through_points(start, peak, end)
    if fit is None:
        t = np.linspace(0.0, 1.0, samples)
        return p0 + (p1 - p0) * t[:, None]
    a0 = math.atan2(fit.start.y - fit.center.y, fit.start.x - fit.center.x)
    angle = a0 + arc_sweep(fit) * np.linspace(0.0, 1.0, samples)
    pts = np.column_stack(
        (fit.center.x + fit.radius * np.cos(angle), fit.center.y + fit.radius * np.sin(angle))
    )
    pts[0] = p0
    pts[-1] = p1
    return pts


# ---------------------------------------------------------------------------
# Quadratic Bezier helpers


def evaluate_bezier(start: PointLike, control: PointLike, end: PointLike, t: float) -> Point:
    u = 1.0 - t
    return Point(
        u * u * start[0] + 2.0 * u * t * control[0] + t * t * end[0],
        u * u * start[1] + 2.0 * u * t * control[1] + t * t * end[1],
    )


def bezier_derivative(start: PointLike, control: PointLike, end: PointLike, t: float) -> Point:
    u = 1.0 - t
    return Point(
        2.0 * u * (control[0] - start[0]) + 2.0 * t * (end[0] - control[0]),
        2.0 * u * (control[1] - start[1]) + 2.0 * t * (end[1] - control[1]),
    )


def bezier_second_derivative(start: PointLike, control: PointLike, end: PointLike) -> Point:
    return Point(
        2.0 * (end[0] - 2.0 * control[0] + start[0]),
        2.0 * (end[1] - 2.0 * control[1] + start[1]),
    )


def bezier_curvature(start: PointLike, control: PointLike, end: PointLike, t: float) -> float:
    """Signed curvature of a quadratic Bezier at ``t`` (0 where the speed vanishes)."""
    d1 = bezier_derivative(start, control, end, t)
    d2 = bezier_second_derivative(start, control, end)
    denom = norm(d1) ** 3
    if denom == 0.0:
        return 0.0
    return cross(d1, d2) / denom


def bezier_points(control_points: Iterable[Sequence[float]], samples: int = 64) -> np.ndarray:
    """Sample a Bezier curve of any degree with de Casteljau's algorithm."""
    control = np.asarray(list(control_points), dtype=float)
    t = np.linspace(0.0, 1.0, max(2, int(samples)))
    if control.shape[0] == 0:
        return np.zeros((len(t), 2))
    if control.shape[0] == 1:
        return np.repeat(control, len(t), axis=0)
    pts = np.broadcast_to(control, (len(t),) + control.shape).copy()
    for _ in range(1, control.shape[0]):
        pts = (1.0 - t)[:, None, None] * pts[:, :-1, :] + t[:, None, None] * pts[:, 1:, :]
    return pts[:, 0, :]


def bezier_to_arcs(start: PointLike, control: PointLike, end: PointLike, count: int = 3) -> List[ArcFit]:
    """Approximate a quadratic Bezier with ``count`` circular arcs.

    Straight pieces (collinear samples) are left out of the result.
    """
    arcs: List[ArcFit] = []
    for i in range(count):
        t1 = i / count
        t2 = (i + 1) / count
        fit = fit_arc_through_points(
            evaluate_bezier(start, control, end, t1),
            evaluate_bezier(start, control, end, (t1 + t2) / 2.0),
            evaluate_bezier(start, control, end, t2),
        )
        if fit is not None:
            arcs.append(fit)
    return arcs


__all__ = [
    "TWO_PI",
    "distance",
    "chord_midpoint",
    "perpendicular_normal",
    "arc_center_from_chord_and_offset",
    "sagitta_from_radius_and_chord",
    "radius_from_chord_and_sagitta",
    "bulge_to_sagitta",
    "sagitta_to_bulge",
    "arc_intersection",
    "circle_center_from_three_points",
    "normalize_angle",
    "is_angle_in_arc_sweep",
    "ArcFit",
    "fit_arc_through_points",
    "arc_sweep",
    "arc_points_through",
    "evaluate_bezier",
    "bezier_derivative",
    "bezier_second_derivative",
    "bezier_curvature",
    "bezier_points",
    "bezier_to_arcs",
]
