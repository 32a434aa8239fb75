"""Hit-testing primitives: polygons, segments, circles, arcs and bounds."""
from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from chipcarve.datatypes import Bounds, PointLike
from chipcarve.geometry import distance, is_angle_in_arc_sweep
from chipcarve.intersect2d import project_point_to_segment


def point_in_polygon(point: PointLike, polygon: Sequence[Sequence[float]] | np.ndarray) -> bool:
    """Ray-casting parity test against a closed polygon.

    The polygon may repeat its first vertex at the end. Points exactly on an
    edge follow whatever the parity test yields for them.
    """
    pts = np.asarray(polygon, dtype=float)
    if pts.ndim != 2 or pts.shape[0] < 3:
        return False
    px, py = float(point[0]), float(point[1])
    xi, yi = pts[:, 0], pts[:, 1]
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)
    straddles = (yi > py) != (yj > py)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
    crossings = np.count_nonzero(straddles & (px < x_cross))
    return bool(crossings % 2)


def distance_to_segment(point: PointLike, a: PointLike, b: PointLike) -> float:
    proj, _ = project_point_to_segment(point, a, b)
    return distance(point, proj)


def point_near_segment(point: PointLike, a: PointLike, b: PointLike, tolerance: float) -> bool:
    return distance_to_segment(point, a, b) <= tolerance


def point_in_circle(point: PointLike, center: PointLike, radius: float) -> bool:
    return distance(point, center) <= radius


def point_on_arc(
    point: PointLike,
    center: PointLike,
    radius: float,
    start_angle: float,
    end_angle: float,
    tolerance: float,
    counter_clockwise: bool = True,
) -> bool:
    """True if ``point`` is within ``tolerance`` of the arc's circle and inside its sweep."""
    if abs(distance(point, center) - radius) > tolerance:
        return False
    angle = math.atan2(point[1] - center[1], point[0] - center[0])
    return is_angle_in_arc_sweep(angle, start_angle, end_angle, counter_clockwise)


def bounds_from_points(points: Iterable[Sequence[float]]) -> Bounds:
    pts = np.asarray(list(points), dtype=float)
    if pts.size == 0:
        return Bounds(0.0, 0.0, 0.0, 0.0)
    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    return Bounds(float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))


def point_in_bounds(point: PointLike, bounds: Bounds) -> bool:
    return bounds.min_x <= point[0] <= bounds.max_x and bounds.min_y <= point[1] <= bounds.max_y


def bounds_intersect(a: Bounds, b: Bounds) -> bool:
    return not (a.max_x < b.min_x or b.max_x < a.min_x or a.max_y < b.min_y or b.max_y < a.min_y)


def expand_bounds(bounds: Bounds, margin: float) -> Bounds:
    return Bounds(bounds.min_x - margin, bounds.min_y - margin, bounds.max_x + margin, bounds.max_y + margin)


__all__ = [
    "point_in_polygon",
    "distance_to_segment",
    "point_near_segment",
    "point_in_circle",
    "point_on_arc",
    "bounds_from_points",
    "point_in_bounds",
    "bounds_intersect",
    "expand_bounds",
]
