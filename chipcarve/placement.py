"""Click-by-click shape placement."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from loguru import logger

from chipcarve.collection import ShapeCollection
from chipcarve.datatypes import Line, Point, PointLike, ShapeType
from chipcarve.errors import GeometryError
from chipcarve.events import PLACEMENT_STATE_CHANGED, SHAPE_CREATED, EventChannel
from chipcarve.factory import create_shape_from_points, points_needed
from chipcarve.shapes import Shape


class PlacementState(str, Enum):
    IDLE = "IDLE"
    PLACING_POINTS = "PLACING_POINTS"
    PLACED = "PLACED"
    CANCELLED = "CANCELLED"


_TRANSITIONS = {
    PlacementState.IDLE: {PlacementState.PLACING_POINTS},
    PlacementState.PLACING_POINTS: {PlacementState.PLACED, PlacementState.CANCELLED, PlacementState.IDLE},
    PlacementState.PLACED: {PlacementState.IDLE, PlacementState.PLACING_POINTS},
    PlacementState.CANCELLED: {PlacementState.IDLE, PlacementState.PLACING_POINTS},
}


class PlacementManager:
    """Collects placement clicks and creates shapes.

    Placement is continuous: after a shape is created the manager goes
    straight back to collecting points for another one of the same type.
    """

    def __init__(self, shapes: ShapeCollection, events: Optional[EventChannel] = None) -> None:
        self.shapes = shapes
        self.events = events or EventChannel()
        self.state = PlacementState.IDLE
        self.shape_type: Optional[ShapeType] = None
        self._points: List[Point] = []

    def _set_state(self, state: PlacementState) -> None:
        if state not in _TRANSITIONS[self.state]:
            logger.warning("Ignoring placement transition {} -> {}", self.state.value, state.value)
            return
        logger.debug("Placement {} -> {}", self.state.value, state.value)
        self.state = state
        self.events.emit(PLACEMENT_STATE_CHANGED, state=state, shape_type=self.shape_type)

    @property
    def is_placing(self) -> bool:
        return self.state is PlacementState.PLACING_POINTS

    @property
    def points(self) -> List[Point]:
        return list(self._points)

    def start_placement(self, shape_type: ShapeType | str) -> None:
        shape_type = ShapeType(shape_type)
        if self.is_placing and self.shape_type is shape_type:
            return
        self.cancel_placement()
        self.shape_type = shape_type
        self._points = []
        self._set_state(PlacementState.PLACING_POINTS)

    def cancel_placement(self) -> None:
        if not self.is_placing:
            return
        self._set_state(PlacementState.CANCELLED)
        self._reset()

    def _reset(self) -> None:
        self._points = []
        self._set_state(PlacementState.IDLE)
        self.shape_type = None

    def add_point(self, point: PointLike) -> Optional[Shape]:
        """Record a click; returns the new shape once enough points are in."""
        if not self.is_placing or self.shape_type is None:
            return None
        self._points.append(Point(float(point[0]), float(point[1])))
        if len(self._points) < points_needed(self.shape_type):
            return None
        return self._complete()

    def _complete(self) -> Optional[Shape]:
        shape_type = self.shape_type
        try:
            shape = create_shape_from_points(shape_type, self._points)
        except GeometryError as exc:
            logger.error("Could not create {}: {}", shape_type.value, exc)
            self._set_state(PlacementState.CANCELLED)
            self._reset()
            return None
        self.shapes.add(shape)
        self._set_state(PlacementState.PLACED)
        self.events.emit(SHAPE_CREATED, shape=shape, shape_type=shape_type)
        self._points = []
        self._set_state(PlacementState.PLACING_POINTS)
        return shape

    def preview_lines(self, cursor: PointLike) -> List[Line]:
        """Rubber-band lines from the placed points to ``cursor``."""
        if not self.is_placing or not self._points:
            return []
        c = Point(float(cursor[0]), float(cursor[1]))
        lines: List[Line] = [(p, c) for p in self._points]
        if self.shape_type is ShapeType.TRI_ARC and len(self._points) == 2:
            lines.append((self._points[0], self._points[1]))
        return lines


__all__ = ["PlacementState", "PlacementManager"]
