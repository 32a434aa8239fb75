"""Selection manager: the single set of currently selected shapes."""
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from loguru import logger

from chipcarve.datatypes import Point, PointLike
from chipcarve.events import SELECTION_CHANGED, EventChannel
from chipcarve.geometry import distance
from chipcarve.shapes import Shape

ROTATION_HANDLE_OFFSET_PX = 30.0
ROTATION_HANDLE_HIT_PX = 8.0


class SelectionManager:
    """Non-owning, duplicate-free set of shapes.

    ``add``, ``remove`` and ``clear`` each emit exactly one
    ``selection_changed`` event, even when nothing actually changed.
    """

    def __init__(
        self,
        events: Optional[EventChannel] = None,
        handle_offset_px: float = ROTATION_HANDLE_OFFSET_PX,
        handle_hit_px: float = ROTATION_HANDLE_HIT_PX,
    ) -> None:
        self.events = events or EventChannel()
        self.handle_offset_px = handle_offset_px
        self.handle_hit_px = handle_hit_px
        self._shapes: List[Shape] = []
        self.enabled = True

    def _changed(self) -> None:
        self.events.emit(SELECTION_CHANGED, count=len(self._shapes))

    # ------------------------------------------------------------------
    # Membership

    def add(self, shape: Shape) -> None:
        if not self.enabled:
            logger.debug("Selection disabled; ignoring add of {}", shape.id)
            return
        if not self.has(shape):
            self._shapes.append(shape)
            shape.selected = True
        self._changed()

    def remove(self, shape: Shape) -> None:
        if not self.enabled:
            return
        if self.has(shape):
            self._shapes = [s for s in self._shapes if s is not shape]
            shape.selected = False
        self._changed()

    def toggle(self, shape: Shape) -> None:
        if self.has(shape):
            self.remove(shape)
        else:
            self.add(shape)

    def replace(self, shapes: Iterable[Shape]) -> None:
        """Make ``shapes`` the whole selection with a single notification."""
        if not self.enabled:
            return
        for shape in self._shapes:
            shape.selected = False
        self._shapes = []
        for shape in shapes:
            if not self.has(shape):
                self._shapes.append(shape)
                shape.selected = True
        self._changed()

    def clear(self) -> None:
        if not self.enabled:
            return
        for shape in self._shapes:
            shape.selected = False
        self._shapes = []
        self._changed()

    def has(self, shape: object) -> bool:
        return any(s is shape for s in self._shapes)

    def get(self) -> List[Shape]:
        return list(self._shapes)

    def __contains__(self, shape: object) -> bool:
        return self.has(shape)

    def __len__(self) -> int:
        return len(self._shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(list(self._shapes))

    # ------------------------------------------------------------------
    # Group geometry

    def get_center(self) -> Optional[Point]:
        if not self._shapes:
            return None
        centers = [s.center for s in self._shapes]
        return Point(sum(c.x for c in centers) / len(centers), sum(c.y for c in centers) / len(centers))

    def get_rotation_handle_position(self, scale: float) -> Optional[Point]:
        center = self.get_center()
        if center is None:
            return None
        return Point(center.x, center.y + self.handle_offset_px / scale)

    def hit_test_rotation_handle(self, point: PointLike, scale: float) -> bool:
        handle = self.get_rotation_handle_position(scale)
        if handle is None:
            return False
        return distance(point, handle) < self.handle_hit_px / scale


__all__ = ["ROTATION_HANDLE_OFFSET_PX", "ROTATION_HANDLE_HIT_PX", "SelectionManager"]
