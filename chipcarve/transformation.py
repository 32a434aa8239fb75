"""Group transforms of the current selection.

MOVE and ROTATE are sticky modes that gesture sessions run inside; mirror
and jiggle are one-shot actions that leave the current mode alone.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

import numpy as np
from loguru import logger

from chipcarve.collection import ShapeCollection
from chipcarve.config import EditorConfig
from chipcarve.datatypes import MirrorAxis, Point, PointLike
from chipcarve.events import SELECTION_CHANGED, SHAPES_MODIFIED, TRANSFORM_MODE_CHANGED, EventChannel
from chipcarve.selection import SelectionManager
from chipcarve.shapes import Shape


class TransformMode(str, Enum):
    IDLE = "IDLE"
    MOVE = "MOVE"
    ROTATE = "ROTATE"


@dataclass
class TransformSession:
    mode: TransformMode
    active_shapes: List[Shape]
    anchor: Point
    rotation_center: Optional[Point] = None
    last_angle: float = 0.0


@dataclass
class JiggleParams:
    position: float = 1.0
    rotation: float = 5.0
    radius: float = 5.0

    @classmethod
    def from_config(cls, config: EditorConfig) -> "JiggleParams":
        return cls(config.jiggle_position_mm, config.jiggle_rotation_deg, config.jiggle_radius_pct)


MirrorPrompt = Callable[[], Optional[MirrorAxis]]
JigglePrompt = Callable[[JiggleParams], Optional[JiggleParams]]


def _wrap_angle(angle: float) -> float:
    """Wrap into ``[-π, π]``."""
    while angle > math.pi:
        angle -= 2.0 * math.pi
    while angle < -math.pi:
        angle += 2.0 * math.pi
    return angle


class TransformationManager:
    def __init__(
        self,
        selection: SelectionManager,
        shapes: ShapeCollection,
        events: Optional[EventChannel] = None,
        mirror_prompt: Optional[MirrorPrompt] = None,
        jiggle_prompt: Optional[JigglePrompt] = None,
        jiggle_defaults: Optional[JiggleParams] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.selection = selection
        self.shapes = shapes
        self.events = events or selection.events
        self.mirror_prompt = mirror_prompt
        self.jiggle_prompt = jiggle_prompt
        self.jiggle_defaults = jiggle_defaults or JiggleParams()
        self.rng = rng
        self._mode = TransformMode.IDLE
        self._session: Optional[TransformSession] = None

    # ------------------------------------------------------------------
    # Modes

    @property
    def mode(self) -> TransformMode:
        return self._mode

    @property
    def session(self) -> Optional[TransformSession]:
        return self._session

    @property
    def is_transforming(self) -> bool:
        return self._session is not None

    def enter_mode(self, mode: TransformMode | str) -> TransformMode:
        """Switch to ``mode``; entering the current mode toggles back to IDLE."""
        mode = TransformMode(mode)
        new_mode = TransformMode.IDLE if mode is self._mode else mode
        self._session = None
        self._set_mode(new_mode)
        return new_mode

    def exit_current_mode(self) -> None:
        self._session = None
        self._set_mode(TransformMode.IDLE)

    def _set_mode(self, mode: TransformMode) -> None:
        logger.debug("Transform mode {} -> {}", self._mode.value, mode.value)
        self._mode = mode
        self.events.emit(TRANSFORM_MODE_CHANGED, mode=mode)

    # ------------------------------------------------------------------
    # Sessions

    def start(
        self,
        shapes: Sequence[Shape],
        anchor: PointLike,
        rotation_center: Optional[PointLike] = None,
    ) -> None:
        if self._mode is TransformMode.IDLE:
            return
        anchor = Point(float(anchor[0]), float(anchor[1]))
        center: Optional[Point] = None
        last_angle = 0.0
        if self._mode is TransformMode.ROTATE:
            if rotation_center is None:
                logger.error("Cannot start rotation without a rotation centre")
                return
            center = Point(float(rotation_center[0]), float(rotation_center[1]))
            last_angle = math.atan2(anchor.y - center.y, anchor.x - center.x)
        self._session = TransformSession(self._mode, list(shapes), anchor, center, last_angle)

    def transform(self, delta: PointLike, current: PointLike) -> None:
        session = self._session
        if session is None:
            return
        if session.mode is TransformMode.MOVE:
            for shape in session.active_shapes:
                shape.move(delta)
        elif session.mode is TransformMode.ROTATE and session.rotation_center is not None:
            c = session.rotation_center
            angle = math.atan2(current[1] - c.y, current[0] - c.x)
            step = _wrap_angle(angle - session.last_angle)
            for shape in session.active_shapes:
                shape.rotate(step, c)
            session.last_angle = angle

    def end(self) -> None:
        session = self._session
        self._session = None
        if session is not None and session.active_shapes:
            self.events.emit(SHAPES_MODIFIED, shapes=list(session.active_shapes))

    # ------------------------------------------------------------------
    # One-shot actions

    def mirror_selection(
        self, axis: Optional[MirrorAxis | str] = None, center: PointLike = (0.0, 0.0)
    ) -> List[Shape]:
        """Add mirrored copies of the selection, reflected through ``center``.

        Without an explicit ``axis`` the mirror prompt is asked; a ``None``
        answer cancels.
        """
        originals = self.selection.get()
        if not originals:
            logger.info("Mirror skipped: nothing selected")
            return []
        if axis is None and self.mirror_prompt is not None:
            axis = self.mirror_prompt()
        if axis is None:
            return []
        axis = MirrorAxis(axis)
        copies = [shape.clone(fresh_id=True) for shape in originals]
        for copy in copies:
            copy.mirror(axis, center)
        self.shapes.extend(copies)
        self.selection.replace(originals + copies)
        self.events.emit(SHAPES_MODIFIED, shapes=copies)
        return copies

    def jiggle_selection(self, params: Optional[JiggleParams] = None) -> List[Shape]:
        targets = self.selection.get()
        if not targets:
            logger.info("Jiggle skipped: nothing selected")
            return []
        if params is None:
            defaults = JiggleParams(**vars(self.jiggle_defaults))
            params = self.jiggle_prompt(defaults) if self.jiggle_prompt is not None else defaults
        if params is None:
            return []
        for shape in targets:
            shape.jiggle(params.position, params.rotation, params.radius, rng=self.rng)
        self.events.emit(SELECTION_CHANGED, count=len(targets))
        self.events.emit(SHAPES_MODIFIED, shapes=targets)
        return targets


__all__ = ["TransformMode", "TransformSession", "JiggleParams", "TransformationManager"]
