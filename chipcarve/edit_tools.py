"""Pointer and keyboard handling for edit mode.

The host feeds world-space pointer positions plus the current zoom scale;
everything else (what was hit, which operation a drag performs, what the
selection becomes) is decided here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from chipcarve.collection import ShapeCollection
from chipcarve.config import EditorConfig
from chipcarve.datatypes import NO_HIT, HitRegion, HitResult, Point, PointLike
from chipcarve.events import SHAPES_MODIFIED, EventChannel
from chipcarve.intersect2d import sub
from chipcarve.placement import PlacementManager
from chipcarve.selection import SelectionManager
from chipcarve.shapes import Shape
from chipcarve.transformation import JiggleParams, TransformationManager, TransformMode

CURSOR_DEFAULT = "default"
CURSOR_GRAB = "grab"
CURSOR_POINTER = "pointer"
CURSOR_MOVE = "move"


@dataclass
class EditCtx:
    shapes: ShapeCollection
    selection: SelectionManager
    transforms: TransformationManager
    placement: Optional[PlacementManager] = None
    config: EditorConfig = field(default_factory=EditorConfig)

    def __post_init__(self) -> None:
        # config is the authority for handle sizes and jiggle defaults
        self.selection.handle_offset_px = self.config.rotation_handle_offset_px
        self.selection.handle_hit_px = self.config.rotation_handle_hit_px
        self.transforms.jiggle_defaults = JiggleParams.from_config(self.config)

    @property
    def events(self) -> EventChannel:
        return self.selection.events


@dataclass
class ActiveHit:
    shape: Optional[Shape]
    result: HitResult


class EditModeController:
    """One press-drag-release gesture at a time."""

    def __init__(self, ctx: EditCtx) -> None:
        self.ctx = ctx
        self.cursor = CURSOR_DEFAULT
        self._reset()

    def _reset(self) -> None:
        self._pressed = False
        self._dragging = False
        self._direct = False
        self._hit: Optional[ActiveHit] = None
        self._press_point: Optional[Point] = None
        self._last_point: Optional[Point] = None

    @property
    def active_hit(self) -> Optional[ActiveHit]:
        return self._hit

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    # ------------------------------------------------------------------
    # Classification

    def _handle_hit(self, point: PointLike, scale: float) -> Optional[ActiveHit]:
        for shape in self.ctx.selection:
            result = shape.hit_test(point, scale, self.ctx.config.handle_hit_px)
            if result.is_handle:
                return ActiveHit(shape, result)
        return None

    def _rotation_handle_hit(self, point: PointLike, scale: float) -> bool:
        return self.ctx.transforms.mode is TransformMode.ROTATE and self.ctx.selection.hit_test_rotation_handle(
            point, scale
        )

    def classify(self, point: PointLike, scale: float) -> Optional[ActiveHit]:
        """Rotation handle, then handles of selected shapes, then top-most body."""
        if self._rotation_handle_hit(point, scale):
            return ActiveHit(None, HitResult(HitRegion.ROTATION_HANDLE))
        hit = self._handle_hit(point, scale)
        if hit is not None:
            return hit
        shape = self.ctx.shapes.shape_at_point(point)
        if shape is not None:
            return ActiveHit(shape, HitResult(HitRegion.BODY))
        return None

    # ------------------------------------------------------------------
    # Gesture

    def press(self, point: PointLike, scale: float) -> HitResult:
        self._reset()
        p = Point(float(point[0]), float(point[1]))
        self._pressed = True
        self._press_point = self._last_point = p
        self._hit = self.classify(p, scale)
        if self._hit is None:
            return NO_HIT
        if self._hit.shape is not None:
            self._hit.shape.active_hit = self._hit.result
        return self._hit.result

    def move(self, point: PointLike, scale: float) -> None:
        if not self._pressed:
            self.hover(point, scale)
            return
        p = Point(float(point[0]), float(point[1]))
        if not self._dragging:
            self._dragging = True
            self._begin_drag()
        delta = sub(p, self._last_point)
        self._last_point = p
        transforms = self.ctx.transforms
        if transforms.is_transforming:
            transforms.transform(delta, p)
        elif self._direct:
            self._manipulate(p, delta)

    def _begin_drag(self) -> None:
        hit = self._hit
        if hit is None:
            return
        transforms = self.ctx.transforms
        selection = self.ctx.selection
        region = hit.result.region
        if transforms.mode is TransformMode.ROTATE and region is HitRegion.ROTATION_HANDLE:
            transforms.start(selection.get(), self._press_point, selection.get_center())
            return
        if transforms.mode is TransformMode.MOVE and region is HitRegion.BODY and selection.has(hit.shape):
            transforms.start(selection.get(), self._press_point)
            return
        self._direct = hit.shape is not None

    def _group_for(self, shape: Shape) -> List[Shape]:
        selection = self.ctx.selection
        if len(selection) > 1 and selection.has(shape):
            return selection.get()
        return [shape]

    def _manipulate(self, point: Point, delta: Point) -> None:
        shape = self._hit.shape
        result = self._hit.result
        if result.region is HitRegion.BODY:
            for target in self._group_for(shape):
                target.move(delta)
        elif result.region is HitRegion.VERTEX:
            shape.move_vertex(result.vertex_index, point)
        elif result.region is HitRegion.ARC:
            shape.set_arc_midpoint(result.arc_index, point)

    def release(self, point: PointLike, scale: float, toggle: bool = False) -> None:
        """Finish the gesture; ``toggle`` is the ctrl/cmd modifier state."""
        if not self._pressed:
            return
        hit = self._hit
        if self._dragging:
            if self.ctx.transforms.is_transforming:
                self.ctx.transforms.end()
            elif self._direct and hit is not None and hit.shape is not None:
                modified = self._group_for(hit.shape) if hit.result.region is HitRegion.BODY else [hit.shape]
                self.ctx.events.emit(SHAPES_MODIFIED, shapes=modified)
        else:
            self._click(hit, toggle)
        if hit is not None and hit.shape is not None:
            hit.shape.active_hit = None
        self._reset()

    def _click(self, hit: Optional[ActiveHit], toggle: bool) -> None:
        selection = self.ctx.selection
        if hit is None:
            selection.clear()
            return
        shape = hit.shape
        if shape is None:
            return
        if toggle:
            selection.toggle(shape)
        elif not (selection.has(shape) and len(selection) == 1):
            selection.replace([shape])

    def hover(self, point: PointLike, scale: float) -> str:
        """Update ``active_hit`` highlights and return a cursor hint; never mutates geometry."""
        for shape in self.ctx.shapes:
            shape.active_hit = None
        cursor = CURSOR_DEFAULT
        if self._rotation_handle_hit(point, scale):
            cursor = CURSOR_GRAB
        else:
            hit = self._handle_hit(point, scale)
            if hit is not None:
                hit.shape.active_hit = hit.result
                cursor = CURSOR_POINTER
            else:
                shape = self.ctx.shapes.shape_at_point(point)
                if shape is not None:
                    shape.active_hit = HitResult(HitRegion.BODY)
                    cursor = CURSOR_MOVE
        self.cursor = cursor
        return cursor

    def deactivate(self) -> None:
        if self.ctx.transforms.is_transforming:
            self.ctx.transforms.end()
        self._reset()


class KeyboardCommands:
    """Edit-mode shortcuts: delete, escape, copy/paste, select all, duplicate."""

    def __init__(self, ctx: EditCtx) -> None:
        self.ctx = ctx
        self.clipboard: List[Shape] = []

    def handle_key(self, key: str, ctrl: bool = False) -> bool:
        """Dispatch a normalised key name; returns True when the key was used."""
        lowered = key.lower()
        if lowered in ("delete", "backspace"):
            self.delete_selection()
            return True
        if lowered == "escape":
            self.escape()
            return True
        if not ctrl:
            return False
        actions = {"c": self.copy, "v": self.paste, "a": self.select_all, "d": self.duplicate}
        action = actions.get(lowered)
        if action is None:
            return False
        action()
        return True

    def delete_selection(self) -> List[Shape]:
        selected = self.ctx.selection.get()
        if not selected:
            return []
        removed = self.ctx.shapes.remove(selected)
        self.ctx.selection.clear()
        logger.debug("Deleted {} shapes", len(removed))
        return removed

    def escape(self) -> None:
        placement = self.ctx.placement
        if placement is not None and placement.is_placing:
            placement.cancel_placement()
        elif self.ctx.transforms.mode is not TransformMode.IDLE or self.ctx.transforms.is_transforming:
            self.ctx.transforms.exit_current_mode()
        else:
            self.ctx.selection.clear()

    def copy(self) -> int:
        selected = self.ctx.selection.get()
        if selected:
            self.clipboard = [shape.clone() for shape in selected]
        return len(selected)

    def paste(self) -> List[Shape]:
        if not self.clipboard:
            return []
        offset = self.ctx.config.paste_offset_mm
        pasted = []
        for shape in self.clipboard:
            twin = shape.clone(fresh_id=True)
            twin.move((offset, offset))
            pasted.append(twin)
        self.ctx.shapes.extend(pasted)
        self.ctx.selection.replace(pasted)
        return pasted

    def select_all(self) -> None:
        self.ctx.selection.replace(self.ctx.shapes.shapes)

    def duplicate(self) -> List[Shape]:
        self.copy()
        return self.paste()


__all__ = [
    "CURSOR_DEFAULT",
    "CURSOR_GRAB",
    "CURSOR_POINTER",
    "CURSOR_MOVE",
    "EditCtx",
    "ActiveHit",
    "EditModeController",
    "KeyboardCommands",
]
