"""QPainter drawing for shapes, handles and placement previews.

All functions draw in world coordinates: the host installs the
world-to-screen transform on the painter first. ``scale`` is the zoom factor
(screen pixels per world unit) and is only used to keep strokes and handles
a constant on-screen size.
"""
from __future__ import annotations

from typing import Iterable, Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPainterPath, QPen

from chipcarve.config import DEFAULT_CONFIG, EditorConfig
from chipcarve.datatypes import HitRegion, Line
from chipcarve.selection import SelectionManager
from chipcarve.shapes import Shape

HANDLE_FILL = QColor(0, 200, 255, 128)
HANDLE_FILL_ACTIVE = QColor(0, 150, 200, 230)
HANDLE_BORDER = QColor(0, 0, 0)
BODY_HOVER_FILL = QColor(0, 120, 215, 40)
PREVIEW_COLOR = QColor(120, 120, 120)


def stroke_width(scale: float, config: EditorConfig = DEFAULT_CONFIG) -> float:
    return max(config.min_stroke_width, config.stroke_width_px / scale)


def shape_path(shape: Shape, samples_per_arc: int = 33) -> QPainterPath:
    """Closed painter path following the shape's curved outline."""
    pts = shape.outline(samples_per_arc)
    path = QPainterPath()
    if len(pts) == 0:
        return path
    path.moveTo(QPointF(float(pts[0][0]), float(pts[0][1])))
    for x, y in pts[1:]:
        path.lineTo(QPointF(float(x), float(y)))
    path.closeSubpath()
    return path


def draw_shape(
    painter: QPainter,
    shape: Shape,
    scale: float,
    is_selected: bool,
    config: EditorConfig = DEFAULT_CONFIG,
) -> None:
    color = QColor(config.stroke_selected if is_selected else config.stroke_default)
    painter.save()
    painter.setPen(QPen(color, stroke_width(scale, config)))
    hovered = shape.active_hit is not None and shape.active_hit.region is HitRegion.BODY
    painter.setBrush(BODY_HOVER_FILL if hovered else Qt.NoBrush)
    painter.drawPath(shape_path(shape))
    painter.restore()


def draw_handles(painter: QPainter, shape: Shape, scale: float, config: EditorConfig = DEFAULT_CONFIG) -> None:
    """Round vertex handles and square arc handles; the active one is drawn larger."""
    hit = shape.active_hit
    base = config.handle_radius_px / scale
    active = config.active_handle_radius_px / scale
    painter.save()
    painter.setPen(QPen(HANDLE_BORDER, 1.0 / scale))

    for i, v in enumerate(shape.vertices):
        is_active = hit is not None and hit.region is HitRegion.VERTEX and hit.vertex_index == i
        r = active if is_active else base
        painter.setBrush(HANDLE_FILL_ACTIVE if is_active else HANDLE_FILL)
        painter.drawEllipse(QPointF(v.x, v.y), r, r)

    for i, m in enumerate(shape.arc_midpoints()):
        is_active = hit is not None and hit.region is HitRegion.ARC and hit.arc_index == i
        half = active if is_active else base
        painter.setBrush(HANDLE_FILL_ACTIVE if is_active else HANDLE_FILL)
        painter.drawRect(QRectF(m.x - half, m.y - half, half * 2.0, half * 2.0))
    painter.restore()


def draw_rotation_handle(
    painter: QPainter,
    selection: SelectionManager,
    scale: float,
    config: EditorConfig = DEFAULT_CONFIG,
) -> None:
    center = selection.get_center()
    handle = selection.get_rotation_handle_position(scale)
    if center is None or handle is None:
        return
    r = config.rotation_handle_hit_px / scale
    painter.save()
    painter.setPen(QPen(QColor(config.stroke_selected), stroke_width(scale, config)))
    painter.drawLine(QPointF(center.x, center.y), QPointF(handle.x, handle.y))
    painter.setBrush(HANDLE_FILL)
    painter.drawEllipse(QPointF(handle.x, handle.y), r, r)
    painter.restore()


def draw_preview_lines(
    painter: QPainter,
    lines: Iterable[Line],
    scale: float,
    config: EditorConfig = DEFAULT_CONFIG,
) -> None:
    pen = QPen(PREVIEW_COLOR, stroke_width(scale, config))
    pen.setStyle(Qt.DashLine)
    painter.save()
    painter.setPen(pen)
    for start, end in lines:
        painter.drawLine(QPointF(start[0], start[1]), QPointF(end[0], end[1]))
    painter.restore()


def draw_scene(
    painter: QPainter,
    shapes: Iterable[Shape],
    selection: SelectionManager,
    scale: float,
    show_rotation_handle: bool = False,
    preview: Optional[Iterable[Line]] = None,
    config: EditorConfig = DEFAULT_CONFIG,
) -> None:
    """Shapes in z-order, then handles of selected shapes on top."""
    ordered = list(shapes)
    for shape in ordered:
        draw_shape(painter, shape, scale, selection.has(shape), config)
    for shape in ordered:
        if selection.has(shape):
            draw_handles(painter, shape, scale, config)
    if show_rotation_handle:
        draw_rotation_handle(painter, selection, scale, config)
    if preview:
        draw_preview_lines(painter, preview, scale, config)


__all__ = [
    "stroke_width",
    "shape_path",
    "draw_shape",
    "draw_handles",
    "draw_rotation_handle",
    "draw_preview_lines",
    "draw_scene",
]
