"""Create shapes from placement clicks or persisted JSON."""
from __future__ import annotations

from typing import Any, Dict, Sequence

from pydantic import TypeAdapter, ValidationError

from chipcarve.datatypes import PointLike, ShapeType
from chipcarve.errors import DesignFormatError, GeometryError
from chipcarve.leaf import Leaf
from chipcarve.schema import LeafModel, ShapeModel, TriArcModel
from chipcarve.shapes import Shape
from chipcarve.triarc import TriArc

POINTS_NEEDED = {ShapeType.LEAF: 2, ShapeType.TRI_ARC: 3}

_SHAPE_ADAPTER: TypeAdapter = TypeAdapter(ShapeModel)


def points_needed(shape_type: ShapeType | str) -> int:
    return POINTS_NEEDED[ShapeType(shape_type)]


def create_shape_from_points(shape_type: ShapeType | str, points: Sequence[PointLike]) -> Shape:
    """Build a shape from its placement clicks (2 for a Leaf, 3 for a TriArc)."""
    shape_type = ShapeType(shape_type)
    needed = POINTS_NEEDED[shape_type]
    if len(points) != needed:
        raise GeometryError(f"{shape_type.value} needs {needed} points, got {len(points)}")
    if shape_type is ShapeType.LEAF:
        return Leaf(points[0], points[1])
    return TriArc(points[0], points[1], points[2])


def shape_from_model(model: LeafModel | TriArcModel) -> Shape:
    if isinstance(model, LeafModel):
        return Leaf.from_model(model)
    return TriArc.from_model(model)


def shape_from_json(data: Dict[str, Any]) -> Shape:
    """Validate ``data`` and build the shape it describes.

    Schema violations and impossible geometry both raise ``DesignFormatError``.
    """
    try:
        model = _SHAPE_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise DesignFormatError(f"Invalid shape data: {exc}") from exc
    try:
        return shape_from_model(model)
    except GeometryError as exc:
        raise DesignFormatError(f"Invalid shape geometry: {exc}") from exc


__all__ = [
    "POINTS_NEEDED",
    "points_needed",
    "create_shape_from_points",
    "shape_from_model",
    "shape_from_json",
]
