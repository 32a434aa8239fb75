"""Conversion between shape lists and version 2.0 design documents.

Reading and writing files is left to the host; this module only deals with
JSON text and plain dictionaries.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger
from pydantic import ValidationError

from chipcarve.errors import DesignFormatError, GeometryError
from chipcarve.factory import shape_from_model
from chipcarve.schema import DESIGN_VERSION, DesignModel
from chipcarve.shapes import Shape


@dataclass
class Design:
    shapes: List[Shape] = field(default_factory=list)
    background_images: List[Dict[str, Any]] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


def validate_design(data: Any) -> DesignModel:
    """Validate a decoded document; any deviation raises ``DesignFormatError``."""
    if not isinstance(data, dict):
        raise DesignFormatError("Design data must be a JSON object")
    try:
        return DesignModel.model_validate(data)
    except ValidationError as exc:
        raise DesignFormatError(f"Invalid design document: {exc}") from exc


def load_design(data: str | bytes | Dict[str, Any]) -> Design:
    """Build a ``Design`` from JSON text or an already-decoded dict.

    The whole load fails if any single shape is invalid.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise DesignFormatError(f"Design is not valid JSON: {exc}") from exc
    model = validate_design(data)
    shapes: List[Shape] = []
    for index, shape_model in enumerate(model.shapes):
        try:
            shapes.append(shape_from_model(shape_model))
        except GeometryError as exc:
            raise DesignFormatError(f"Shape {index} has invalid geometry: {exc}") from exc
    images = [img.model_dump() for img in model.backgroundImages or []]
    logger.debug("Loaded design with {} shapes and {} background images", len(shapes), len(images))
    return Design(shapes=shapes, background_images=images, metadata=dict(model.metadata or {}))


def dump_design(
    shapes: Iterable[Shape],
    background_images: Optional[Iterable[Dict[str, Any]]] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "version": DESIGN_VERSION,
        "shapes": [shape.to_json() for shape in shapes],
    }
    if background_images is not None:
        data["backgroundImages"] = list(background_images)
    if metadata is not None:
        data["metadata"] = dict(metadata)
    return data


def design_to_json(
    shapes: Iterable[Shape],
    background_images: Optional[Iterable[Dict[str, Any]]] = None,
    metadata: Optional[Dict[str, Any]] = None,
    indent: Optional[int] = 2,
) -> str:
    return json.dumps(dump_design(shapes, background_images, metadata), indent=indent)


__all__ = ["Design", "validate_design", "load_design", "dump_design", "design_to_json"]
