"""Pydantic schemas for persisted shapes and version 2.0 design documents."""
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DESIGN_VERSION = "2.0"

Coordinate = Annotated[float, Field(strict=True, allow_inf_nan=False)]


class VertexModel(BaseModel):
    x: Coordinate = Field(..., description="World x in millimetres.")
    y: Coordinate = Field(..., description="World y in millimetres.")


class LeafModel(BaseModel):
    type: Literal["LEAF"]
    id: Optional[str] = Field(default=None, description="Stable shape id; generated when missing.")
    selected: bool = False
    vertices: list[VertexModel] = Field(..., min_length=2, max_length=2, description="The two foci.")
    radius: float = Field(..., gt=0.0, strict=True, allow_inf_nan=False, description="Radius of both arcs.")


class TriArcModel(BaseModel):
    type: Literal["TRI_ARC"]
    id: Optional[str] = Field(default=None, description="Stable shape id; generated when missing.")
    selected: bool = False
    vertices: list[VertexModel] = Field(..., min_length=3, max_length=3)
    curvatures: list[Coordinate] = Field(
        ..., min_length=3, max_length=3, description="Bulge factor per edge (v[i], v[i+1])."
    )


ShapeModel = Annotated[Union[LeafModel, TriArcModel], Field(discriminator="type")]


class BackgroundImageModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    imageData: str = Field(..., min_length=1, description="Encoded image payload, passed through untouched.")


class DesignModel(BaseModel):
    version: Literal["2.0"] = Field(..., description="Only version 2.0 documents are accepted.")
    shapes: list[ShapeModel]
    backgroundImages: Optional[list[BackgroundImageModel]] = None
    metadata: Optional[dict[str, Any]] = None


__all__ = [
    "DESIGN_VERSION",
    "VertexModel",
    "LeafModel",
    "TriArcModel",
    "ShapeModel",
    "BackgroundImageModel",
    "DesignModel",
]
