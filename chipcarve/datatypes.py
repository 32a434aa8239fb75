"""Value types shared by the geometry, shape and interaction modules."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Sequence, Tuple


class Point(NamedTuple):
    x: float
    y: float


PointLike = Sequence[float]
Line = Tuple[Point, Point]


def as_point(p: PointLike) -> Point:
    """Coerce any 2-sequence into a float ``Point``."""
    if isinstance(p, Point):
        return p
    return Point(float(p[0]), float(p[1]))


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)


class HitRegion(str, Enum):
    BODY = "BODY"
    VERTEX = "VERTEX"
    ARC = "ARC"
    ROTATION_HANDLE = "ROTATION_HANDLE"
    NONE = "NONE"


@dataclass(frozen=True)
class HitResult:
    region: HitRegion = HitRegion.NONE
    vertex_index: Optional[int] = None
    arc_index: Optional[int] = None

    @property
    def is_handle(self) -> bool:
        return self.region in (HitRegion.VERTEX, HitRegion.ARC)


NO_HIT = HitResult(HitRegion.NONE)


class ShapeType(str, Enum):
    LEAF = "LEAF"
    TRI_ARC = "TRI_ARC"


class MirrorAxis(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


__all__ = [
    "Point",
    "PointLike",
    "Line",
    "as_point",
    "Bounds",
    "HitRegion",
    "HitResult",
    "NO_HIT",
    "ShapeType",
    "MirrorAxis",
]
