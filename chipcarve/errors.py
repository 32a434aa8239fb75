"""Exception types raised by the chipcarve core."""
from __future__ import annotations


class GeometryError(ValueError):
    """Raised when geometry cannot be constructed from the given inputs."""


class DesignFormatError(ValueError):
    """Raised when shape or design JSON does not match the expected schema."""


__all__ = ["GeometryError", "DesignFormatError"]
