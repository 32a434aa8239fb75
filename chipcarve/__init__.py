"""chipcarve: interactive editing core for CNC chip-carving designs."""
from __future__ import annotations

from chipcarve.collection import ShapeCollection
from chipcarve.datatypes import Bounds, HitRegion, HitResult, MirrorAxis, Point, ShapeType
from chipcarve.document import Design, design_to_json, dump_design, load_design
from chipcarve.edit_tools import EditCtx, EditModeController, KeyboardCommands
from chipcarve.errors import DesignFormatError, GeometryError
from chipcarve.events import EventChannel
from chipcarve.factory import create_shape_from_points, shape_from_json
from chipcarve.leaf import Leaf
from chipcarve.placement import PlacementManager, PlacementState
from chipcarve.selection import SelectionManager
from chipcarve.shapes import Shape
from chipcarve.transformation import JiggleParams, TransformationManager, TransformMode
from chipcarve.triarc import TriArc

__version__ = "0.1.0"

__all__ = [
    "Bounds",
    "Design",
    "DesignFormatError",
    "EditCtx",
    "EditModeController",
    "EventChannel",
    "GeometryError",
    "HitRegion",
    "HitResult",
    "JiggleParams",
    "KeyboardCommands",
    "Leaf",
    "MirrorAxis",
    "PlacementManager",
    "PlacementState",
    "Point",
    "SelectionManager",
    "Shape",
    "ShapeCollection",
    "ShapeType",
    "TransformationManager",
    "TransformMode",
    "TriArc",
    "create_shape_from_points",
    "design_to_json",
    "dump_design",
    "load_design",
    "shape_from_json",
    "__version__",
]
