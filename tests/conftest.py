"""
Pytest configuration and shared fixtures for chipcarve tests.
"""

import sys
from pathlib import Path

import numpy as np
import pytest
from loguru import logger

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chipcarve.collection import ShapeCollection
from chipcarve.edit_tools import EditCtx, EditModeController, KeyboardCommands
from chipcarve.events import ANY, EventChannel
from chipcarve.leaf import Leaf
from chipcarve.placement import PlacementManager
from chipcarve.selection import SelectionManager
from chipcarve.transformation import TransformationManager
from chipcarve.triarc import TriArc


# ============== Shape Fixtures ==============

@pytest.fixture
def leaf() -> Leaf:
    """Leaf placed from (0, 0) to (10, 0) with the default radius."""
    return Leaf((0.0, 0.0), (10.0, 0.0))


@pytest.fixture
def triarc() -> TriArc:
    """TriArc (0,0), (100,0), (50,100) with every bulge at -0.25."""
    return TriArc((0.0, 0.0), (100.0, 0.0), (50.0, 100.0), bulges=[-0.25, -0.25, -0.25])


@pytest.fixture
def equilateral() -> TriArc:
    """Equilateral TriArc with the default bulges."""
    return TriArc((0.0, 0.0), (100.0, 0.0), (50.0, 100.0 * 3 ** 0.5 / 2.0))


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


# ============== Event / Log Fixtures ==============

@pytest.fixture
def events() -> EventChannel:
    return EventChannel()


@pytest.fixture
def recorder(events: EventChannel) -> list:
    """Every event emitted on ``events``, in order."""
    seen: list = []
    events.subscribe(ANY, seen.append)
    return seen


@pytest.fixture
def log_records():
    """loguru records emitted while the test runs."""
    records: list = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


# ============== Editor Fixtures ==============

@pytest.fixture
def editor(events: EventChannel) -> EditCtx:
    """Fully wired edit context with an empty canvas."""
    shapes = ShapeCollection()
    selection = SelectionManager(events)
    transforms = TransformationManager(selection, shapes, events, rng=np.random.default_rng(7))
    placement = PlacementManager(shapes, events)
    return EditCtx(shapes=shapes, selection=selection, transforms=transforms, placement=placement)


@pytest.fixture
def controller(editor: EditCtx) -> EditModeController:
    return EditModeController(editor)


@pytest.fixture
def keyboard(editor: EditCtx) -> KeyboardCommands:
    return KeyboardCommands(editor)


@pytest.fixture
def two_leaves(editor: EditCtx):
    """Two large leaves side by side on the canvas: A at x 0..100, B at x 200..300."""
    a = Leaf((0.0, 0.0), (100.0, 0.0), shape_id="A")
    b = Leaf((200.0, 0.0), (300.0, 0.0), shape_id="B")
    editor.shapes.extend([a, b])
    return a, b
