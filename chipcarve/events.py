"""Observer channel the editor core publishes its notifications on.

Managers receive an ``EventChannel`` at construction and call ``emit``; hosts
(renderer, autosave, status bar) ``subscribe`` to the names they care about.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

SELECTION_CHANGED = "selection_changed"
TRANSFORM_MODE_CHANGED = "transform_mode_changed"
SHAPES_MODIFIED = "shapes_modified"
SHAPE_CREATED = "shape_created"
PLACEMENT_STATE_CHANGED = "placement_state_changed"

ANY = "*"


@dataclass(frozen=True)
class Event:
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[Event], None]


class EventChannel:
    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, name: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for ``name`` (or ``ANY``); returns an unsubscribe callable."""
        self._listeners[name].append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners[name]:
                self._listeners[name].remove(listener)

        return _unsubscribe

    def emit(self, name: str, **payload: Any) -> Event:
        event = Event(name, dict(payload))
        for listener in list(self._listeners.get(name, ())) + list(self._listeners.get(ANY, ())):
            listener(event)
        return event


__all__ = [
    "SELECTION_CHANGED",
    "TRANSFORM_MODE_CHANGED",
    "SHAPES_MODIFIED",
    "SHAPE_CREATED",
    "PLACEMENT_STATE_CHANGED",
    "ANY",
    "Event",
    "Listener",
    "EventChannel",
]
