"""Z-ordered shape list with explicit post-mutation hooks."""
from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional

from chipcarve.datatypes import PointLike
from chipcarve.shapes import Shape

ADDED = "added"
REMOVED = "removed"
REPLACED = "replaced"

MutationHook = Callable[[str, List[Shape]], None]


class ShapeCollection:
    """Owns the canvas shapes; later entries draw on top of earlier ones.

    Every mutation calls the registered hooks afterwards with the action name
    and the shapes involved, which is where autosave and redraw plug in.
    """

    def __init__(self, shapes: Optional[Iterable[Shape]] = None) -> None:
        self._shapes: List[Shape] = list(shapes or [])
        self._hooks: List[MutationHook] = []

    def add_hook(self, hook: MutationHook) -> Callable[[], None]:
        self._hooks.append(hook)

        def _remove() -> None:
            if hook in self._hooks:
                self._hooks.remove(hook)

        return _remove

    def _notify(self, action: str, shapes: List[Shape]) -> None:
        for hook in list(self._hooks):
            hook(action, shapes)

    # ------------------------------------------------------------------
    # Mutation

    def add(self, shape: Shape) -> None:
        self._shapes.append(shape)
        self._notify(ADDED, [shape])

    def extend(self, shapes: Iterable[Shape]) -> None:
        added = list(shapes)
        if not added:
            return
        self._shapes.extend(added)
        self._notify(ADDED, added)

    def remove(self, shapes: Iterable[Shape]) -> List[Shape]:
        doomed = {id(s) for s in shapes}
        removed = [s for s in self._shapes if id(s) in doomed]
        if not removed:
            return []
        self._shapes = [s for s in self._shapes if id(s) not in doomed]
        self._notify(REMOVED, removed)
        return removed

    def set_shapes(self, shapes: Iterable[Shape]) -> None:
        self._shapes = list(shapes)
        self._notify(REPLACED, list(self._shapes))

    def clear(self) -> None:
        self.set_shapes([])

    # ------------------------------------------------------------------
    # Queries

    @property
    def shapes(self) -> List[Shape]:
        return list(self._shapes)

    def __len__(self) -> int:
        return len(self._shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(list(self._shapes))

    def __contains__(self, shape: object) -> bool:
        return any(s is shape for s in self._shapes)

    def find(self, shape_id: str) -> Optional[Shape]:
        for shape in self._shapes:
            if shape.id == shape_id:
                return shape
        return None

    def shape_at_point(self, point: PointLike) -> Optional[Shape]:
        """Top-most shape whose body contains ``point``."""
        for shape in reversed(self._shapes):
            if shape.contains(point):
                return shape
        return None


__all__ = ["ADDED", "REMOVED", "REPLACED", "MutationHook", "ShapeCollection"]
