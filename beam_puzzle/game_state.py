"""Mirror placement bookkeeping for a single level."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .level import Level
from .physics import MIRROR_ORIENTATIONS, Mirror


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementAction:
    """Recorded change to the registry: the mirror before and after."""

    position: Tuple[int, int]
    before: Optional[Mirror]
    after: Optional[Mirror]


class GameState:
    """Mutable registry of player-placed mirrors bound to one level.

    Illegal placements are rejected by returning ``False`` instead of
    raising, so callers can probe legality interactively.
    """

    def __init__(self, level: Level):
        if not isinstance(level, Level):
            raise TypeError("Invalid level: must provide a valid Level object")
        self.level = level
        self._mirrors: Dict[Tuple[int, int], Mirror] = {}
        self.is_complete = False
        self._undo_stack: List[PlacementAction] = []
        self._redo_stack: List[PlacementAction] = []
        logger.debug("Game state initialised for level %s", level.metadata.name)

    def add_mirror(self, x: int, y: int, orientation: str) -> bool:
        if not _is_int(x) or not _is_int(y):
            logger.warning("Invalid mirror coordinates: %r, %r", x, y)
            return False
        if not self.level.is_valid_position(x, y):
            logger.warning("Mirror position out of bounds: (%d, %d)", x, y)
            return False
        if orientation not in MIRROR_ORIENTATIONS:
            logger.warning("Invalid mirror orientation: %r", orientation)
            return False
        if not self.level.is_empty_cell(x, y):
            logger.warning("Cannot place mirror on non-empty cell: (%d, %d)", x, y)
            return False
        if self.get_mirror_count() >= self.get_max_mirrors():
            logger.warning("Reached maximum mirrors: %d", self.get_max_mirrors())
            return False

        mirror = Mirror(x, y, orientation)
        self._apply(PlacementAction((x, y), self._mirrors.get((x, y)), mirror))
        logger.debug("Mirror %s added at (%d, %d)", orientation, x, y)
        return True

    def remove_mirror(self, x: int, y: int) -> bool:
        mirror = self._mirrors.get((x, y))
        if mirror is None:
            return False
        self._apply(PlacementAction((x, y), mirror, None))
        logger.debug("Mirror removed at (%d, %d)", x, y)
        return True

    def rotate_mirror(self, x: int, y: int) -> bool:
        mirror = self._mirrors.get((x, y))
        if mirror is None:
            return False
        self._apply(PlacementAction((x, y), mirror, mirror.rotated()))
        return True

    def get_mirror(self, x: int, y: int) -> Optional[Mirror]:
        return self._mirrors.get((x, y))

    def get_mirror_count(self) -> int:
        return len(self._mirrors)

    def get_max_mirrors(self) -> int:
        return self.level.metadata.max_mirrors or 0

    def get_remaining_mirrors(self) -> int:
        return max(0, self.get_max_mirrors() - self.get_mirror_count())

    def get_mirrors(self) -> Dict[Tuple[int, int], Mirror]:
        return dict(self._mirrors)

    def clear_mirrors(self) -> None:
        self._mirrors = {}
        self._undo_stack.clear()
        self._redo_stack.clear()
        logger.debug("All mirrors cleared")

    def reset(self) -> None:
        self.clear_mirrors()
        self.is_complete = False

    def update_completion(self, is_complete: bool) -> None:
        self.is_complete = bool(is_complete)
        logger.debug("Completion status: %s", "COMPLETE" if self.is_complete else "INCOMPLETE")

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def undo(self) -> bool:
        if not self._undo_stack:
            return False
        action = self._undo_stack.pop()
        self._set(action.position, action.before)
        self._redo_stack.append(action)
        return True

    def redo(self) -> bool:
        if not self._redo_stack:
            return False
        action = self._redo_stack.pop()
        self._set(action.position, action.after)
        self._undo_stack.append(action)
        return True

    def _apply(self, action: PlacementAction) -> None:
        self._set(action.position, action.after)
        self._undo_stack.append(action)
        self._redo_stack.clear()

    def _set(self, position: Tuple[int, int], mirror: Optional[Mirror]) -> None:
        if mirror is None:
            self._mirrors.pop(position, None)
        else:
            self._mirrors[position] = mirror

    def __str__(self) -> str:
        status = "COMPLETE" if self.is_complete else "incomplete"
        return (
            f"GameState: {self.get_mirror_count()}/{self.get_max_mirrors()} mirrors, {status}"
        )


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
