"""Beam propagation, target matching and illumination for the beam puzzle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from .level import Direction, Level


logger = logging.getLogger(__name__)

MAX_STEPS = 1000

MIRROR_ORIENTATIONS = ("/", "\\")

REFLECTION_TABLE: Dict[str, Dict[Direction, Direction]] = {
    "/": {
        Direction.NORTH: Direction.EAST,
        Direction.SOUTH: Direction.WEST,
        Direction.EAST: Direction.NORTH,
        Direction.WEST: Direction.SOUTH,
    },
    "\\": {
        Direction.NORTH: Direction.WEST,
        Direction.SOUTH: Direction.EAST,
        Direction.EAST: Direction.SOUTH,
        Direction.WEST: Direction.NORTH,
    },
}


@dataclass(frozen=True)
class Mirror:
    """Player-placed mirror reflecting the beam depending on its orientation."""

    x: int
    y: int
    orientation: str  # '/' or '\\'

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def reflect(self, direction: Direction) -> Direction:
        try:
            mapping = REFLECTION_TABLE[self.orientation]
        except KeyError as exc:
            raise ValueError(f"Unknown mirror orientation: {self.orientation}") from exc
        return mapping[direction]

    def rotated(self) -> "Mirror":
        orientation = "\\" if self.orientation == "/" else "/"
        return Mirror(self.x, self.y, orientation)


@dataclass(frozen=True)
class BeamCell:
    """One traced step: the cell entered and the direction of travel on entry."""

    x: int
    y: int
    direction: Direction

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)


# A position -> Mirror mapping, or any registry exposing ``get_mirrors()``.
MirrorSource = Optional[Mapping[Tuple[int, int], Mirror]]


def _mirror_map(mirrors: object) -> Mapping[Tuple[int, int], Mirror]:
    if mirrors is None:
        return {}
    get_mirrors = getattr(mirrors, "get_mirrors", None)
    if callable(get_mirrors):
        return get_mirrors()
    return mirrors  # type: ignore[return-value]


def propagate_beam(
    level: Level,
    start_x: int,
    start_y: int,
    direction: Union[Direction, str],
    mirrors: MirrorSource = None,
    *,
    max_steps: int = MAX_STEPS,
) -> List[BeamCell]:
    """Trace the beam leaving ``(start_x, start_y)`` in ``direction``.

    The start cell itself is never part of the returned path. Tracing stops
    before a wall or the board edge, when a ``(position, direction)`` state
    repeats, or after ``max_steps`` steps.
    """

    if level is None:
        raise ValueError("Cannot propagate a beam without a level")
    try:
        heading = Direction.from_name(direction)  # type: ignore[arg-type]
    except ValueError:
        logger.warning("Unrecognized beam direction %r, beam cannot move", direction)
        return []

    placed = _mirror_map(mirrors)
    path: List[BeamCell] = []
    visited: Set[Tuple[int, int, Direction]] = set()
    x, y = start_x, start_y

    for _ in range(max_steps):
        dx, dy = heading.vector
        next_x, next_y = x + dx, y + dy
        if not level.is_valid_position(next_x, next_y):
            break
        if level.is_wall(next_x, next_y):
            break

        x, y = next_x, next_y
        path.append(BeamCell(x, y, heading))

        mirror = placed.get((x, y))
        if mirror is not None:
            heading = mirror.reflect(heading)

        state = (x, y, heading)
        if state in visited:
            logger.debug("Beam loop detected at (%d, %d) heading %s", x, y, heading.code)
            break
        visited.add(state)

    logger.debug("Beam traced %d cells from (%d, %d)", len(path), start_x, start_y)
    return path


def calculate_beam_path(level: Level, mirrors: MirrorSource = None) -> List[BeamCell]:
    if level is None:
        raise ValueError("Cannot calculate a beam path without a level")
    lamp = level.lamp
    return propagate_beam(level, lamp.x, lamp.y, lamp.direction, mirrors)


def is_target_complete(beam_path: Optional[Iterable[BeamCell]], target) -> bool:
    """Return True when the beam ends on the target, arriving from its side.

    Only the final cell counts; crossing the target earlier does not.
    """

    cells = list(beam_path or ())
    if not cells or target is None:
        return False
    last = cells[-1]
    if (last.x, last.y) != (target.x, target.y):
        return False
    try:
        expected = Direction.from_name(target.direction).reverse()
        travelling = Direction.from_name(last.direction)
    except ValueError:
        return False
    return travelling is expected


def get_illuminated_cells(
    level: Optional[Level], beam_path: Optional[Iterable[BeamCell]]
) -> Set[Tuple[int, int]]:
    illuminated: Set[Tuple[int, int]] = set()
    if level is not None:
        illuminated.add(level.lamp.position)
    for cell in beam_path or ():
        illuminated.add((cell.x, cell.y))
    return illuminated


class PhysicsEngine:
    """Object facade over the beam functions with a configurable step cap."""

    def __init__(self, max_steps: int = MAX_STEPS):
        self.max_steps = max_steps

    def propagate_beam(
        self,
        level: Level,
        start_x: int,
        start_y: int,
        direction: Union[Direction, str],
        mirrors: MirrorSource = None,
    ) -> List[BeamCell]:
        return propagate_beam(
            level, start_x, start_y, direction, mirrors, max_steps=self.max_steps
        )

    def calculate_beam_path(self, level: Level, mirrors: MirrorSource = None) -> List[BeamCell]:
        if level is None:
            raise ValueError("Cannot calculate a beam path without a level")
        lamp = level.lamp
        return self.propagate_beam(level, lamp.x, lamp.y, lamp.direction, mirrors)

    @staticmethod
    def is_target_complete(beam_path: Optional[Iterable[BeamCell]], target) -> bool:
        return is_target_complete(beam_path, target)

    @staticmethod
    def get_illuminated_cells(
        level: Optional[Level], beam_path: Optional[Iterable[BeamCell]]
    ) -> Set[Tuple[int, int]]:
        return get_illuminated_cells(level, beam_path)
