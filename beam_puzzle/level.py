"""Level model for the beam puzzle: grid, lamp, target and metadata."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)

MIN_WIDTH = 6
MAX_WIDTH = 30
MIN_HEIGHT = 4
MAX_HEIGHT = 16

ROW_SYMBOLS = {"#": "wall", ".": "empty"}


class LevelValidationError(ValueError):
    """Raised when level data cannot form a playable level."""

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field = field_name


class Direction(Enum):
    """Cardinal directions for the light beam."""

    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    @property
    def code(self) -> str:
        return self.name[0]

    @staticmethod
    def from_name(name: str) -> "Direction":
        if isinstance(name, Direction):
            return name
        if not isinstance(name, str):
            raise ValueError(f"Unknown direction: {name!r}")
        name = name.strip().upper()
        for direction in Direction:
            if name in (direction.name, direction.code):
                return direction
        raise ValueError(f"Unknown direction: {name}")

    def reverse(self) -> "Direction":
        mapping = {
            Direction.NORTH: Direction.SOUTH,
            Direction.SOUTH: Direction.NORTH,
            Direction.EAST: Direction.WEST,
            Direction.WEST: Direction.EAST,
        }
        return mapping[self]


class CellKind(Enum):
    """Cell vocabulary. Only WALL and EMPTY are stored in a level grid."""

    WALL = "wall"
    EMPTY = "empty"
    LAMP = "lamp"
    TARGET = "target"
    MIRROR = "mirror"


@dataclass(frozen=True)
class Lamp:
    """Light source emitting a single beam."""

    x: int
    y: int
    direction: Direction

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Target:
    """Cell the beam must reach; ``direction`` is the side it must arrive from."""

    x: int
    y: int
    direction: Direction

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass(frozen=True)
class LevelMetadata:
    name: str = "Unnamed"
    difficulty: str = "unknown"
    max_mirrors: int = 0
    description: str = ""
    hints: str = ""


def _coerce_cell(value: object, x: int, y: int) -> CellKind:
    if isinstance(value, CellKind):
        return value
    try:
        return CellKind(str(value).lower())
    except ValueError as exc:
        raise LevelValidationError(
            "grid", f"Unknown cell kind at ({x}, {y}): {value!r}"
        ) from exc


def _coerce_position(data: Dict, field_name: str) -> Tuple[int, int]:
    try:
        return int(data["x"]), int(data["y"])
    except (KeyError, TypeError, ValueError) as exc:
        raise LevelValidationError(field_name, f"Invalid {field_name} position") from exc


def _coerce_dimension(data: Dict, field_name: str, fallback: int) -> int:
    if field_name not in data:
        return fallback
    try:
        return int(data[field_name])
    except (TypeError, ValueError) as exc:
        raise LevelValidationError(
            field_name, f"Invalid {field_name}: {data[field_name]!r}"
        ) from exc


def _coerce_direction(value: object, field_name: str) -> Direction:
    try:
        return Direction.from_name(value)  # type: ignore[arg-type]
    except ValueError as exc:
        raise LevelValidationError(
            field_name, f"Invalid {field_name} direction: {value!r}"
        ) from exc


@dataclass(frozen=True)
class Level:
    """Immutable puzzle definition.

    The grid is indexed ``grid[y][x]``. Construction validates dimensions,
    grid shape, lamp and target placement and raises
    :class:`LevelValidationError` on malformed data.
    """

    width: int
    height: int
    grid: Tuple[Tuple[CellKind, ...], ...]
    lamp: Lamp
    target: Target
    metadata: LevelMetadata = field(default_factory=LevelMetadata)

    def __post_init__(self) -> None:
        if not self.grid:
            raise LevelValidationError("grid", "Invalid level data: missing grid")
        if not MIN_WIDTH <= self.width <= MAX_WIDTH:
            raise LevelValidationError(
                "width",
                f"Invalid width: {self.width} (min: {MIN_WIDTH}, max: {MAX_WIDTH})",
            )
        if not MIN_HEIGHT <= self.height <= MAX_HEIGHT:
            raise LevelValidationError(
                "height",
                f"Invalid height: {self.height} (min: {MIN_HEIGHT}, max: {MAX_HEIGHT})",
            )
        if len(self.grid) != self.height:
            raise LevelValidationError(
                "grid",
                f"Grid height mismatch: expected {self.height}, got {len(self.grid)}",
            )
        rows = []
        for y, row in enumerate(self.grid):
            if len(row) != self.width:
                raise LevelValidationError(
                    "grid",
                    f"Grid row {y} has wrong width: expected {self.width}, got {len(row)}",
                )
            rows.append(tuple(_coerce_cell(value, x, y) for x, value in enumerate(row)))
        object.__setattr__(self, "grid", tuple(rows))

        for name in ("lamp", "target"):
            entity = getattr(self, name)
            if entity is None or not self.is_valid_position(entity.x, entity.y):
                raise LevelValidationError(name, f"Invalid {name} position")
            if not isinstance(entity.direction, Direction):
                raise LevelValidationError(
                    name, f"Invalid {name} direction: {entity.direction!r}"
                )

        logger.debug(
            "Created level %s (%dx%d)", self.metadata.name, self.width, self.height
        )

    @classmethod
    def from_dict(cls, data: Dict) -> "Level":
        """Build a level from plain data.

        The grid may be supplied as ``grid`` (rows of cell names), ``rows``
        (strings using ``#`` for walls and ``.`` for empty cells) or
        ``walls`` (wall coordinates on an otherwise empty board).
        """

        if not isinstance(data, dict):
            raise LevelValidationError("grid", "Invalid level data: missing grid")
        grid = _grid_from_data(data)
        width = _coerce_dimension(data, "width", len(grid[0]) if grid else 0)
        height = _coerce_dimension(data, "height", len(grid))

        lamp_data = data.get("lamp")
        target_data = data.get("target")
        if not lamp_data:
            raise LevelValidationError("lamp", "Invalid lamp position")
        if not target_data:
            raise LevelValidationError("target", "Invalid target position")

        meta = data.get("metadata") or {}
        max_mirrors = meta.get("maxMirrors", meta.get("max_mirrors", data.get("maxMirrors", 0)))
        metadata = LevelMetadata(
            name=str(meta.get("name", data.get("name", "Unnamed"))),
            difficulty=str(meta.get("difficulty", data.get("difficulty", "unknown"))),
            max_mirrors=int(max_mirrors or 0),
            description=str(meta.get("description", data.get("description", ""))),
            hints=str(meta.get("hints", data.get("hints", ""))),
        )
        return cls(
            width=width,
            height=height,
            grid=grid,
            lamp=Lamp(
                *_coerce_position(lamp_data, "lamp"),
                direction=_coerce_direction(lamp_data.get("direction"), "lamp"),
            ),
            target=Target(
                *_coerce_position(target_data, "target"),
                direction=_coerce_direction(target_data.get("direction"), "target"),
            ),
            metadata=metadata,
        )

    def is_valid_position(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_cell_kind(self, x: int, y: int) -> Optional[CellKind]:
        if not self.is_valid_position(x, y):
            return None
        return self.grid[y][x]

    def is_empty_cell(self, x: int, y: int) -> bool:
        return self.get_cell_kind(x, y) is CellKind.EMPTY

    def is_wall(self, x: int, y: int) -> bool:
        return self.get_cell_kind(x, y) is CellKind.WALL

    def __str__(self) -> str:
        return (
            f"Level: {self.metadata.name} "
            f"({self.width}x{self.height}, {self.metadata.difficulty})"
        )


def _grid_from_data(data: Dict) -> List[List[object]]:
    if data.get("grid"):
        return [list(row) for row in data["grid"]]
    if data.get("rows"):
        grid: List[List[object]] = []
        for y, row in enumerate(data["rows"]):
            cells: List[object] = []
            for x, symbol in enumerate(row):
                if symbol not in ROW_SYMBOLS:
                    raise LevelValidationError(
                        "grid", f"Unknown cell symbol at ({x}, {y}): {symbol!r}"
                    )
                cells.append(ROW_SYMBOLS[symbol])
            grid.append(cells)
        return grid
    if "walls" in data and data.get("width") and data.get("height"):
        width = _coerce_dimension(data, "width", 0)
        height = _coerce_dimension(data, "height", 0)
        grid = [[CellKind.EMPTY] * width for _ in range(height)]
        for wall in data["walls"]:
            try:
                x, y = int(wall["x"]), int(wall["y"])
            except (KeyError, TypeError, ValueError) as exc:
                raise LevelValidationError("grid", f"Invalid wall entry: {wall!r}") from exc
            if not (0 <= x < width and 0 <= y < height):
                raise LevelValidationError(
                    "grid", f"Wall at ({x}, {y}) is outside the {width}x{height} board"
                )
            grid[y][x] = CellKind.WALL
        return grid
    raise LevelValidationError("grid", "Invalid level data: missing grid")


def level_summary(level: Level) -> Dict[str, object]:
    return {
        "name": level.metadata.name,
        "difficulty": level.metadata.difficulty,
        "dimensions": f"{level.width}x{level.height}",
        "max_mirrors": level.metadata.max_mirrors,
    }


class LevelLoader:
    """Load level files stored as JSON."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def available(self) -> List[str]:
        return sorted(path.stem for path in self.root.glob("*.json"))

    def load(self, name: str) -> Level:
        path = self.root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        data = json.loads(path.read_text())
        return Level.from_dict(data)

    def load_all(self, names: Optional[Sequence[str]] = None) -> Dict[str, Level]:
        return {name: self.load(name) for name in (names or self.available())}
