"""Beam Puzzle package."""

from .game import BeamPuzzle, SolutionValidator
from .game_state import GameState
from .level import (
    CellKind,
    Direction,
    Lamp,
    Level,
    LevelLoader,
    LevelMetadata,
    LevelValidationError,
    Target,
)
from .physics import (
    MAX_STEPS,
    REFLECTION_TABLE,
    BeamCell,
    Mirror,
    PhysicsEngine,
    calculate_beam_path,
    get_illuminated_cells,
    is_target_complete,
    propagate_beam,
)

__all__ = [
    "BeamCell",
    "BeamPuzzle",
    "CellKind",
    "Direction",
    "GameState",
    "Lamp",
    "Level",
    "LevelLoader",
    "LevelMetadata",
    "LevelValidationError",
    "MAX_STEPS",
    "Mirror",
    "PhysicsEngine",
    "REFLECTION_TABLE",
    "SolutionValidator",
    "Target",
    "calculate_beam_path",
    "get_illuminated_cells",
    "is_target_complete",
    "propagate_beam",
]
