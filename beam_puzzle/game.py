"""Puzzle session tying a level, its mirrors and the beam engine together."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from .game_state import GameState
from .level import Level, LevelLoader, level_summary
from .physics import (
    BeamCell,
    calculate_beam_path,
    get_illuminated_cells,
    is_target_complete,
)


logger = logging.getLogger(__name__)


class BeamPuzzle:
    """High level game manager handling mirror edits and the win condition."""

    def __init__(self, level: Level):
        self.level = level
        self.state = GameState(level)
        self.path: List[BeamCell] = []
        self.illuminated: Set[Tuple[int, int]] = set()
        self.propagate()

    def propagate(self) -> List[BeamCell]:
        self.path = calculate_beam_path(self.level, self.state)
        self.illuminated = get_illuminated_cells(self.level, self.path)
        complete = is_target_complete(self.path, self.level.target)
        if complete != self.state.is_complete:
            self.state.update_completion(complete)
        return self.path

    def _refresh(self, changed: bool) -> bool:
        if changed:
            self.propagate()
        return changed

    def place_mirror(self, x: int, y: int, orientation: str = "/") -> bool:
        return self._refresh(self.state.add_mirror(x, y, orientation))

    def remove_mirror(self, x: int, y: int) -> bool:
        return self._refresh(self.state.remove_mirror(x, y))

    def rotate_mirror(self, x: int, y: int) -> bool:
        return self._refresh(self.state.rotate_mirror(x, y))

    def toggle_mirror(self, x: int, y: int) -> bool:
        """Place a '/' mirror on an empty cell or rotate the one already there."""

        if self.state.get_mirror(x, y) is not None:
            return self.rotate_mirror(x, y)
        return self.place_mirror(x, y, "/")

    def undo(self) -> bool:
        return self._refresh(self.state.undo())

    def redo(self) -> bool:
        return self._refresh(self.state.redo())

    def reset(self) -> None:
        self.state.reset()
        self.propagate()

    def level_complete(self) -> bool:
        return self.state.is_complete

    def playthrough(self) -> Dict[str, object]:
        self.propagate()
        return {
            "metadata": level_summary(self.level),
            "path": [self._cell_payload(cell) for cell in self.path],
            "illuminated": sorted([x, y] for x, y in self.illuminated),
            "mirrors": [
                {"position": [x, y], "orientation": mirror.orientation}
                for (x, y), mirror in sorted(self.state.get_mirrors().items())
            ],
            "mirrors_used": self.state.get_mirror_count(),
            "mirrors_remaining": self.state.get_remaining_mirrors(),
            "complete": self.level_complete(),
        }

    @staticmethod
    def _cell_payload(cell: BeamCell) -> Dict[str, object]:
        return {"x": cell.x, "y": cell.y, "direction": cell.direction.code}


class SolutionValidator:
    """Validate that a solution file produces the expected completion state."""

    def __init__(self, level_loader: LevelLoader, solutions_root: Path):
        self.level_loader = level_loader
        self.solutions_root = Path(solutions_root)

    def load_solution(self, name: str) -> Dict:
        path = self.solutions_root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        return json.loads(path.read_text())

    def apply_solution(self, puzzle: BeamPuzzle, solution: Dict) -> BeamPuzzle:
        for placement in solution.get("placements", []):
            x, y = (int(v) for v in placement["position"])
            orientation = str(placement.get("orientation", "/"))
            if not puzzle.place_mirror(x, y, orientation):
                raise ValueError(
                    f"Solution placement rejected: {orientation} at ({x}, {y})"
                )
        return puzzle

    def validate(self, level_name: str, solution_name: Optional[str] = None) -> bool:
        level = self.level_loader.load(level_name)
        solution_data = self.load_solution(solution_name or level_name)
        puzzle = BeamPuzzle(level)
        try:
            self.apply_solution(puzzle, solution_data)
        except ValueError as exc:
            logger.warning("%s: %s", level_name, exc)
            return False

        expected_length = solution_data.get("expected_path_length")
        if expected_length is not None and len(puzzle.path) != int(expected_length):
            return False
        expected_complete = bool(solution_data.get("expected_complete", True))
        return puzzle.level_complete() == expected_complete
