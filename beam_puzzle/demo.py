"""Command line demo for the beam puzzle logic."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .game import BeamPuzzle, SolutionValidator
from .level import Direction, LevelLoader


LEVEL_ENV_VAR = "BEAM_PUZZLE_LEVEL_ROOT"
SOLUTION_ENV_VAR = "BEAM_PUZZLE_SOLUTION_ROOT"

WALL_SYMBOL = "█"
EMPTY_SYMBOL = " "
BEAM_SYMBOL = "·"
LAMP_SYMBOLS = {
    Direction.NORTH: "▲",
    Direction.EAST: "►",
    Direction.SOUTH: "▼",
    Direction.WEST: "◄",
}
TARGET_SYMBOLS = {
    Direction.NORTH: "△",
    Direction.EAST: "▷",
    Direction.SOUTH: "▽",
    Direction.WEST: "◁",
}


@dataclass(frozen=True)
class PuzzleDirectories:
    """Bundle with resolved level and solution directories."""

    level_root: Path
    solution_root: Path


def _default_level_root() -> Path:
    return Path(__file__).resolve().parent / "levels"


def _default_solution_root() -> Path:
    return Path(__file__).resolve().parent / "solutions"


def _read_directory(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> PuzzleDirectories:
    """Resolve content directories using environment variables.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if a resolved directory
        does not exist on disk.
    """

    level_root = _read_directory(LEVEL_ENV_VAR, _default_level_root())
    solution_root = _read_directory(SOLUTION_ENV_VAR, _default_solution_root())

    if check_exists:
        missing = [path for path in (level_root, solution_root) if not path.exists()]
        if missing:
            missing_str = ", ".join(str(path) for path in missing)
            raise FileNotFoundError(
                f"Required puzzle directories do not exist: {missing_str}"
            )

    return PuzzleDirectories(level_root=level_root, solution_root=solution_root)


def render_ascii(puzzle: BeamPuzzle) -> str:
    """Draw the board with walls, mirrors, lamp, target and the lit trail."""

    level = puzzle.level
    mirrors = puzzle.state.get_mirrors()
    lines: List[str] = []
    for y in range(level.height):
        row: List[str] = []
        for x in range(level.width):
            if (x, y) == level.lamp.position:
                row.append(LAMP_SYMBOLS[level.lamp.direction])
            elif (x, y) == level.target.position:
                row.append(TARGET_SYMBOLS[level.target.direction])
            elif (x, y) in mirrors:
                row.append(mirrors[(x, y)].orientation)
            elif level.is_wall(x, y):
                row.append(WALL_SYMBOL)
            elif (x, y) in puzzle.illuminated:
                row.append(BEAM_SYMBOL)
            else:
                row.append(EMPTY_SYMBOL)
        lines.append("".join(row))
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Beam puzzle demo")
    parser.add_argument("--list-levels", action="store_true", help="List bundled levels and exit.")
    parser.add_argument("--level", default="first_light", help="Level to load.")
    parser.add_argument(
        "--solution",
        help="Solution file to apply (defaults to the level name when given without a value).",
        nargs="?",
        const="",
    )
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print resolved content directories and exit.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        directories = resolve_directories()
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.info:
        print(
            "Beam puzzle directories\n"
            f"  levels: {directories.level_root}\n"
            f"  solutions: {directories.solution_root}"
        )
        return 0

    loader = LevelLoader(directories.level_root)
    if args.list_levels:
        print("Available levels:")
        status = 0
        for name in loader.available():
            try:
                level = loader.load(name)
            except ValueError as exc:
                print(f"error: {name}: {exc}", file=sys.stderr)
                status = 1
                continue
            print(
                f"  {name}: {level.metadata.name} ({level.metadata.difficulty}, "
                f"{level.metadata.max_mirrors} mirrors)"
            )
        return status

    try:
        level = loader.load(args.level)
        puzzle = BeamPuzzle(level)
        if args.solution is not None:
            validator = SolutionValidator(loader, directories.solution_root)
            solution = validator.load_solution(args.solution or args.level)
            validator.apply_solution(puzzle, solution)
    except (FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    results = puzzle.playthrough()
    print("=== Beam Puzzle Demo ===")
    print(f"Level: {level.metadata.name} ({level.metadata.difficulty})")
    print(render_ascii(puzzle))
    print(f"Mirrors used: {results['mirrors_used']}/{level.metadata.max_mirrors}")
    print(f"Beam cells traced: {len(results['path'])}")
    print(f"Target reached: {'yes' if results['complete'] else 'no'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
