from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from beam_puzzle.level import Level


def bordered_rows(width: int, height: int):
    inner = "#" + "." * (width - 2) + "#"
    return ["#" * width] + [inner] * (height - 2) + ["#" * width]


def level_data(
    width: int = 10,
    height: int = 8,
    lamp=(1, 1, "E"),
    target=(8, 1, "W"),
    max_mirrors: int = 3,
    rows=None,
) -> Dict:
    return {
        "width": width,
        "height": height,
        "rows": rows or bordered_rows(width, height),
        "lamp": {"x": lamp[0], "y": lamp[1], "direction": lamp[2]},
        "target": {"x": target[0], "y": target[1], "direction": target[2]},
        "metadata": {"name": "Test Level", "difficulty": "easy", "maxMirrors": max_mirrors},
    }


@pytest.fixture
def make_level():
    def _make(**kwargs) -> Level:
        return Level.from_dict(level_data(**kwargs))

    return _make


@pytest.fixture
def test_level(make_level) -> Level:
    """10x8 bordered level, lamp at (1, 1) facing east, target at (8, 1) facing west."""

    return make_level()


@pytest.fixture
def package_root() -> Path:
    return Path(__file__).resolve().parents[1]


@pytest.fixture
def make_level_data():
    return level_data
