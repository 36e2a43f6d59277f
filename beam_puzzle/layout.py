"""Layout constants for the beam puzzle viewer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

# Tile metrics
TILE_SIZE: int = 40
GRID_PADDING: int = 16
BOARD_OUTER_PADDING: int = 24

# Status bar metrics
STATUS_HEIGHT: int = 56
STATUS_PADDING: int = 12

# Colors expressed as RGB tuples
BACKGROUND_COLOR: Tuple[int, int, int] = (0, 0, 0)
BOARD_BACKGROUND_COLOR: Tuple[int, int, int] = (16, 16, 24)
WALL_COLOR: Tuple[int, int, int] = (96, 96, 110)
GRID_LINE_COLOR: Tuple[int, int, int] = (40, 40, 56)
BEAM_COLOR: Tuple[int, int, int] = (255, 255, 0)
BEAM_DIM_COLOR: Tuple[int, int, int] = (128, 128, 128)
LAMP_COLOR: Tuple[int, int, int] = (255, 200, 40)
TARGET_COLOR: Tuple[int, int, int] = (0, 255, 0)
MIRROR_COLOR: Tuple[int, int, int] = (200, 230, 255)
TEXT_COLOR: Tuple[int, int, int] = (255, 255, 255)


@dataclass(frozen=True)
class BoardGeometry:
    """Pixel rectangles for the board and status bar."""

    board: Tuple[int, int, int, int]
    status: Tuple[int, int, int, int]
    window: Tuple[int, int]


def compute_geometry(level_width: int, level_height: int) -> BoardGeometry:
    board_width = level_width * TILE_SIZE
    board_height = level_height * TILE_SIZE

    board_x = BOARD_OUTER_PADDING
    board_y = BOARD_OUTER_PADDING

    status_x = board_x
    status_y = board_y + board_height + GRID_PADDING

    window_width = board_x + board_width + BOARD_OUTER_PADDING
    window_height = status_y + STATUS_HEIGHT + BOARD_OUTER_PADDING

    return BoardGeometry(
        board=(board_x, board_y, board_width, board_height),
        status=(status_x, status_y, board_width, STATUS_HEIGHT),
        window=(window_width, window_height),
    )


def cell_at(
    board: Tuple[int, int, int, int], pixel: Tuple[int, int]
) -> Optional[Tuple[int, int]]:
    """Map a pixel inside ``board`` to grid coordinates, or None outside it."""

    board_x, board_y, board_width, board_height = board
    px, py = pixel
    if not (board_x <= px < board_x + board_width and board_y <= py < board_y + board_height):
        return None
    return ((px - board_x) // TILE_SIZE, (py - board_y) // TILE_SIZE)
