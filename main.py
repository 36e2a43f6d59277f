"""Interactive viewer for the beam puzzle."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

import pygame

from beam_puzzle import layout
from beam_puzzle.demo import resolve_directories
from beam_puzzle.game import BeamPuzzle
from beam_puzzle.level import Direction, LevelLoader


def _cell_rect(board_rect: pygame.Rect, x: int, y: int) -> pygame.Rect:
    return pygame.Rect(
        board_rect.x + x * layout.TILE_SIZE,
        board_rect.y + y * layout.TILE_SIZE,
        layout.TILE_SIZE,
        layout.TILE_SIZE,
    )


def _draw_arrow(surface: pygame.Surface, rect: pygame.Rect, direction: Direction, color) -> None:
    dx, dy = direction.vector
    half = layout.TILE_SIZE // 2 - 6
    cx, cy = rect.center
    tip = (cx + dx * half, cy + dy * half)
    # perpendicular to the arrow direction
    px, py = -dy, dx
    base_left = (cx - dx * half + px * half, cy - dy * half + py * half)
    base_right = (cx - dx * half - px * half, cy - dy * half - py * half)
    pygame.draw.polygon(surface, color, (tip, base_left, base_right))


def draw_board(surface: pygame.Surface, puzzle: BeamPuzzle, board_rect: pygame.Rect) -> None:
    """Render walls, the lit trail, lamp, target and placed mirrors."""

    level = puzzle.level
    pygame.draw.rect(surface, layout.BOARD_BACKGROUND_COLOR, board_rect)

    for y in range(level.height):
        for x in range(level.width):
            rect = _cell_rect(board_rect, x, y)
            if level.is_wall(x, y):
                pygame.draw.rect(surface, layout.WALL_COLOR, rect)
            elif (x, y) in puzzle.illuminated:
                pygame.draw.rect(surface, layout.BEAM_DIM_COLOR, rect.inflate(-8, -8))
            pygame.draw.rect(surface, layout.GRID_LINE_COLOR, rect, 1)

    lamp_center = _cell_rect(board_rect, *level.lamp.position).center
    previous = lamp_center
    for cell in puzzle.path:
        current = _cell_rect(board_rect, cell.x, cell.y).center
        pygame.draw.line(surface, layout.BEAM_COLOR, previous, current, 3)
        previous = current

    _draw_arrow(
        surface,
        _cell_rect(board_rect, *level.lamp.position),
        level.lamp.direction,
        layout.LAMP_COLOR,
    )
    target_color = layout.BEAM_COLOR if puzzle.level_complete() else layout.TARGET_COLOR
    _draw_arrow(
        surface,
        _cell_rect(board_rect, *level.target.position),
        level.target.direction.reverse(),
        target_color,
    )

    for (x, y), mirror in puzzle.state.get_mirrors().items():
        rect = _cell_rect(board_rect, x, y).inflate(-6, -6)
        if mirror.orientation == "/":
            start, end = rect.bottomleft, rect.topright
        else:
            start, end = rect.topleft, rect.bottomright
        pygame.draw.line(surface, layout.MIRROR_COLOR, start, end, 4)


def draw_status(surface: pygame.Surface, puzzle: BeamPuzzle, status_rect: pygame.Rect, font) -> None:
    state = puzzle.state
    text = (
        f"{puzzle.level.metadata.name}  |  mirrors {state.get_mirror_count()}/"
        f"{state.get_max_mirrors()}"
    )
    if puzzle.level_complete():
        text += "  |  Target reached!"
    text_surface = font.render(text, True, layout.TEXT_COLOR)
    text_rect = text_surface.get_rect()
    text_rect.midleft = (status_rect.x + layout.STATUS_PADDING, status_rect.centery)
    surface.blit(text_surface, text_rect)


def handle_click(puzzle: BeamPuzzle, board_rect: pygame.Rect, pixel, button: int) -> bool:
    """Left click places or rotates a mirror, right click removes it."""

    cell = layout.cell_at(tuple(board_rect), pixel)
    if cell is None:
        return False
    if button == 1:
        return puzzle.toggle_mirror(*cell)
    if button == 3:
        return puzzle.remove_mirror(*cell)
    return False


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])
    level_name = args[0] if args else "first_light"

    directories = resolve_directories()
    level = LevelLoader(directories.level_root).load(level_name)
    puzzle = BeamPuzzle(level)

    pygame.init()
    pygame.font.init()
    geometry = layout.compute_geometry(level.width, level.height)
    screen = pygame.display.set_mode(geometry.window)
    pygame.display.set_caption(f"Beam Puzzle - {level.metadata.name}")
    font = pygame.font.Font(None, 26)

    board_rect = pygame.Rect(*geometry.board)
    status_rect = pygame.Rect(*geometry.status)
    clock = pygame.time.Clock()
    running = True

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_u:
                    puzzle.undo()
                elif event.key == pygame.K_r:
                    puzzle.redo()
                elif event.key == pygame.K_BACKSPACE:
                    puzzle.reset()
            elif event.type == pygame.MOUSEBUTTONDOWN:
                handle_click(puzzle, board_rect, event.pos, event.button)

        screen.fill(layout.BACKGROUND_COLOR)
        draw_board(screen, puzzle, board_rect)
        draw_status(screen, puzzle, status_rect, font)
        pygame.display.flip()
        clock.tick(60)

    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
