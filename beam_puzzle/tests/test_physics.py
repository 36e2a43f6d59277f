import pytest

from beam_puzzle.level import Direction, Target
from beam_puzzle.physics import (
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

E, W, N, S = Direction.EAST, Direction.WEST, Direction.NORTH, Direction.SOUTH


def mirrors_at(*specs):
    return {(x, y): Mirror(x, y, orientation) for x, y, orientation in specs}


def test_straight_beam_reaches_target(test_level):
    path = propagate_beam(test_level, 1, 1, E)

    assert path[0] == BeamCell(2, 1, E)
    assert path[-1] == BeamCell(8, 1, E)
    assert len(path) == 7
    assert all(cell.direction is E for cell in path)
    assert is_target_complete(path, test_level.target)


def test_beam_into_adjacent_wall_is_empty(test_level):
    assert propagate_beam(test_level, 1, 1, N) == []
    assert propagate_beam(test_level, 1, 1, "W") == []


def test_string_directions_are_accepted(test_level):
    assert propagate_beam(test_level, 1, 1, "E") == propagate_beam(test_level, 1, 1, E)


def test_slash_mirror_redirects_beam_away_from_target(test_level):
    mirrors = mirrors_at((4, 1, "/"))
    path = propagate_beam(test_level, 1, 1, E, mirrors)

    assert BeamCell(4, 1, E) in path
    # (4, 0) is a wall, so the northbound beam ends on the mirror cell.
    assert path[-1] == BeamCell(4, 1, E)
    assert not is_target_complete(path, test_level.target)


def test_slash_mirror_sends_beam_north_in_open_space(test_level):
    path = propagate_beam(test_level, 1, 5, E, mirrors_at((4, 5, "/")))

    assert [cell.position for cell in path] == [
        (2, 5), (3, 5), (4, 5), (4, 4), (4, 3), (4, 2), (4, 1)
    ]
    assert path[2].direction is E
    assert all(cell.direction is N for cell in path[3:])


def test_two_mirror_redirect(test_level):
    mirrors = mirrors_at((4, 3, "/"), (4, 2, "\\"))
    path = propagate_beam(test_level, 1, 3, E, mirrors)

    assert path == [
        BeamCell(2, 3, E),
        BeamCell(3, 3, E),
        BeamCell(4, 3, E),
        BeamCell(4, 2, N),
        BeamCell(3, 2, W),
        BeamCell(2, 2, W),
        BeamCell(1, 2, W),
    ]


def test_backslash_mirror_turns_east_to_south(test_level):
    path = propagate_beam(test_level, 1, 1, E, mirrors_at((3, 1, "\\")))

    assert path[-1] == BeamCell(3, 6, S)
    assert [cell.direction for cell in path[:3]] == [E, E, S]


def test_beam_stops_at_board_edge(make_level):
    rows = ["." * 10 for _ in range(8)]
    level = make_level(rows=rows, lamp=(0, 4, "E"), target=(9, 4, "W"))

    path = calculate_beam_path(level)

    assert path[-1] == BeamCell(9, 4, E)
    assert len(path) == 9
    assert is_target_complete(path, level.target)


@pytest.mark.parametrize(
    "orientation, incoming, outgoing",
    [
        ("/", N, E),
        ("/", S, W),
        ("/", E, N),
        ("/", W, S),
        ("\\", N, W),
        ("\\", S, E),
        ("\\", E, S),
        ("\\", W, N),
    ],
)
def test_reflection_table(orientation, incoming, outgoing):
    assert REFLECTION_TABLE[orientation][incoming] is outgoing
    assert Mirror(0, 0, orientation).reflect(incoming) is outgoing


def test_reflection_table_is_exhaustive_and_never_identity():
    assert set(REFLECTION_TABLE) == {"/", "\\"}
    for mapping in REFLECTION_TABLE.values():
        assert set(mapping) == set(Direction)
        assert set(mapping.values()) == set(Direction)
        assert all(mapping[direction] is not direction for direction in Direction)


def test_unknown_mirror_orientation_raises():
    with pytest.raises(ValueError):
        Mirror(1, 1, "|").reflect(N)


def test_mirror_loop_terminates(test_level):
    mirrors = mirrors_at((2, 2, "/"), (5, 2, "\\"), (5, 5, "/"), (2, 5, "\\"))
    path = propagate_beam(test_level, 2, 3, N, mirrors)

    assert len(path) == 13
    assert path[0] == BeamCell(2, 2, N)
    assert path[-1] == BeamCell(2, 2, N)
    assert len(path) < MAX_STEPS


def test_step_cap_bounds_path(test_level):
    mirrors = mirrors_at((2, 2, "/"), (5, 2, "\\"), (5, 5, "/"), (2, 5, "\\"))
    path = propagate_beam(test_level, 2, 3, N, mirrors, max_steps=5)

    assert len(path) == 5


def test_no_duplicate_consecutive_positions(test_level):
    mirrors = mirrors_at((4, 1, "\\"), (4, 6, "/"), (7, 6, "/"), (7, 3, "\\"))
    path = calculate_beam_path(test_level, mirrors)

    assert path
    for previous, current in zip(path, path[1:]):
        assert (previous.x, previous.y) != (current.x, current.y)


def test_beam_path_is_deterministic(test_level):
    mirrors = mirrors_at((4, 1, "\\"), (4, 6, "/"))
    first = calculate_beam_path(test_level, mirrors)
    second = calculate_beam_path(test_level, mirrors)

    assert first == second


def test_unrecognized_direction_gives_empty_path(test_level, caplog):
    with caplog.at_level("WARNING"):
        path = propagate_beam(test_level, 2, 2, "INVALID")

    assert path == []
    assert "Unrecognized beam direction" in caplog.text


def test_start_outside_board_gives_empty_path(test_level):
    assert propagate_beam(test_level, -1, -1, E) == []


def test_missing_level_raises():
    with pytest.raises(ValueError):
        propagate_beam(None, 1, 1, E)
    with pytest.raises(ValueError):
        calculate_beam_path(None)


def test_empty_mirror_mapping_matches_none(test_level):
    assert propagate_beam(test_level, 1, 1, E, {}) == propagate_beam(test_level, 1, 1, E)


@pytest.mark.parametrize(
    "beam_direction, target_direction, expected",
    [
        (N, S, True),
        (S, N, True),
        (E, W, True),
        (W, E, True),
        (N, E, False),
        (N, W, False),
        (N, N, False),
        (E, E, False),
    ],
)
def test_target_requires_opposite_direction(beam_direction, target_direction, expected):
    path = [BeamCell(5, 5, beam_direction)]
    target = Target(5, 5, target_direction)

    assert is_target_complete(path, target) is expected


def test_target_uses_only_last_cell():
    target = Target(8, 1, W)
    crossing = [BeamCell(2, 1, E), BeamCell(8, 1, E), BeamCell(9, 1, E)]
    ending = [BeamCell(x, 1, E) for x in range(2, 9)]

    assert not is_target_complete(crossing, target)
    assert is_target_complete(ending, target)


def test_target_with_empty_path_or_wrong_position(test_level):
    assert not is_target_complete(None, test_level.target)
    assert not is_target_complete([], test_level.target)
    path = propagate_beam(test_level, 1, 1, E)
    assert not is_target_complete(path, Target(999, 999, W))


def test_target_accepts_generators():
    target = Target(8, 1, W)

    assert not is_target_complete(iter([]), target)
    assert not is_target_complete((cell for cell in ()), target)
    assert is_target_complete((BeamCell(x, 1, E) for x in range(2, 9)), target)


def test_illuminated_cells_include_lamp_and_path(test_level):
    path = calculate_beam_path(test_level)
    illuminated = get_illuminated_cells(test_level, path)

    assert (1, 1) in illuminated
    assert {cell.position for cell in path} <= illuminated
    assert len(illuminated) == 1 + len(path)


def test_illuminated_cells_edge_cases(test_level):
    assert get_illuminated_cells(test_level, None) == {(1, 1)}
    assert get_illuminated_cells(test_level, []) == {(1, 1)}

    path = [BeamCell(2, 1, E), BeamCell(3, 1, E)]
    assert get_illuminated_cells(None, path) == {(2, 1), (3, 1)}

    duplicated = [BeamCell(2, 1, E), BeamCell(2, 1, E), BeamCell(3, 1, E)]
    assert len(get_illuminated_cells(test_level, duplicated)) == 3


def test_illuminated_cells_follow_reflections(test_level):
    path = propagate_beam(test_level, 1, 1, E, mirrors_at((4, 1, "\\")))
    illuminated = get_illuminated_cells(test_level, path)

    assert (4, 1) in illuminated
    assert (4, 6) in illuminated
    assert (5, 1) not in illuminated


def test_physics_engine_facade(test_level):
    engine = PhysicsEngine(max_steps=3)
    path = engine.calculate_beam_path(test_level)

    assert len(path) == 3
    assert not engine.is_target_complete(path, test_level.target)
    assert engine.get_illuminated_cells(test_level, path) == {(1, 1), (2, 1), (3, 1), (4, 1)}

    full = PhysicsEngine().propagate_beam(test_level, 1, 1, "E")
    assert PhysicsEngine.is_target_complete(full, test_level.target)
