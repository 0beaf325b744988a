"""Tests for the Gameboard mechanics."""

import random

import numpy as np
import pytest
from seabattle.engine.board import Gameboard, PlacementStatus
from seabattle.engine.geometry import Coordinate, Orientation
from seabattle.engine.ship import LARGE_FLEET, STANDARD_FLEET


def test_fresh_board_counts_as_fully_sunk() -> None:
    board = Gameboard()
    assert board.ships == []
    assert board.all_ships_sunk()


def test_board_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Gameboard(size=0)


def test_placed_ship_occupies_exactly_its_footprint() -> None:
    board = Gameboard()
    status = board.place_ship((2, 3), 4, "vertical", "battleship")
    assert status is PlacementStatus.OK
    ship = board.get_ship_at((2, 3))
    assert ship is not None
    for y in range(3, 7):
        assert board.get_ship_at((2, y)) is ship
    assert board.get_ship_at((2, 2)) is None
    assert board.get_ship_at((2, 7)) is None
    assert board.ships == [ship]


def test_single_ship_scenario() -> None:
    board = Gameboard()
    board.place_ship((0, 0), 3, Orientation.HORIZONTAL)

    miss = board.receive_attack((3, 0))
    assert not miss.hit
    assert board.get_missed_attacks() == [Coordinate(3, 0)]

    outcomes = [board.receive_attack((x, 0)) for x in range(3)]
    assert all(outcome.hit for outcome in outcomes)
    assert [outcome.sunk for outcome in outcomes] == [False, False, True]
    assert outcomes[-1].ship is not None
    assert outcomes[-1].ship.length == 3
    assert board.get_ship_at((0, 0)).is_sunk()
    assert board.all_ships_sunk()


@pytest.mark.parametrize("coords", [(-1, 5), (10, 5), (5, 10), (5, -1)])
def test_out_of_bounds_attack_is_a_non_event(coords: tuple[int, int]) -> None:
    board = Gameboard()
    board.place_ship((0, 0), 2, "horizontal")
    outcome = board.receive_attack(coords)
    assert outcome.out_of_bounds
    assert not outcome.hit
    assert board.get_missed_attacks() == []
    assert board.attacked_coordinates == set()


def test_repeat_miss_leaves_history_unchanged() -> None:
    board = Gameboard()
    board.receive_attack((4, 4))
    again = board.receive_attack((4, 4))
    assert again.already_attacked
    assert not again.hit
    assert board.get_missed_attacks() == [Coordinate(4, 4)]
    assert board.is_attacked((4, 4))


def test_repeat_hit_does_not_count_twice() -> None:
    board = Gameboard()
    board.place_ship((5, 5), 2, "horizontal")
    first = board.receive_attack((5, 5))
    second = board.receive_attack((5, 5))
    assert first.hit and not first.already_attacked
    assert second.already_attacked and not second.hit
    ship = board.get_ship_at((5, 5))
    assert ship.hit_count == 1
    assert not board.all_ships_sunk()

    board.receive_attack((6, 5))
    assert board.all_ships_sunk()
    board.receive_attack((6, 5))
    assert board.all_ships_sunk()


def test_attack_history_invariants() -> None:
    board = Gameboard()
    board.place_ship((1, 1), 3, "vertical")
    for coord in [(1, 1), (0, 0), (1, 2), (9, 9), (0, 0)]:
        board.receive_attack(coord)
    missed = set(board.get_missed_attacks())
    assert missed <= board.attacked_coordinates
    assert all(board.get_ship_at(coord) is None for coord in missed)
    assert Coordinate(1, 1) in board.attacked_coordinates
    assert Coordinate(1, 1) not in missed


def test_adjacent_placement_is_rejected_but_gap_is_fine() -> None:
    board = Gameboard()
    assert board.place_ship((3, 3), 3, "vertical")

    # Orthogonally touching the top end and diagonally touching a corner.
    assert not board.can_place_ship((3, 1), 2, "vertical")
    assert not board.can_place_ship((4, 6), 2, "horizontal")
    assert board.check_placement((4, 6), 2, "horizontal") is PlacementStatus.ADJACENT

    # One empty column between ships.
    assert board.can_place_ship((5, 3), 3, "vertical")
    assert board.can_place_ship((3, 7), 2, "horizontal")


def test_placement_reports_distinct_reasons() -> None:
    board = Gameboard()
    board.place_ship((0, 0), 3, "horizontal")
    assert board.place_ship((9, 9), 2, "horizontal") is PlacementStatus.OUT_OF_BOUNDS
    assert board.place_ship((-1, 0), 2, "vertical") is PlacementStatus.OUT_OF_BOUNDS
    assert board.place_ship((1, 0), 2, "vertical") is PlacementStatus.OVERLAP
    assert board.place_ship((5, 5), 2, "sideways") is PlacementStatus.INVALID_ORIENTATION
    assert not board.can_place_ship((5, 5), 2, "sideways")
    assert len(board.ships) == 1


def test_non_positive_length_raises_on_place_but_not_on_query() -> None:
    board = Gameboard()
    assert board.can_place_ship((0, 0), 0, "horizontal") is False
    with pytest.raises(ValueError):
        board.place_ship((0, 0), 0, "horizontal")


def test_can_place_ship_is_side_effect_free() -> None:
    board = Gameboard()
    for _ in range(3):
        assert board.can_place_ship((0, 0), 5, "horizontal")
    assert board.ships == []
    assert board.get_ship_at((0, 0)) is None


def test_sinking_marks_every_cell_of_the_ship() -> None:
    board = Gameboard()
    board.place_ship((2, 2), 2, "horizontal", "destroyer")
    board.receive_attack((2, 2))
    snapshot = board.get_grid()
    assert snapshot.cell((2, 2)).hits == 1
    assert not snapshot.cell((3, 2)).sunk

    outcome = board.receive_attack((3, 2))
    assert outcome.sunk
    assert outcome.ship.type == "destroyer"
    snapshot = board.get_grid()
    assert snapshot.cell((2, 2)).sunk and snapshot.cell((3, 2)).sunk
    assert snapshot.cell((3, 2)).ship_type == "destroyer"


def test_snapshot_planes_mark_ships_hits_and_misses() -> None:
    board = Gameboard(size=6)
    board.place_ship((0, 0), 2, "horizontal")
    board.receive_attack((0, 0))
    board.receive_attack((5, 5))
    planes = board.get_grid().planes()
    assert planes.shape == (4, 6, 6)
    assert planes.dtype == np.float32
    assert planes[0].sum() == 2
    assert planes[1, 0, 0] == 1.0
    assert planes[2].sum() == 0
    assert planes[3, 5, 5] == 1.0


def test_reset_restores_initial_state() -> None:
    board = Gameboard()
    board.place_ship((0, 0), 2, "horizontal")
    board.receive_attack((0, 0))
    board.receive_attack((9, 9))
    board.reset()
    assert board.ships == []
    assert board.get_missed_attacks() == []
    assert board.attacked_coordinates == set()
    assert board.get_ship_at((0, 0)) is None
    assert board.can_place_ship((0, 0), 5, "horizontal")


def test_random_placement_populates_fleet_without_touching() -> None:
    board = Gameboard()
    status = board.random_placement(STANDARD_FLEET, rng=random.Random(123))
    assert status is PlacementStatus.OK
    assert [ship.length for ship in board.ships] == [5, 4, 3, 3, 2]

    owners = {}
    for ship in board.ships:
        for coord in board.ship_coordinates(ship):
            assert coord not in owners, "Ships should not overlap"
            owners[coord] = ship
    for coord, ship in owners.items():
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                neighbour = owners.get(Coordinate(coord.x + dx, coord.y + dy))
                assert neighbour is None or neighbour is ship


def test_random_placement_gives_up_on_a_board_too_small() -> None:
    board = Gameboard(size=4)
    status = board.random_placement(LARGE_FLEET, rng=random.Random(1), max_attempts=20)
    assert status is PlacementStatus.NO_ROOM
    assert not status
    assert board.ships == []


def test_unattacked_coordinates_shrink_as_attacks_land() -> None:
    board = Gameboard(size=3)
    assert len(board.unattacked_coordinates()) == 9
    board.receive_attack((1, 1))
    board.receive_attack((1, 1))
    remaining = board.unattacked_coordinates()
    assert len(remaining) == 8
    assert Coordinate(1, 1) not in remaining


def test_check_placement_raises_for_non_positive_length() -> None:
    board = Gameboard()
    with pytest.raises(ValueError):
        board.check_placement((0, 0), 0, "horizontal")
    assert board.can_place_ship((0, 0), -2, "vertical") is False


@pytest.mark.parametrize("coords, expected", [((0, 0), True), ((9, 9), True), ((10, 0), False), ((0, -1), False)])
def test_in_bounds_guards_lookups(coords: tuple[int, int], expected: bool) -> None:
    board = Gameboard()
    assert board.in_bounds(coords) is expected
    if not expected:
        assert board.get_ship_at(coords) is None
