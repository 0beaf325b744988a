"""Tests for Ship domain logic."""

import pytest
from seabattle.engine.ship import (
    LARGE_FLEET,
    SMALL_FLEET,
    STANDARD_FLEET,
    Ship,
    fleet_for_board_size,
)


@pytest.mark.parametrize("length", [0, -1])
def test_ship_rejects_non_positive_length(length: int) -> None:
    with pytest.raises(ValueError):
        Ship(length)


def test_ship_sinks_exactly_when_hits_reach_length() -> None:
    ship = Ship(3, "cruiser")
    for hits in range(1, 4):
        ship.hit()
        assert ship.is_sunk() is (hits == 3)


def test_extra_hits_are_counted_and_ship_stays_sunk() -> None:
    ship = Ship(2)
    for _ in range(4):
        ship.hit()
    assert ship.hit_count == 4
    assert ship.is_sunk()


def test_fleet_depends_on_board_size() -> None:
    assert fleet_for_board_size(8) == SMALL_FLEET
    assert fleet_for_board_size(10) == STANDARD_FLEET
    assert fleet_for_board_size(12) == LARGE_FLEET
    assert [ship.length for ship in STANDARD_FLEET] == [5, 4, 3, 3, 2]
    assert LARGE_FLEET[-1].key == "patrol boat"
