"""Tests for coordinate and neighbourhood helpers."""

from seabattle.engine.geometry import (
    Coordinate,
    Orientation,
    as_coordinate,
    footprint,
    orthogonal_neighbours,
    surrounding,
)


def test_as_coordinate_accepts_tuples() -> None:
    assert as_coordinate((3, 4)) == Coordinate(3, 4)
    point = Coordinate(1, 2)
    assert as_coordinate(point) is point
    x, y = point
    assert (x, y) == (1, 2)


def test_orientation_parse_tokens() -> None:
    assert Orientation.parse("horizontal") is Orientation.HORIZONTAL
    assert Orientation.parse(" V ") is Orientation.VERTICAL
    assert Orientation.parse(Orientation.VERTICAL) is Orientation.VERTICAL
    assert Orientation.parse("diagonal") is None


def test_footprint_extends_along_x_or_y() -> None:
    assert footprint(Coordinate(2, 5), 3, Orientation.HORIZONTAL) == [
        Coordinate(2, 5),
        Coordinate(3, 5),
        Coordinate(4, 5),
    ]
    assert footprint(Coordinate(2, 5), 2, Orientation.VERTICAL) == [
        Coordinate(2, 5),
        Coordinate(2, 6),
    ]


def test_neighbourhoods_are_clipped_to_the_board() -> None:
    assert orthogonal_neighbours(Coordinate(0, 0), 10) == [Coordinate(1, 0), Coordinate(0, 1)]
    assert len(surrounding(Coordinate(0, 0), 10)) == 3
    assert len(surrounding(Coordinate(5, 5), 10)) == 8
