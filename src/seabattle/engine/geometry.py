"""Coordinates, orientations and neighbourhood helpers shared by the engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple, Union


@dataclass(frozen=True, order=True)
class Coordinate:
    """Immutable board coordinate; ``x`` is the column and ``y`` the row."""

    x: int
    y: int

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y

    def shifted(self, dx: int, dy: int) -> Coordinate:
        return Coordinate(self.x + dx, self.y + dy)


CoordinateLike = Union[Coordinate, Tuple[int, int]]


def as_coordinate(value: CoordinateLike) -> Coordinate:
    """Accept either a Coordinate or a plain ``(x, y)`` pair."""
    if isinstance(value, Coordinate):
        return value
    x, y = value
    return Coordinate(int(x), int(y))


class Orientation(Enum):
    """Allowed ship orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def step(self) -> tuple[int, int]:
        """Unit ``(dx, dy)`` along which a ship with this orientation extends."""
        return (1, 0) if self is Orientation.HORIZONTAL else (0, 1)

    @classmethod
    def parse(cls, value: Orientation | str) -> Orientation | None:
        """Return the orientation named by ``value`` or None for unknown tokens."""
        if isinstance(value, Orientation):
            return value
        if not isinstance(value, str):
            return None
        token = value.strip().lower()
        if token in {"h", "hor", "horizontal"}:
            return cls.HORIZONTAL
        if token in {"v", "ver", "vertical"}:
            return cls.VERTICAL
        return None


ORTHOGONAL_STEPS: tuple[tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
SURROUNDING_STEPS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)
)


def in_bounds(coord: Coordinate, size: int) -> bool:
    return 0 <= coord.x < size and 0 <= coord.y < size


def footprint(origin: Coordinate, length: int, orientation: Orientation) -> list[Coordinate]:
    """Cells covered by a ship of ``length`` starting at ``origin``."""
    dx, dy = orientation.step
    return [origin.shifted(dx * offset, dy * offset) for offset in range(length)]


def orthogonal_neighbours(coord: Coordinate, size: int) -> list[Coordinate]:
    """In-bounds 4-neighbourhood in the order +x, -x, +y, -y."""
    neighbours = (coord.shifted(dx, dy) for dx, dy in ORTHOGONAL_STEPS)
    return [neighbour for neighbour in neighbours if in_bounds(neighbour, size)]


def surrounding(coord: Coordinate, size: int) -> list[Coordinate]:
    """In-bounds 8-neighbourhood (diagonals included)."""
    neighbours = (coord.shifted(dx, dy) for dx, dy in SURROUNDING_STEPS)
    return [neighbour for neighbour in neighbours if in_bounds(neighbour, size)]


def all_coordinates(size: int) -> Iterator[Coordinate]:
    """Every cell of a ``size`` x ``size`` board, row by row."""
    for y in range(size):
        for x in range(size):
            yield Coordinate(x, y)
