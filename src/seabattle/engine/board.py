"""Single-player board management: placement, attacks and sunk detection."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

import numpy as np
import numpy.typing as npt

from seabattle.telemetry import get_meter, get_tracer

from .geometry import (
    Coordinate,
    CoordinateLike,
    Orientation,
    all_coordinates,
    as_coordinate,
    footprint,
    in_bounds,
    surrounding,
)
from .ship import Ship, ShipClass

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.board")
meter = get_meter("seabattle.engine.board")

PLACEMENT_COUNTER = meter.create_counter(
    "seabattle_engine_ship_placements",
    unit="1",
    description="Number of attempted ship placements",
)

ATTACK_COUNTER = meter.create_counter(
    "seabattle_engine_attacks",
    unit="1",
    description="Attacks received by a board, by outcome",
)

DEFAULT_PLACEMENT_ATTEMPTS = 1000
PLANE_NAMES = ("occupied", "hit", "sunk", "miss")


class PlacementStatus(Enum):
    """Result of validating or performing a ship placement."""

    OK = "ok"
    OUT_OF_BOUNDS = "out_of_bounds"
    OVERLAP = "overlap"
    ADJACENT = "adjacent"
    INVALID_ORIENTATION = "invalid_orientation"
    NO_ROOM = "no_room"
    NOT_IN_FLEET = "not_in_fleet"

    @property
    def ok(self) -> bool:
        return self is PlacementStatus.OK

    def __bool__(self) -> bool:
        return self.ok


@dataclass
class Cell:
    """One grid square; ``ship`` and ``index`` are bound once at placement."""

    ship: Ship | None = None
    index: int | None = None
    hits: int = 0
    sunk: bool = False

    @property
    def occupied(self) -> bool:
        return self.ship is not None


@dataclass(frozen=True)
class ShipInfo:
    """Identity of a hit ship as reported to the attacker."""

    type: str
    length: int


@dataclass(frozen=True)
class AttackOutcome:
    """Uniform result of every attack path."""

    coord: Coordinate
    hit: bool = False
    sunk: bool = False
    ship: ShipInfo | None = None
    already_attacked: bool = False
    out_of_bounds: bool = False

    @property
    def recorded(self) -> bool:
        """True when the attack changed the board (a fresh hit or miss)."""
        return not (self.already_attacked or self.out_of_bounds)

    @property
    def label(self) -> str:
        if self.out_of_bounds:
            return "out_of_bounds"
        if self.already_attacked:
            return "repeat"
        if self.sunk:
            return "sunk"
        return "hit" if self.hit else "miss"


@dataclass(frozen=True)
class CellView:
    """Read-only rendering view of a cell."""

    occupied: bool
    hits: int
    sunk: bool
    attacked: bool
    ship_type: str | None = None


@dataclass(frozen=True)
class BoardSnapshot:
    """Immutable view of a board, indexed ``cells[y][x]``."""

    size: int
    cells: tuple[tuple[CellView, ...], ...]
    missed: tuple[Coordinate, ...]

    def cell(self, coord: CoordinateLike) -> CellView:
        point = as_coordinate(coord)
        return self.cells[point.y][point.x]

    def planes(self) -> npt.NDArray[np.float32]:
        """Stack of ``(occupied, hit, sunk, miss)`` 0/1 planes, shape ``(4, size, size)``."""
        planes = np.zeros((len(PLANE_NAMES), self.size, self.size), dtype=np.float32)
        for y, row in enumerate(self.cells):
            for x, view in enumerate(row):
                planes[0, y, x] = view.occupied
                planes[1, y, x] = view.occupied and view.attacked
                planes[2, y, x] = view.sunk
        for coord in self.missed:
            planes[3, coord.y, coord.x] = 1.0
        return planes


@dataclass
class Gameboard:
    """A square grid of cells holding one player's fleet."""

    size: int = 10
    owner: str = "unknown"
    ships: list[Ship] = field(default_factory=list, init=False)
    missed_attacks: list[Coordinate] = field(default_factory=list, init=False)
    attacked_coordinates: set[Coordinate] = field(default_factory=set, init=False)
    _grid: list[list[Cell]] = field(default_factory=list, init=False, repr=False)
    _ship_cells: dict[Ship, list[Coordinate]] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError("Board size must be positive.")
        self._grid = self._empty_grid()

    def _empty_grid(self) -> list[list[Cell]]:
        return [[Cell() for _ in range(self.size)] for _ in range(self.size)]

    def _cell(self, coord: Coordinate) -> Cell:
        return self._grid[coord.y][coord.x]

    def in_bounds(self, coord: CoordinateLike) -> bool:
        return in_bounds(as_coordinate(coord), self.size)

    # Placement -----------------------------------------------------------

    def check_placement(
        self, origin: CoordinateLike, length: int, orientation: Orientation | str
    ) -> PlacementStatus:
        """Validate a placement and report why it is rejected, without side effects.

        A non-positive ``length`` is not a placement outcome and raises
        ``ValueError``; use :meth:`can_place_ship` for a plain yes/no answer.
        """
        status, _ = self._validate(as_coordinate(origin), length, orientation)
        return status

    def _validate(
        self, origin: Coordinate, length: int, orientation: Orientation | str
    ) -> tuple[PlacementStatus, list[Coordinate]]:
        if length <= 0:
            raise ValueError("Ship length must be positive.")
        parsed = Orientation.parse(orientation)
        if parsed is None:
            return PlacementStatus.INVALID_ORIENTATION, []

        cells = footprint(origin, length, parsed)
        if not all(in_bounds(coord, self.size) for coord in cells):
            return PlacementStatus.OUT_OF_BOUNDS, cells
        if any(self._cell(coord).occupied for coord in cells):
            return PlacementStatus.OVERLAP, cells

        own_cells = set(cells)
        for coord in cells:
            for neighbour in surrounding(coord, self.size):
                if neighbour in own_cells:
                    continue
                if self._cell(neighbour).occupied:
                    return PlacementStatus.ADJACENT, cells
        return PlacementStatus.OK, cells

    def can_place_ship(
        self, origin: CoordinateLike, length: int, orientation: Orientation | str
    ) -> bool:
        """True when a ship fits in bounds without overlapping or touching another."""
        if length <= 0:
            return False
        return self.check_placement(origin, length, orientation).ok

    def place_ship(
        self,
        origin: CoordinateLike,
        length: int,
        orientation: Orientation | str,
        ship_type: str = "",
    ) -> PlacementStatus:
        """Place a new ship if the placement is valid.

        Rejections are reported through the returned status rather than raised;
        only a non-positive ``length`` raises ``ValueError``.
        """
        ship = Ship(length, ship_type)
        start = as_coordinate(origin)
        with tracer.start_as_current_span("board.place_ship") as span:
            span.set_attribute("ship.type", ship_type)
            span.set_attribute("ship.length", length)
            span.set_attribute("ship.origin.x", start.x)
            span.set_attribute("ship.origin.y", start.y)
            span.set_attribute("board.owner", self.owner)

            status, cells = self._validate(start, length, orientation)
            span.set_attribute("placement.status", status.value)
            PLACEMENT_COUNTER.add(1, attributes={"result": status.value, "owner": self.owner})
            event = {
                "owner": self.owner,
                "ship_type": ship_type,
                "length": length,
                "orientation": str(getattr(orientation, "value", orientation)),
                "x": start.x,
                "y": start.y,
            }
            if not status.ok:
                logger.warning("ship_placement_failed", extra={**event, "reason": status.value})
                return status

            for index, coord in enumerate(cells):
                cell = self._cell(coord)
                cell.ship = ship
                cell.index = index
            self.ships.append(ship)
            self._ship_cells[ship] = cells
            logger.info("ship_placed", extra=event)
            return status

    def random_placement(
        self,
        fleet: Iterable[ShipClass],
        rng: random.Random,
        max_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS,
    ) -> PlacementStatus:
        """Reset the board and place every ship of ``fleet`` at random.

        Each ship gets at most ``max_attempts`` tries; when one runs out the
        board is reset again and ``NO_ROOM`` is returned.
        """
        with tracer.start_as_current_span("board.random_placement") as span:
            span.set_attribute("board.owner", self.owner)
            self.reset()
            orientations = list(Orientation)
            for ship_class in fleet:
                for attempt in range(1, max_attempts + 1):
                    orientation = rng.choice(orientations)
                    origin = Coordinate(rng.randrange(self.size), rng.randrange(self.size))
                    if self.can_place_ship(origin, ship_class.length, orientation):
                        self.place_ship(origin, ship_class.length, orientation, ship_class.key)
                        logger.debug(
                            "random_ship_placed",
                            extra={
                                "ship_type": ship_class.key,
                                "attempts": attempt,
                                "owner": self.owner,
                            },
                        )
                        break
                else:
                    logger.warning(
                        "random_placement_exhausted",
                        extra={
                            "ship_type": ship_class.key,
                            "attempts": max_attempts,
                            "board_size": self.size,
                            "owner": self.owner,
                        },
                    )
                    span.set_attribute("placement.status", PlacementStatus.NO_ROOM.value)
                    self.reset()
                    return PlacementStatus.NO_ROOM
            span.set_attribute("placement.status", PlacementStatus.OK.value)
            return PlacementStatus.OK

    # Attacks -------------------------------------------------------------

    def receive_attack(self, coords: CoordinateLike) -> AttackOutcome:
        """Resolve an attack against this board.

        Off-board coordinates are a non-event and repeats are reported with
        ``already_attacked``; neither touches the attack history.
        """
        coord = as_coordinate(coords)
        with tracer.start_as_current_span("board.receive_attack") as span:
            span.set_attribute("attack.x", coord.x)
            span.set_attribute("attack.y", coord.y)
            span.set_attribute("board.owner", self.owner)
            outcome = self._resolve_attack(coord)
            span.set_attribute("attack.outcome", outcome.label)
            ATTACK_COUNTER.add(1, attributes={"outcome": outcome.label, "owner": self.owner})
            return outcome

    def _resolve_attack(self, coord: Coordinate) -> AttackOutcome:
        event = {"x": coord.x, "y": coord.y, "owner": self.owner}
        if not self.in_bounds(coord):
            logger.warning("attack_out_of_bounds", extra=event)
            return AttackOutcome(coord, out_of_bounds=True)
        if coord in self.attacked_coordinates:
            logger.info("attack_repeated", extra=event)
            return AttackOutcome(coord, already_attacked=True)

        self.attacked_coordinates.add(coord)
        cell = self._cell(coord)
        if cell.ship is None:
            if coord not in self.missed_attacks:
                self.missed_attacks.append(coord)
            logger.info("attack_miss", extra=event)
            return AttackOutcome(coord)

        ship = cell.ship
        ship.hit()
        cell.hits += 1
        sunk = ship.is_sunk()
        if sunk:
            for ship_coord in self._ship_cells[ship]:
                self._cell(ship_coord).sunk = True
            logger.info("ship_sunk", extra={**event, "ship_type": ship.ship_type})
        else:
            logger.info("attack_hit", extra={**event, "ship_type": ship.ship_type})
        return AttackOutcome(
            coord,
            hit=True,
            sunk=sunk,
            ship=ShipInfo(type=ship.ship_type, length=ship.length),
        )

    # Queries -------------------------------------------------------------

    def is_attacked(self, coords: CoordinateLike) -> bool:
        return as_coordinate(coords) in self.attacked_coordinates

    def all_ships_sunk(self) -> bool:
        """True once every placed ship is sunk; vacuously true with no ships."""
        return all(ship.is_sunk() for ship in self.ships)

    def get_ship_at(self, coords: CoordinateLike) -> Ship | None:
        coord = as_coordinate(coords)
        if not self.in_bounds(coord):
            return None
        return self._cell(coord).ship

    def get_missed_attacks(self) -> list[Coordinate]:
        return list(self.missed_attacks)

    def unattacked_coordinates(self) -> list[Coordinate]:
        return [
            coord for coord in all_coordinates(self.size) if coord not in self.attacked_coordinates
        ]

    def ship_coordinates(self, ship: Ship) -> Sequence[Coordinate]:
        return tuple(self._ship_cells.get(ship, ()))

    def get_grid(self) -> BoardSnapshot:
        """Return a read-only snapshot for renderers."""
        cells = tuple(
            tuple(
                CellView(
                    occupied=cell.occupied,
                    hits=cell.hits,
                    sunk=cell.sunk,
                    attacked=Coordinate(x, y) in self.attacked_coordinates,
                    ship_type=cell.ship.ship_type if cell.ship is not None else None,
                )
                for x, cell in enumerate(row)
            )
            for y, row in enumerate(self._grid)
        )
        return BoardSnapshot(size=self.size, cells=cells, missed=tuple(self.missed_attacks))

    def reset(self) -> None:
        """Clear ships and attack history, returning the board to its initial state."""
        self._grid = self._empty_grid()
        self.ships.clear()
        self._ship_cells.clear()
        self.missed_attacks.clear()
        self.attacked_coordinates.clear()
        logger.debug("board_reset", extra={"owner": self.owner})
