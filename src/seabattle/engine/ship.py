"""Ship domain model and standard fleets."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ShipClass:
    """A named ship length that a fleet is made of."""

    name: str
    length: int

    @property
    def key(self) -> str:
        """Lower-case type token stored on placed ships (``"patrol boat"``)."""
        return self.name.lower()


CARRIER = ShipClass("Carrier", 5)
BATTLESHIP = ShipClass("Battleship", 4)
CRUISER = ShipClass("Cruiser", 3)
SUBMARINE = ShipClass("Submarine", 3)
DESTROYER = ShipClass("Destroyer", 2)
PATROL_BOAT = ShipClass("Patrol Boat", 2)

SMALL_FLEET: tuple[ShipClass, ...] = (BATTLESHIP, CRUISER, SUBMARINE, DESTROYER)
STANDARD_FLEET: tuple[ShipClass, ...] = (CARRIER, BATTLESHIP, CRUISER, SUBMARINE, DESTROYER)
LARGE_FLEET: tuple[ShipClass, ...] = STANDARD_FLEET + (PATROL_BOAT,)


def fleet_for_board_size(size: int) -> tuple[ShipClass, ...]:
    """Return the fleet played on a ``size`` x ``size`` board."""
    if size <= 8:
        return SMALL_FLEET
    if size >= 12:
        return LARGE_FLEET
    return STANDARD_FLEET


@dataclass(eq=False)
class Ship:
    """A placed ship: a length and a running count of hits taken."""

    length: int
    ship_type: str = ""
    hit_count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError("Ship length must be positive.")

    def hit(self) -> None:
        """Register one more hit; counts past ``length`` are kept."""
        self.hit_count += 1

    def is_sunk(self) -> bool:
        return self.hit_count >= self.length
