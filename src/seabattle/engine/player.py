"""Players and the computer opponent's targeting state machine."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from seabattle.telemetry import get_meter, get_tracer

from .board import AttackOutcome, Gameboard
from .geometry import (
    Coordinate,
    CoordinateLike,
    as_coordinate,
    in_bounds,
    orthogonal_neighbours,
)

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.player")
meter = get_meter("seabattle.engine.player")

TARGET_COUNTER = meter.create_counter(
    "seabattle_computer_targets",
    unit="1",
    description="Coordinates chosen by computer players, by selection source",
)


class _LenientEnum(Enum):
    @classmethod
    def _missing_(cls, value: object) -> "_LenientEnum | None":
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class PlayerKind(_LenientEnum):
    HUMAN = "human"
    COMPUTER = "computer"


class Difficulty(_LenientEnum):
    """Computer skill: easy shoots at random, medium tracks hits, hard adds parity search."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def tracks_hits(self) -> bool:
        return self is not Difficulty.EASY

    @property
    def uses_parity(self) -> bool:
        return self is Difficulty.HARD


class AttackMode(Enum):
    RANDOM = "random"
    TRACKING = "tracking"


@dataclass
class TargetingState:
    """Memory the computer carries between turns against one board.

    ``hits`` are the confirmed hits on the ship being tracked, in the order
    they landed; ``candidates`` is a stack, the last entry is tried first.
    """

    mode: AttackMode = AttackMode.RANDOM
    hits: list[Coordinate] = field(default_factory=list)
    candidates: list[Coordinate] = field(default_factory=list)

    def clear(self) -> None:
        self.mode = AttackMode.RANDOM
        self.hits.clear()
        self.candidates.clear()


class Player:
    """A human or computer participant owning exactly one gameboard."""

    def __init__(
        self,
        kind: PlayerKind | str,
        board_size: int = 10,
        difficulty: Difficulty | str = Difficulty.MEDIUM,
        rng: random.Random | None = None,
        name: str | None = None,
    ) -> None:
        self.kind = PlayerKind(kind)
        self.difficulty = Difficulty(difficulty)
        self.name = name or self.kind.value
        self.gameboard = Gameboard(board_size, owner=self.name)
        self.targeting = TargetingState()
        self._rng = rng or random.Random()

    @property
    def is_computer(self) -> bool:
        return self.kind is PlayerKind.COMPUTER

    def attack(self, enemy_board: Gameboard, coords: CoordinateLike) -> AttackOutcome:
        """Fire at an explicit coordinate on the enemy board."""
        return enemy_board.receive_attack(as_coordinate(coords))

    def computer_attack(self, enemy_board: Gameboard) -> AttackOutcome:
        """Pick a target, fire at it and update the targeting state."""
        with tracer.start_as_current_span("player.computer_attack") as span:
            span.set_attribute("player", self.name)
            span.set_attribute("difficulty", self.difficulty.value)
            coord = self.choose_target(enemy_board)
            outcome = enemy_board.receive_attack(coord)
            self.record_outcome(enemy_board, coord, outcome)
            span.set_attribute("attack.outcome", outcome.label)
            span.set_attribute("targeting.mode", self.targeting.mode.value)
            return outcome

    def choose_target(self, enemy_board: Gameboard) -> Coordinate:
        """Return an unattacked coordinate, consuming a tracking candidate if any."""
        state = self.targeting
        if state.mode is AttackMode.TRACKING:
            while state.candidates:
                candidate = state.candidates.pop()
                if not enemy_board.is_attacked(candidate):
                    TARGET_COUNTER.add(1, attributes={"source": "tracking"})
                    return candidate
            self._enter_random(reason="candidates_exhausted")
        return self._random_target(enemy_board)

    def _random_target(self, enemy_board: Gameboard) -> Coordinate:
        size = enemy_board.size
        if len(enemy_board.attacked_coordinates) >= size * size:
            logger.error("no_targets_remaining", extra={"player": self.name})
            raise RuntimeError("No unattacked coordinates remain.")

        if self.difficulty.uses_parity:
            parity_cells = [
                coord
                for coord in enemy_board.unattacked_coordinates()
                if (coord.x + coord.y) % 2 == 0
            ]
            if parity_cells:
                TARGET_COUNTER.add(1, attributes={"source": "parity"})
                return self._rng.choice(parity_cells)

        while True:
            coord = Coordinate(self._rng.randrange(size), self._rng.randrange(size))
            if not enemy_board.is_attacked(coord):
                TARGET_COUNTER.add(1, attributes={"source": "random"})
                return coord

    def record_outcome(
        self, enemy_board: Gameboard, coords: CoordinateLike, outcome: AttackOutcome
    ) -> None:
        """Advance the targeting state machine after an attack at ``coords``."""
        if not outcome.recorded or not self.difficulty.tracks_hits:
            return
        coord = as_coordinate(coords)
        state = self.targeting

        if outcome.sunk:
            self._enter_random(reason="target_sunk")
        elif outcome.hit:
            if state.mode is AttackMode.RANDOM:
                state.mode = AttackMode.TRACKING
                state.hits = [coord]
                state.candidates = [
                    neighbour
                    for neighbour in orthogonal_neighbours(coord, enemy_board.size)
                    if not enemy_board.is_attacked(neighbour)
                ]
                logger.info(
                    "targeting_mode_changed",
                    extra={
                        "player": self.name,
                        "mode": state.mode.value,
                        "reason": "hit",
                        "candidates": len(state.candidates),
                    },
                )
            else:
                state.hits.append(coord)
                if len(state.hits) >= 2:
                    state.candidates = self._inline_candidates(enemy_board)
        elif state.mode is AttackMode.TRACKING and not state.candidates:
            self._enter_random(reason="candidates_exhausted")

    def _inline_candidates(self, enemy_board: Gameboard) -> list[Coordinate]:
        """Cells extending the tracked hits along the axis the first two hits share."""
        hits = self.targeting.hits
        horizontal = hits[0].y == hits[1].y
        steps = ((-1, 0), (1, 0)) if horizontal else ((0, -1), (0, 1))
        candidates: list[Coordinate] = []
        for hit in hits:
            for dx, dy in steps:
                move = hit.shifted(dx, dy)
                if (
                    in_bounds(move, enemy_board.size)
                    and not enemy_board.is_attacked(move)
                    and move not in candidates
                ):
                    candidates.append(move)
        return candidates

    def _enter_random(self, reason: str) -> None:
        previous = self.targeting.mode
        self.targeting.clear()
        if previous is not AttackMode.RANDOM:
            logger.info(
                "targeting_mode_changed",
                extra={"player": self.name, "mode": AttackMode.RANDOM.value, "reason": reason},
            )

    def reset(self) -> None:
        """Clear the player's own board and any targeting memory."""
        self.gameboard.reset()
        self.targeting.clear()
