"""Game session: placement phase, turn order and win detection."""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from seabattle.telemetry import get_meter, get_tracer

from .board import AttackOutcome, Gameboard, PlacementStatus
from .geometry import CoordinateLike, Orientation
from .player import Player, PlayerKind
from .ship import ShipClass, fleet_for_board_size

if TYPE_CHECKING:
    from seabattle.config import GameConfig
    from seabattle.scores import JsonScoreStore, ScoreRecord

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.game")
meter = get_meter("seabattle.engine.game")

TURN_COUNTER = meter.create_counter(
    "seabattle_engine_turns",
    unit="1",
    description="Turns played in a GameSession",
)


class GamePhase(Enum):
    """High-level lifecycle of a game."""

    PLACEMENT = "placement"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class GameStats:
    """Shot statistics for the human player."""

    turns: int = 0
    hits: int = 0
    misses: int = 0

    @property
    def accuracy(self) -> float:
        shots = self.hits + self.misses
        return self.hits / shots * 100 if shots else 0.0

    def recorded(self, outcome: AttackOutcome) -> GameStats:
        """Return the stats after one more counted shot."""
        if outcome.hit:
            return replace(self, turns=self.turns + 1, hits=self.hits + 1)
        return replace(self, turns=self.turns + 1, misses=self.misses + 1)


@dataclass(frozen=True)
class TurnResult:
    """What happened during one call to :meth:`GameSession.play_turn`."""

    attacker: PlayerKind
    outcome: AttackOutcome
    stats: GameStats
    turn_consumed: bool = True
    game_over: bool = False
    winner: PlayerKind | None = None


class GameSession:
    """One human-versus-computer game; construct a new session per game."""

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: random.Random | None = None,
        score_store: JsonScoreStore | None = None,
    ) -> None:
        if config is None:
            from seabattle.config import GameConfig

            config = GameConfig()
        self.config = config
        self.score_store = score_store
        self._rng = rng or random.Random()
        self.scores: ScoreRecord | None = score_store.load() if score_store else None
        self._new_game()

    def _new_game(self) -> None:
        size = self.config.board_size
        self.human = Player(PlayerKind.HUMAN, size, rng=self._rng, name="human")
        self.computer = Player(
            PlayerKind.COMPUTER,
            size,
            difficulty=self.config.difficulty,
            rng=self._rng,
            name="computer",
        )
        self.phase = GamePhase.PLACEMENT
        self.current_player: Player = self.human
        self.winner: Player | None = None
        self.stats = GameStats()

    @property
    def human_board(self) -> Gameboard:
        return self.human.gameboard

    @property
    def computer_board(self) -> Gameboard:
        return self.computer.gameboard

    def fleet(self) -> tuple[ShipClass, ...]:
        return fleet_for_board_size(self.config.board_size)

    def remaining_ships(self) -> list[ShipClass]:
        """Fleet entries the human has not placed yet, in fleet order."""
        placed = Counter((ship.ship_type, ship.length) for ship in self.human_board.ships)
        remaining: list[ShipClass] = []
        for ship_class in self.fleet():
            entry = (ship_class.key, ship_class.length)
            if placed[entry] > 0:
                placed[entry] -= 1
            else:
                remaining.append(ship_class)
        return remaining

    # Placement phase -----------------------------------------------------

    def _require_phase(self, phase: GamePhase, action: str) -> None:
        if self.phase is not phase:
            logger.error(
                "action_rejected_wrong_phase",
                extra={"action": action, "phase": self.phase.value, "required": phase.value},
            )
            raise RuntimeError(f"Cannot {action} during the {self.phase.value} phase.")

    def can_place_ship(
        self, origin: CoordinateLike, length: int, orientation: Orientation | str
    ) -> bool:
        return self.human_board.can_place_ship(origin, length, orientation)

    def place_ship(
        self,
        origin: CoordinateLike,
        length: int,
        orientation: Orientation | str,
        ship_type: str = "",
    ) -> PlacementStatus:
        """Place one still-missing fleet ship on the human board.

        ``ship_type`` and ``length`` must name an entry of :meth:`remaining_ships`;
        anything else is rejected with ``PlacementStatus.NOT_IN_FLEET``.
        """
        self._require_phase(GamePhase.PLACEMENT, "place ships")
        key = ship_type.strip().lower()
        if not any(
            ship_class.key == key and ship_class.length == length
            for ship_class in self.remaining_ships()
        ):
            logger.warning(
                "ship_placement_not_in_fleet",
                extra={"ship_type": ship_type, "length": length},
            )
            return PlacementStatus.NOT_IN_FLEET
        return self.human_board.place_ship(origin, length, orientation, key)

    def place_ships_randomly(self) -> PlacementStatus:
        """Replace the human's layout with a random one."""
        self._require_phase(GamePhase.PLACEMENT, "place ships")
        return self.human_board.random_placement(
            self.fleet(), self._rng, self.config.placement_attempts
        )

    def start_game(self) -> None:
        """Lay out the computer fleet and hand the first move to the human."""
        with tracer.start_as_current_span("game.start") as span:
            self._require_phase(GamePhase.PLACEMENT, "start the game")
            missing = self.remaining_ships()
            if missing:
                logger.error(
                    "start_rejected_fleet_incomplete",
                    extra={"missing": [ship_class.key for ship_class in missing]},
                )
                raise RuntimeError("Place the whole fleet before starting the game.")

            status = self.computer_board.random_placement(
                self.fleet(), self._rng, self.config.placement_attempts
            )
            span.set_attribute("computer.placement", status.value)
            if not status.ok:
                raise RuntimeError(
                    f"Could not fit the fleet on a {self.config.board_size}x"
                    f"{self.config.board_size} board."
                )

            self.phase = GamePhase.IN_PROGRESS
            self.current_player = self.human
            self.winner = None
            logger.info(
                "game_started",
                extra={
                    "board_size": self.config.board_size,
                    "difficulty": self.computer.difficulty.value,
                    "ships": len(self.fleet()),
                },
            )

    # Play phase ----------------------------------------------------------

    def play_turn(self, coords: CoordinateLike | None = None) -> TurnResult:
        """Play the current player's turn.

        The human must supply ``coords``; the computer picks its own target.
        Off-board and repeated human shots leave the turn with the human.
        """
        with tracer.start_as_current_span("game.play_turn") as span:
            self._require_phase(GamePhase.IN_PROGRESS, "play a turn")
            attacker = self.current_player
            span.set_attribute("player", attacker.kind.value)

            if attacker is self.human:
                if coords is None:
                    logger.error("turn_rejected_missing_coordinates", extra={"player": "human"})
                    raise ValueError("Human player needs coordinates to attack.")
                target_board = self.computer_board
                outcome = self.human.attack(target_board, coords)
                if not outcome.recorded:
                    span.set_attribute("turn.consumed", False)
                    return TurnResult(
                        attacker=attacker.kind,
                        outcome=outcome,
                        stats=self.stats,
                        turn_consumed=False,
                    )
                self.stats = self.stats.recorded(outcome)
            else:
                target_board = self.human_board
                outcome = self.computer.computer_attack(target_board)

            span.set_attribute("attack.outcome", outcome.label)
            TURN_COUNTER.add(1, attributes={"player": attacker.kind.value, "result": outcome.label})

            if target_board.all_ships_sunk():
                self._finish(attacker)
                span.set_attribute("game.winner", attacker.kind.value)
                return TurnResult(
                    attacker=attacker.kind,
                    outcome=outcome,
                    stats=self.stats,
                    game_over=True,
                    winner=attacker.kind,
                )

            self.current_player = self.computer if attacker is self.human else self.human
            return TurnResult(attacker=attacker.kind, outcome=outcome, stats=self.stats)

    def _finish(self, winner: Player) -> None:
        self.phase = GamePhase.FINISHED
        self.winner = winner
        if self.score_store is not None:
            if winner is self.human:
                self.scores = self.score_store.record_win()
            else:
                self.scores = self.score_store.record_loss()
        logger.info(
            "game_finished",
            extra={
                "winner": winner.kind.value,
                "turns": self.stats.turns,
                "accuracy": round(self.stats.accuracy, 1),
            },
        )

    @property
    def is_game_over(self) -> bool:
        return self.phase is GamePhase.FINISHED

    def reset(self) -> None:
        """Discard both boards and start a new placement phase with the same settings."""
        self._new_game()
        logger.info("game_reset", extra={"board_size": self.config.board_size})
