"""Batch self-play of the computer targeting against random fleets."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from seabattle.engine.board import DEFAULT_PLACEMENT_ATTEMPTS, Gameboard
from seabattle.engine.player import Difficulty, Player, PlayerKind
from seabattle.engine.ship import fleet_for_board_size
from seabattle.telemetry import get_tracer, observe, record_metric

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationReport:
    """Shots needed to sink a whole fleet, one entry per simulated game."""

    difficulty: Difficulty
    board_size: int
    shots: tuple[int, ...]

    @property
    def games(self) -> int:
        return len(self.shots)

    def _array(self) -> npt.NDArray[np.int64]:
        return np.asarray(self.shots, dtype=np.int64)

    @property
    def mean(self) -> float:
        return float(np.mean(self._array())) if self.shots else 0.0

    @property
    def median(self) -> float:
        return float(np.median(self._array())) if self.shots else 0.0

    @property
    def std(self) -> float:
        return float(np.std(self._array())) if self.shots else 0.0

    @property
    def best(self) -> int:
        return int(np.min(self._array())) if self.shots else 0

    @property
    def worst(self) -> int:
        return int(np.max(self._array())) if self.shots else 0

    def summary(self) -> dict[str, float]:
        return {
            "games": self.games,
            "mean": self.mean,
            "median": self.median,
            "std": self.std,
            "best": self.best,
            "worst": self.worst,
        }


def play_out(player: Player, board: Gameboard) -> int:
    """Let ``player`` attack ``board`` until every ship is sunk; return the shot count."""
    shots = 0
    while not board.all_ships_sunk():
        outcome = player.computer_attack(board)
        if not outcome.recorded:
            raise RuntimeError(
                f"Computer repeated or left the board at ({outcome.coord.x}, {outcome.coord.y})."
            )
        shots += 1
    return shots


def simulate(
    difficulty: Difficulty | str = Difficulty.MEDIUM,
    games: int = 100,
    board_size: int = 10,
    seed: int | None = None,
    placement_attempts: int = DEFAULT_PLACEMENT_ATTEMPTS,
) -> SimulationReport:
    """Run ``games`` independent games and collect shots-to-win statistics."""
    if games <= 0:
        raise ValueError("games must be positive.")
    level = Difficulty(difficulty)
    rng = random.Random(seed)
    fleet = fleet_for_board_size(board_size)
    tracer = get_tracer("seabattle.simulation")

    shots: list[int] = []
    with tracer.start_as_current_span("simulation.run") as span:
        span.set_attribute("difficulty", level.value)
        span.set_attribute("board_size", board_size)
        span.set_attribute("games", games)
        for game_index in range(games):
            board = Gameboard(board_size, owner="target")
            status = board.random_placement(fleet, rng, placement_attempts)
            if not status.ok:
                raise RuntimeError(f"Could not fit the fleet on a {board_size}x{board_size} board.")
            player = Player(PlayerKind.COMPUTER, board_size, level, rng=rng, name="simulated")
            count = play_out(player, board)
            shots.append(count)
            observe("seabattle_simulated_shots", count, {"difficulty": level.value})
            logger.debug("simulated_game", extra={"game": game_index, "shots": count})
        record_metric("seabattle_simulated_games_total", games, {"difficulty": level.value})

    report = SimulationReport(difficulty=level, board_size=board_size, shots=tuple(shots))
    logger.info("simulation_complete", extra={"difficulty": level.value, **report.summary()})
    return report
