"""Game session with whole-game telemetry."""

from __future__ import annotations

import time
from typing import Any

from seabattle.engine.game import GameSession, TurnResult
from seabattle.engine.geometry import CoordinateLike
from seabattle.telemetry import get_logger, get_tracer, observe, record_metric


class InstrumentedGameSession(GameSession):
    """Wraps GameSession with a span per game plus turn and result metrics."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._logger = get_logger("seabattle.engine")
        self._tracer = get_tracer("seabattle.engine")
        self._game_span_cm: Any = None
        self._game_span: Any = None
        self._game_start_time: float | None = None
        self._game_id = 0
        super().__init__(*args, **kwargs)

    def start_game(self) -> None:
        self._open_game_span()
        with self._tracer.start_as_current_span("seabattle.engine.start_game") as span:
            try:
                super().start_game()
            except RuntimeError as exc:
                span.record_exception(exc)
                record_metric("seabattle_game_start_failures_total", 1)
                self._close_game_span()
                raise
            span.set_attribute("game.id", self._game_id)
            span.set_attribute("difficulty", self.computer.difficulty.value)
            span.set_attribute("board_size", self.config.board_size)
            record_metric(
                "seabattle_games_started_total",
                1,
                {"difficulty": self.computer.difficulty.value},
            )
            self._logger.info(
                "Game %d started on a %dx%d board (difficulty=%s)",
                self._game_id,
                self.config.board_size,
                self.config.board_size,
                self.computer.difficulty.value,
            )

    def play_turn(self, coords: CoordinateLike | None = None) -> TurnResult:
        with self._tracer.start_as_current_span("seabattle.engine.play_turn") as span:
            span.set_attribute("game.id", self._game_id)
            try:
                result = super().play_turn(coords)
            except (RuntimeError, ValueError) as exc:
                span.record_exception(exc)
                span.set_attribute("error", True)
                record_metric("seabattle_invalid_turns_total", 1, {"reason": type(exc).__name__})
                raise

            attacker = result.attacker.value
            span.set_attribute("attacker", attacker)
            span.set_attribute("outcome", result.outcome.label)
            span.set_attribute("turn_consumed", result.turn_consumed)
            record_metric(
                "seabattle_shots_by_result_total",
                1,
                {"player": attacker, "result": result.outcome.label},
            )

            if result.game_over:
                self._finish_game(result)
            return result

    def reset(self) -> None:
        self._close_game_span()
        super().reset()

    def _open_game_span(self) -> None:
        self._close_game_span()
        self._game_id += 1
        self._game_start_time = time.perf_counter()
        self._game_span_cm = self._tracer.start_as_current_span("seabattle.engine.game")
        self._game_span = self._game_span_cm.__enter__()
        self._game_span.set_attribute("game.id", self._game_id)

    def _finish_game(self, result: TurnResult) -> None:
        duration = (
            time.perf_counter() - self._game_start_time if self._game_start_time else 0.0
        )
        winner = result.winner.value if result.winner else "unknown"
        shots = len(self.computer_board.attacked_coordinates) + len(
            self.human_board.attacked_coordinates
        )

        record_metric("seabattle_games_completed_total", 1, {"winner": winner})
        observe("seabattle_game_duration_seconds", duration, {"winner": winner})
        observe("seabattle_game_shots", shots, {"winner": winner})

        with self._tracer.start_as_current_span("seabattle.engine.game_complete") as span:
            span.set_attribute("game.id", self._game_id)
            span.set_attribute("winner", winner)
            span.set_attribute("shots", shots)
            span.set_attribute("accuracy", result.stats.accuracy)

        if self._game_span is not None:
            self._game_span.set_attribute("winner", winner)
            self._game_span.set_attribute("shots", shots)
            self._game_span.set_attribute("duration_ms", duration * 1000)

        self._logger.info(
            "Game %d finished. Winner=%s shots=%d duration_s=%.3f",
            self._game_id,
            winner,
            shots,
            duration,
        )
        self._close_game_span()

    def _close_game_span(self) -> None:
        if self._game_span_cm is not None:
            self._game_span_cm.__exit__(None, None, None)
            self._game_span_cm = None
            self._game_span = None
