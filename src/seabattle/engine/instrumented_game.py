"""Game session with telemetry hooks."""

from __future__ import annotations

import time
from typing import Any

from seabattle.engine.errors import SeaBattleError
from seabattle.engine.game import GamePhase, GameSession, TurnResult
from seabattle.engine.player import PlayerKind
from seabattle.telemetry import get_logger, get_tracer, record_game_metric


class InstrumentedGameSession(GameSession):
    """Wraps GameSession with tracing, metrics, and logging."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._logger = get_logger("seabattle.engine")
        self._tracer = get_tracer("seabattle.engine")
        self._game_span_cm = None
        self._game_span = None
        self._game_start_time: float | None = None
        self._turns = 0

    def setup(self, human_layout: str = "random") -> None:
        self._start_game_span()
        with self._tracer.start_as_current_span("seabattle.engine.setup") as span:
            self._logger.info("Setup started (human_layout=%s)", human_layout)
            super().setup(human_layout)
            human_ships = len(self.human.board.ships)
            computer_ships = len(self.computer.board.ships)
            span.set_attribute("human_ships", human_ships)
            span.set_attribute("computer_ships", computer_ships)
            record_game_metric(
                "seabattle_game_setup_total",
                1,
                {"human_layout": human_layout, "computer_ships": computer_ships},
            )
            self._logger.info("Setup finished")

    def human_turn(self, row: int, col: int) -> TurnResult:
        with self._tracer.start_as_current_span("seabattle.engine.human_turn") as span:
            span.set_attribute("coord.row", row)
            span.set_attribute("coord.col", col)
            try:
                result = super().human_turn(row, col)
            except (SeaBattleError, RuntimeError) as exc:
                record_game_metric(
                    "seabattle_game_invalid_turns_total",
                    1,
                    {"player": PlayerKind.HUMAN.value, "reason": type(exc).__name__},
                )
                span.record_exception(exc)
                span.set_attribute("error", True)
                self._logger.error("Invalid human turn at (%d,%d): %s", row, col, exc)
                raise
            self._after_turn(span, result)
            return result

    def computer_turn(self) -> TurnResult:
        with self._tracer.start_as_current_span("seabattle.engine.computer_turn") as span:
            mode = self.computer.targeting.mode
            start = time.perf_counter()
            result = super().computer_turn()
            record_game_metric(
                "seabattle_ai_decision_latency_ms",
                (time.perf_counter() - start) * 1000,
                {"mode": mode.value},
            )
            self._after_turn(span, result)
            return result

    def _after_turn(self, span: Any, result: TurnResult) -> None:
        self._turns += 1
        player = result.player.value
        span.set_attribute("player", player)
        span.set_attribute("exhausted", result.exhausted)
        if not result.exhausted:
            span.set_attribute("hit", bool(result.hit))
            span.set_attribute("sunk", result.sunk)
            record_game_metric("seabattle_attacks_total", 1, {"player": player})
            record_game_metric(
                "seabattle_attacks_by_result_total",
                1,
                {"player": player, "result": "hit" if result.hit else "miss"},
            )
            if result.sunk:
                record_game_metric("seabattle_ships_sunk_total", 1, {"player": player})
            self._logger.info(
                "turn player=%s coord=(%d,%d) hit=%s sunk=%s",
                player,
                result.row,
                result.col,
                result.hit,
                result.sunk,
            )

        if self.phase is GamePhase.FINISHED:
            if self.winner is not None:
                span.set_attribute("winner", self.winner.value)
            self._finish_game()

    def _start_game_span(self) -> None:
        self._close_game_span()
        self._game_start_time = time.perf_counter()
        self._turns = 0
        self._game_span_cm = self._tracer.start_as_current_span("seabattle.engine.game")
        self._game_span = self._game_span_cm.__enter__()

    def _finish_game(self) -> None:
        duration = (time.perf_counter() - self._game_start_time) if self._game_start_time else 0.0
        winner = self.winner.value if self.winner else "draw"

        record_game_metric("seabattle_game_completed_total", 1, {"winner": winner})
        record_game_metric("seabattle_game_duration_seconds", duration, {"winner": winner})

        with self._tracer.start_as_current_span("seabattle.engine.game_complete") as span:
            span.set_attribute("winner", winner)
            span.set_attribute("turns", self._turns)
            span.set_attribute("duration_ms", duration * 1000)

        if self._game_span is not None:
            self._game_span.set_attribute("winner", winner)
            self._game_span.set_attribute("turns", self._turns)

        self._logger.info(
            "Game finished. Winner=%s turns=%d duration_s=%.3f", winner, self._turns, duration
        )
        self._close_game_span()

    def _close_game_span(self) -> None:
        if self._game_span_cm is not None:
            self._game_span_cm.__exit__(None, None, None)
            self._game_span_cm = None
            self._game_span = None
