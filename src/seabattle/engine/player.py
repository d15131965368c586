"""Human and computer players."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum

from seabattle.ai.targeting import TargetingAI
from seabattle.telemetry import get_meter, get_tracer

from .board import DEFAULT_BOARD_SIZE, Board
from .errors import WrongPlayerKindError

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.player")
meter = get_meter("seabattle.engine.player")

COMPUTER_ATTACK_COUNTER = meter.create_counter(
    "seabattle_engine_computer_attacks",
    unit="1",
    description="Attacks chosen by the computer player",
)


class PlayerKind(Enum):
    """Who is making the decisions for a player."""

    HUMAN = "human"
    COMPUTER = "computer"


@dataclass(frozen=True)
class AttackReport:
    """Outcome of a computer attack.

    All three fields are ``None`` when the AI has no coordinate left to try.
    """

    row: int | None
    col: int | None
    hit: bool | None

    @property
    def exhausted(self) -> bool:
        return self.row is None

    @classmethod
    def exhaustion(cls) -> AttackReport:
        return cls(row=None, col=None, hit=None)


class Player:
    """Owns one board and attacks the opponent's board on its turn."""

    def __init__(
        self,
        kind: PlayerKind = PlayerKind.HUMAN,
        board_size: int = DEFAULT_BOARD_SIZE,
        rng: random.Random | None = None,
    ) -> None:
        self.kind = kind
        self.board = Board(size=board_size, owner=kind.value)
        self._rng = rng or random.Random()
        self._targeting: TargetingAI | None = None

    def __repr__(self) -> str:
        return f"Player(kind={self.kind.value}, ships={len(self.board.ships)})"

    @property
    def is_computer(self) -> bool:
        return self.kind is PlayerKind.COMPUTER

    @property
    def targeting(self) -> TargetingAI:
        """The computer's search state, created on first access."""
        if self._targeting is None:
            self._targeting = TargetingAI(self._rng)
        return self._targeting

    def attack(self, row: int, col: int, enemy_board: Board) -> bool:
        """Fire at ``(row, col)`` on ``enemy_board``; returns ``True`` on a hit."""
        if self.is_computer:
            logger.error("attack_rejected_wrong_kind", extra={"kind": self.kind.value})
            raise WrongPlayerKindError("Computer players attack through computer_attack().")
        return enemy_board.receive_attack(row, col)

    def computer_attack(self, enemy_board: Board) -> AttackReport:
        """Let the targeting AI choose a coordinate and fire at it."""
        if not self.is_computer:
            logger.error("computer_attack_rejected_wrong_kind", extra={"kind": self.kind.value})
            raise WrongPlayerKindError("Only computer players can use computer_attack().")

        with tracer.start_as_current_span("player.computer_attack") as span:
            targeting = self.targeting
            span.set_attribute("ai.mode", targeting.mode.value)
            coord = targeting.select_target(enemy_board.size)
            if coord is None:
                span.set_attribute("ai.exhausted", True)
                COMPUTER_ATTACK_COUNTER.add(1, attributes={"outcome": "exhausted"})
                return AttackReport.exhaustion()

            hit = enemy_board.receive_attack(coord.row, coord.col)
            targeting.record_result(coord, hit)
            span.set_attribute("attack.row", coord.row)
            span.set_attribute("attack.col", coord.col)
            span.set_attribute("attack.hit", hit)
            COMPUTER_ATTACK_COUNTER.add(1, attributes={"outcome": "hit" if hit else "miss"})
            return AttackReport(row=coord.row, col=coord.col, hit=hit)
