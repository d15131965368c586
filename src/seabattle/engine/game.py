"""Human vs. computer game session."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum

from seabattle.config import GameConfig
from seabattle.telemetry import get_meter, get_tracer

from .board import DEFAULT_BOARD_SIZE, Board, BoardSnapshot
from .placement import STANDARD_FLEET, place_default_layout, place_fleet_randomly
from .player import Player, PlayerKind
from .ship import Coordinate, ShipType

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.game")
meter = get_meter("seabattle.engine.game")

TURN_COUNTER = meter.create_counter(
    "seabattle_engine_turns",
    unit="1",
    description="Number of turns played in GameSession",
)

HUMAN_LAYOUTS = ("random", "default", "manual")


class GamePhase(Enum):
    """High-level lifecycle of a match."""

    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


def opponent_of(kind: PlayerKind) -> PlayerKind:
    return PlayerKind.COMPUTER if kind is PlayerKind.HUMAN else PlayerKind.HUMAN


@dataclass(frozen=True)
class TurnResult:
    """What happened on one turn, for the presentation layer."""

    player: PlayerKind
    row: int | None
    col: int | None
    hit: bool | None
    sunk: bool = False
    ship_name: str | None = None
    game_over: bool = False
    winner: PlayerKind | None = None

    @property
    def exhausted(self) -> bool:
        return self.row is None


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of the current match."""

    phase: GamePhase
    current_turn: PlayerKind
    winner: PlayerKind | None
    boards: dict[PlayerKind, BoardSnapshot]


class GameSession:
    """Owns both players and alternates turns between them."""

    def __init__(self, config: GameConfig | None = None, rng_seed: int | None = None) -> None:
        self.config = config or GameConfig()
        seed = rng_seed if rng_seed is not None else self.config.rng_seed
        self._rng = random.Random(seed)
        self.human = Player(PlayerKind.HUMAN, self.config.board_size)
        self.computer = Player(
            PlayerKind.COMPUTER,
            self.config.board_size,
            rng=random.Random(self._rng.getrandbits(32)),
        )
        self.phase: GamePhase = GamePhase.SETUP
        self.current_turn: PlayerKind = PlayerKind.HUMAN
        self.winner: PlayerKind | None = None

    def player(self, kind: PlayerKind) -> Player:
        return self.human if kind is PlayerKind.HUMAN else self.computer

    @property
    def fleet(self) -> tuple[ShipType, ...] | tuple[int, ...]:
        if self.config.uses_standard_fleet:
            return STANDARD_FLEET
        return self.config.fleet

    @property
    def default_layout_available(self) -> bool:
        """The fixed layout only fits the standard fleet on a 10x10 board."""
        return self.config.uses_standard_fleet and self.config.board_size == DEFAULT_BOARD_SIZE

    def setup(self, human_layout: str = "random") -> None:
        """Place the computer fleet at random and the human fleet as requested.

        ``human_layout`` is ``"random"``, ``"default"`` (the fixed starting
        layout) or ``"manual"``, in which case the caller fills the human
        board and calls ``start()`` itself.

        Both fleets are placed on fresh boards that replace the players'
        boards only once every placement succeeded.
        """
        if human_layout not in HUMAN_LAYOUTS:
            raise ValueError(f"Unknown human layout {human_layout!r}.")
        if self.phase is not GamePhase.SETUP:
            raise RuntimeError("Fleets can only be placed during setup.")
        if human_layout == "default" and not self.default_layout_available:
            logger.error(
                "game_setup_rejected_default_layout",
                extra={"board_size": self.config.board_size, "fleet": list(self.config.fleet)},
            )
            raise ValueError(
                "The default layout needs the standard fleet on a "
                f"{DEFAULT_BOARD_SIZE}x{DEFAULT_BOARD_SIZE} board."
            )
        with tracer.start_as_current_span("game.setup") as span:
            span.set_attribute("human_layout", human_layout)
            computer_board = Board(size=self.config.board_size, owner=PlayerKind.COMPUTER.value)
            human_board = Board(size=self.config.board_size, owner=PlayerKind.HUMAN.value)
            place_fleet_randomly(computer_board, self._rng, self.fleet)
            if human_layout == "random":
                place_fleet_randomly(human_board, self._rng, self.fleet)
            elif human_layout == "default":
                place_default_layout(human_board)
            self.computer.board = computer_board
            self.human.board = human_board
            logger.info(
                "game_setup_complete",
                extra={
                    "human_layout": human_layout,
                    "human_ships": len(self.human.board.ships),
                    "computer_ships": len(self.computer.board.ships),
                },
            )
        if human_layout != "manual":
            self.start()

    def start(self) -> None:
        """Begin play with the human to move."""
        if self.phase is not GamePhase.SETUP:
            raise RuntimeError("Game has already started.")
        if not self.human.board.ships or not self.computer.board.ships:
            logger.error(
                "game_start_rejected_empty_fleet",
                extra={
                    "human_ships": len(self.human.board.ships),
                    "computer_ships": len(self.computer.board.ships),
                },
            )
            raise RuntimeError("Both players need ships before the game can start.")
        self.phase = GamePhase.IN_PROGRESS
        self.current_turn = PlayerKind.HUMAN
        self.winner = None
        logger.info("game_started", extra={"current_turn": self.current_turn.value})

    def human_turn(self, row: int, col: int) -> TurnResult:
        """Resolve the human's attack at ``(row, col)`` on the computer board."""
        with tracer.start_as_current_span("game.human_turn") as span:
            span.set_attribute("row", row)
            span.set_attribute("col", col)
            self._ensure_turn(PlayerKind.HUMAN)
            hit = self.human.attack(row, col, self.computer.board)
            return self._complete_turn(PlayerKind.HUMAN, row, col, hit)

    def computer_turn(self) -> TurnResult:
        """Let the computer choose and resolve its attack on the human board."""
        with tracer.start_as_current_span("game.computer_turn") as span:
            self._ensure_turn(PlayerKind.COMPUTER)
            report = self.computer.computer_attack(self.human.board)
            if report.exhausted:
                self.phase = GamePhase.FINISHED
                self.winner = None
                span.set_attribute("game.exhausted", True)
                logger.info("game_finished_exhausted", extra={"player": PlayerKind.COMPUTER.value})
                return TurnResult(
                    player=PlayerKind.COMPUTER, row=None, col=None, hit=None, game_over=True
                )
            span.set_attribute("row", report.row)
            span.set_attribute("col", report.col)
            return self._complete_turn(PlayerKind.COMPUTER, report.row, report.col, report.hit)

    def get_state(self) -> SessionState:
        """Return an immutable view of the current match."""
        return SessionState(
            phase=self.phase,
            current_turn=self.current_turn,
            winner=self.winner,
            boards={kind: self.player(kind).board.get_snapshot() for kind in PlayerKind},
        )

    def valid_targets(self, kind: PlayerKind) -> list[Coordinate]:
        """Return all coordinates ``kind`` can still attack."""
        if self.phase is not GamePhase.IN_PROGRESS:
            return []
        target_board = self.player(opponent_of(kind)).board
        return [
            Coordinate(row, col)
            for row in range(target_board.size)
            for col in range(target_board.size)
            if not target_board.is_coordinate_attacked(row, col)
        ]

    def _ensure_turn(self, kind: PlayerKind) -> None:
        if self.phase is not GamePhase.IN_PROGRESS:
            logger.error(
                "turn_rejected_game_not_in_progress",
                extra={"player": kind.value, "phase": self.phase.value},
            )
            raise RuntimeError("Game is not in progress.")
        if kind is not self.current_turn:
            logger.error(
                "turn_rejected_wrong_player",
                extra={"player": kind.value, "current": self.current_turn.value},
            )
            raise RuntimeError("It is not this player's turn.")

    def _complete_turn(self, kind: PlayerKind, row: int, col: int, hit: bool) -> TurnResult:
        target_board = self.player(opponent_of(kind)).board
        ship = target_board.ship_at(row, col) if hit else None
        sunk = bool(ship and ship.is_sunk())

        if target_board.all_ships_sunk():
            self.winner = kind
            self.phase = GamePhase.FINISHED
            logger.info("game_finished", extra={"winner": kind.value})
        else:
            self.current_turn = opponent_of(kind)

        TURN_COUNTER.add(1, attributes={"player": kind.value, "hit": hit, "sunk": sunk})
        return TurnResult(
            player=kind,
            row=row,
            col=col,
            hit=hit,
            sunk=sunk,
            ship_name=ship.name if ship else None,
            game_over=self.phase is GamePhase.FINISHED,
            winner=self.winner,
        )
