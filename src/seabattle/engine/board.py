"""Single-player board management for the game engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

import numpy as np
import numpy.typing as npt

from seabattle.telemetry import get_meter, get_tracer

from .errors import AlreadyAttackedError, OccupiedError, OutOfBoundsError
from .ship import Coordinate, Orientation, Ship

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
    description="Attacks received by a board",
)

DEFAULT_BOARD_SIZE = 10


class CellState(Enum):
    """State of a board cell from the perspective of attacks taken."""

    UNKNOWN = "unknown"
    MISS = "miss"
    HIT = "hit"


@dataclass(frozen=True)
class Empty:
    """A cell with no ship on it."""


@dataclass(frozen=True)
class Occupied:
    """A cell covered by part of ``ship``."""

    ship: Ship


Cell = Union[Empty, Occupied]
EMPTY = Empty()


@dataclass(frozen=True)
class BoardSnapshot:
    """Read-only copy of a board for renderers and other observers."""

    size: int
    occupied: tuple[tuple[bool, ...], ...]
    attacked: frozenset[Coordinate]
    missed: tuple[Coordinate, ...]

    def has_ship(self, row: int, col: int) -> bool:
        return self.occupied[row][col]

    def is_attacked(self, row: int, col: int) -> bool:
        return Coordinate(row, col) in self.attacked

    def cell_state(self, row: int, col: int) -> CellState:
        if not self.is_attacked(row, col):
            return CellState.UNKNOWN
        return CellState.HIT if self.has_ship(row, col) else CellState.MISS

    def as_array(self) -> npt.NDArray[np.bool_]:
        """Return the ship occupancy as a read-only ``size x size`` array."""
        array = np.array(self.occupied, dtype=np.bool_).reshape(self.size, self.size)
        array.setflags(write=False)
        return array


@dataclass
class Board:
    """A player's square grid together with the fleet placed on it."""

    size: int = DEFAULT_BOARD_SIZE
    owner: str = "unknown"
    ships: list[Ship] = field(default_factory=list, init=False)
    _grid: list[list[Cell]] = field(init=False, repr=False)
    _attacked: set[Coordinate] = field(default_factory=set, init=False, repr=False)
    _missed: list[Coordinate] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"Board size must be positive, got {self.size}.")
        self._grid = [[EMPTY for _ in range(self.size)] for _ in range(self.size)]

    def is_valid_coordinate(self, row: int, col: int) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return 0 <= row < self.size and 0 <= col < self.size

    def is_coordinate_attacked(self, row: int, col: int) -> bool:
        return Coordinate(row, col) in self._attacked

    def would_placement_succeed(
        self, length: int, row: int, col: int, vertical: bool = False
    ) -> bool:
        """Report whether ``place_ship`` would accept this placement, without placing."""
        if length <= 0:
            return False
        try:
            self._check_run(self._run(length, row, col, vertical))
        except (OutOfBoundsError, OccupiedError):
            return False
        return True

    def place_ship(self, ship: Ship, row: int, col: int, vertical: bool = False) -> None:
        """Put ``ship`` on the grid starting at ``(row, col)``.

        The run extends down when ``vertical`` is true and right otherwise.
        Raises ``OutOfBoundsError`` or ``OccupiedError`` and leaves the board
        untouched when any cell of the run is unusable.
        """
        orientation = Orientation.from_vertical(vertical)
        with tracer.start_as_current_span("board.place_ship") as span:
            span.set_attribute("ship.name", ship.name)
            span.set_attribute("ship.length", ship.length)
            span.set_attribute("ship.start.row", row)
            span.set_attribute("ship.start.col", col)
            span.set_attribute("ship.orientation", orientation.value)
            span.set_attribute("board.owner", self.owner)
            details = {
                "owner": self.owner,
                "ship": ship.name,
                "orientation": orientation.value,
                "row": row,
                "col": col,
            }

            run = self._run(ship.length, row, col, vertical)
            try:
                self._check_run(run)
            except (OutOfBoundsError, OccupiedError) as exc:
                PLACEMENT_COUNTER.add(1, attributes={"result": "failed", "owner": self.owner})
                span.set_attribute("placement.result", type(exc).__name__)
                logger.warning("ship_placement_failed", extra={**details, "reason": str(exc)})
                raise

            for coord in run:
                self._grid[coord.row][coord.col] = Occupied(ship)
            self.ships.append(ship)
            span.set_attribute("placement.result", "success")
            PLACEMENT_COUNTER.add(1, attributes={"result": "success", "owner": self.owner})
            logger.info("ship_placed", extra=details)

    def receive_attack(self, row: int, col: int) -> bool:
        """Resolve an attack at ``(row, col)`` and return ``True`` on a hit."""
        with tracer.start_as_current_span("board.receive_attack") as span:
            span.set_attribute("attack.row", row)
            span.set_attribute("attack.col", col)
            span.set_attribute("board.owner", self.owner)
            if not self.is_valid_coordinate(row, col):
                logger.error(
                    "attack_rejected_out_of_bounds",
                    extra={"row": row, "col": col, "owner": self.owner},
                )
                raise OutOfBoundsError(f"Attack at ({row}, {col}) is out of bounds.")
            coord = Coordinate(row, col)
            if coord in self._attacked:
                logger.error(
                    "attack_rejected_already_attacked",
                    extra={"row": row, "col": col, "owner": self.owner},
                )
                raise AlreadyAttackedError(f"Coordinate ({row}, {col}) was already attacked.")

            self._attacked.add(coord)
            cell = self._grid[row][col]
            if isinstance(cell, Occupied):
                cell.ship.hit()
                span.set_attribute("attack.outcome", "hit")
                span.set_attribute("attack.sunk", cell.ship.is_sunk())
                ATTACK_COUNTER.add(1, attributes={"outcome": "hit", "owner": self.owner})
                logger.info(
                    "attack_hit",
                    extra={
                        "row": row,
                        "col": col,
                        "ship": cell.ship.name,
                        "sunk": cell.ship.is_sunk(),
                        "owner": self.owner,
                    },
                )
                return True

            self._missed.append(coord)
            span.set_attribute("attack.outcome", "miss")
            ATTACK_COUNTER.add(1, attributes={"outcome": "miss", "owner": self.owner})
            logger.info("attack_miss", extra={"row": row, "col": col, "owner": self.owner})
            return False

    def all_ships_sunk(self) -> bool:
        """True once a fleet exists and every ship in it is sunk."""
        return bool(self.ships) and all(ship.is_sunk() for ship in self.ships)

    def ships_afloat(self) -> int:
        return sum(1 for ship in self.ships if not ship.is_sunk())

    def cell_at(self, row: int, col: int) -> Cell:
        if not self.is_valid_coordinate(row, col):
            raise OutOfBoundsError(f"Cell ({row}, {col}) is out of bounds.")
        return self._grid[row][col]

    def ship_at(self, row: int, col: int) -> Ship | None:
        """Return the ship covering ``(row, col)``, if any."""
        cell = self.cell_at(row, col)
        return cell.ship if isinstance(cell, Occupied) else None

    def get_cell_state(self, row: int, col: int) -> CellState:
        """Return the state of a cell after attacks have been taken."""
        if Coordinate(row, col) not in self._attacked:
            return CellState.UNKNOWN
        return CellState.HIT if isinstance(self._grid[row][col], Occupied) else CellState.MISS

    def get_missed_attacks(self) -> list[Coordinate]:
        return list(self._missed)

    @property
    def attacked_coordinates(self) -> frozenset[Coordinate]:
        return frozenset(self._attacked)

    @property
    def missed_coordinates(self) -> tuple[Coordinate, ...]:
        return tuple(self._missed)

    def get_snapshot(self) -> BoardSnapshot:
        occupied = tuple(
            tuple(isinstance(cell, Occupied) for cell in grid_row) for grid_row in self._grid
        )
        return BoardSnapshot(
            size=self.size,
            occupied=occupied,
            attacked=frozenset(self._attacked),
            missed=tuple(self._missed),
        )

    def _run(self, length: int, row: int, col: int, vertical: bool) -> list[Coordinate]:
        if vertical:
            return [Coordinate(row + offset, col) for offset in range(length)]
        return [Coordinate(row, col + offset) for offset in range(length)]

    def _check_run(self, run: list[Coordinate]) -> None:
        for coord in run:
            if not self.is_valid_coordinate(coord.row, coord.col):
                raise OutOfBoundsError(
                    f"Placement leaves the board at ({coord.row}, {coord.col})."
                )
        for coord in run:
            if isinstance(self._grid[coord.row][coord.col], Occupied):
                raise OccupiedError(f"Cell ({coord.row}, {coord.col}) is already occupied.")
