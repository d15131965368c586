"""Hunt/target search strategy used by the computer player."""

from __future__ import annotations

import logging
import random
from collections import deque
from enum import Enum

from seabattle.engine.ship import Coordinate

logger = logging.getLogger(__name__)


class TargetingMode(Enum):
    """Whether the AI is searching blind or following up a hit."""

    HUNT = "hunt"
    TARGET = "target"


class TargetingAI:
    """Chooses attack coordinates, hunting at random until a hit is scored.

    After a hit the in-bounds orthogonal neighbours that have not been chosen
    yet are queued and tried first-in first-out before hunting resumes. Every
    chosen coordinate is dropped from the remaining pool, so one instance never
    repeats itself. Pending targets are always a subset of the remaining pool.

    State is created on first use from the size of the board being attacked.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._size: int | None = None
        self._remaining: set[Coordinate] = set()
        self._pending: deque[Coordinate] = deque()

    @property
    def initialized(self) -> bool:
        return self._size is not None

    @property
    def mode(self) -> TargetingMode:
        return TargetingMode.TARGET if self._pending else TargetingMode.HUNT

    @property
    def remaining_coordinates(self) -> frozenset[Coordinate]:
        return frozenset(self._remaining)

    @property
    def pending_targets(self) -> tuple[Coordinate, ...]:
        return tuple(self._pending)

    def select_target(self, board_size: int) -> Coordinate | None:
        """Pick and consume the next coordinate, or ``None`` once none are left."""
        self._ensure_initialized(board_size)

        if self._pending:
            coord = self._pending.popleft()
            mode = TargetingMode.TARGET
        elif self._remaining:
            coord = self._rng.choice(sorted(self._remaining))
            mode = TargetingMode.HUNT
        else:
            logger.info("targeting_exhausted", extra={"board_size": self._size})
            return None

        self._remaining.discard(coord)
        logger.debug(
            "target_selected",
            extra={
                "row": coord.row,
                "col": coord.col,
                "mode": mode.value,
                "pending": len(self._pending),
                "remaining": len(self._remaining),
            },
        )
        return coord

    def record_result(self, coord: Coordinate, hit: bool) -> None:
        """Queue the unexplored neighbours of ``coord`` when it was a hit."""
        if not hit or self._size is None:
            return
        queued = 0
        for neighbour in coord.neighbours():
            if not (0 <= neighbour.row < self._size and 0 <= neighbour.col < self._size):
                continue
            if neighbour not in self._remaining or neighbour in self._pending:
                continue
            self._pending.append(neighbour)
            queued += 1
        logger.debug(
            "targets_queued",
            extra={"row": coord.row, "col": coord.col, "queued": queued, "pending": len(self._pending)},
        )

    def _ensure_initialized(self, board_size: int) -> None:
        if self._size is not None:
            return
        if board_size <= 0:
            raise ValueError(f"Board size must be positive, got {board_size}.")
        self._size = board_size
        self._remaining = {
            Coordinate(row, col) for row in range(board_size) for col in range(board_size)
        }
