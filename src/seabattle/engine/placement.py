"""Fleet placement helpers layered on top of ``Board.place_ship``."""

from __future__ import annotations

import logging
import random
from typing import Iterable, Sequence

from seabattle.telemetry import get_tracer

from .board import Board
from .errors import PlacementError
from .ship import Ship, ShipType

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.placement")

STANDARD_FLEET: tuple[ShipType, ...] = tuple(ShipType)
MAX_PLACEMENT_ATTEMPTS = 1000

# (ship type, row, col, vertical)
DEFAULT_LAYOUT: tuple[tuple[ShipType, int, int, bool], ...] = (
    (ShipType.CARRIER, 0, 0, False),
    (ShipType.BATTLESHIP, 2, 1, True),
    (ShipType.CRUISER, 4, 4, False),
    (ShipType.SUBMARINE, 6, 0, True),
    (ShipType.DESTROYER, 8, 8, False),
)


def _as_ship(entry: ShipType | int) -> Ship:
    if isinstance(entry, ShipType):
        return Ship.from_type(entry)
    return Ship(entry)


def place_fleet_randomly(
    board: Board,
    rng: random.Random,
    fleet: Iterable[ShipType | int] = STANDARD_FLEET,
    max_attempts: int = MAX_PLACEMENT_ATTEMPTS,
) -> list[Ship]:
    """Place each ship of ``fleet`` at a random valid spot on ``board``.

    ``fleet`` entries are ship types or bare lengths. Candidates are drawn
    until ``would_placement_succeed`` accepts one; a ship that still does not
    fit after ``max_attempts`` draws raises ``PlacementError``. Ships placed
    before the failure stay on the board.
    """
    placed: list[Ship] = []
    with tracer.start_as_current_span("placement.random_fleet") as span:
        span.set_attribute("board.owner", board.owner)
        for entry in fleet:
            ship = _as_ship(entry)
            for attempt in range(1, max_attempts + 1):
                row = rng.randrange(board.size)
                col = rng.randrange(board.size)
                vertical = rng.random() < 0.5
                if board.would_placement_succeed(ship.length, row, col, vertical):
                    board.place_ship(ship, row, col, vertical)
                    placed.append(ship)
                    logger.debug(
                        "random_ship_placed",
                        extra={"ship": ship.name, "attempts": attempt, "owner": board.owner},
                    )
                    break
            else:
                logger.error(
                    "random_placement_exhausted",
                    extra={"ship": ship.name, "attempts": max_attempts, "owner": board.owner},
                )
                raise PlacementError(
                    f"Could not place {ship.name} after {max_attempts} attempts."
                )
        span.set_attribute("placement.ships", len(placed))
    return placed


def place_default_layout(
    board: Board,
    layout: Sequence[tuple[ShipType, int, int, bool]] = DEFAULT_LAYOUT,
) -> list[Ship]:
    """Place the fixed starting fleet used when a human skips manual placement."""
    placed = []
    for ship_type, row, col, vertical in layout:
        ship = Ship.from_type(ship_type)
        board.place_ship(ship, row, col, vertical)
        placed.append(ship)
    return placed
