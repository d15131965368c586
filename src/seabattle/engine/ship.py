"""Ship domain model for the game engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .errors import InvalidShipLengthError


@dataclass(frozen=True, order=True)
class Coordinate:
    """Immutable board coordinate."""

    row: int
    col: int

    def neighbours(self) -> tuple[Coordinate, ...]:
        """Return the orthogonal neighbours in up, down, left, right order."""
        return (
            Coordinate(self.row - 1, self.col),
            Coordinate(self.row + 1, self.col),
            Coordinate(self.row, self.col - 1),
            Coordinate(self.row, self.col + 1),
        )


class Orientation(Enum):
    """Allowed ship orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def vertical(self) -> bool:
        return self is Orientation.VERTICAL

    @classmethod
    def from_vertical(cls, vertical: bool) -> Orientation:
        return cls.VERTICAL if vertical else cls.HORIZONTAL


class ShipType(Enum):
    """Ship classes of the standard fleet and their lengths."""

    CARRIER = ("carrier", 5)
    BATTLESHIP = ("battleship", 4)
    CRUISER = ("cruiser", 3)
    SUBMARINE = ("submarine", 3)
    DESTROYER = ("destroyer", 2)

    @property
    def length(self) -> int:
        """Return the number of contiguous cells the ship occupies."""
        return self.value[1]


@dataclass(eq=False)
class Ship:
    """A ship that tracks how many times it has been hit.

    Ships compare by identity: two destroyers are never the same ship even
    when their damage matches.
    """

    length: int
    ship_type: ShipType | None = None
    hit_count: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise InvalidShipLengthError(f"Ship length must be positive, got {self.length}.")

    @classmethod
    def from_type(cls, ship_type: ShipType) -> Ship:
        return cls(ship_type.length, ship_type)

    @property
    def name(self) -> str:
        if self.ship_type is not None:
            return self.ship_type.name.lower()
        return f"ship-{self.length}"

    def hit(self) -> None:
        """Register one hit; further hits on a sunk ship are ignored."""
        if self.hit_count < self.length:
            self.hit_count += 1

    def is_sunk(self) -> bool:
        return self.hit_count >= self.length
