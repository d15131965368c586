"""Exceptions raised by the game engine.

Each error also derives from the builtin the engine raised before the
hierarchy existed, so ``except ValueError`` callers keep working.
"""

from __future__ import annotations


class SeaBattleError(Exception):
    """Base class for all engine errors."""


class InvalidShipLengthError(SeaBattleError, ValueError):
    """A ship was created with a non-positive length."""


class OutOfBoundsError(SeaBattleError, ValueError):
    """A placement run or attack coordinate falls outside the grid."""


class OccupiedError(SeaBattleError, ValueError):
    """A placement run crosses a cell that already holds a ship."""


class AlreadyAttackedError(SeaBattleError, ValueError):
    """The coordinate has already been attacked on this board."""


class WrongPlayerKindError(SeaBattleError, RuntimeError):
    """An attack path was used by the wrong kind of player."""


class PlacementError(SeaBattleError, RuntimeError):
    """Random placement gave up before fitting every ship."""
