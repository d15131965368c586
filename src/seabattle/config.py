"""Game configuration."""

from __future__ import annotations

import os
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

STANDARD_FLEET_LENGTHS: tuple[int, ...] = (5, 4, 3, 3, 2)


class GameConfig(BaseModel):
    """Settings for a single human vs. computer match."""

    board_size: int = Field(default=10, ge=1)
    fleet: tuple[int, ...] = STANDARD_FLEET_LENGTHS
    rng_seed: int | None = None
    computer_delay: float = Field(default=1.0, ge=0.0)

    @field_validator("fleet")
    @classmethod
    def _positive_lengths(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not value:
            raise ValueError("fleet must contain at least one ship")
        if any(length <= 0 for length in value):
            raise ValueError("ship lengths must be positive")
        return value

    @property
    def uses_standard_fleet(self) -> bool:
        return self.fleet == STANDARD_FLEET_LENGTHS

    @classmethod
    def from_env(cls, **overrides: Any) -> "GameConfig":
        """Construct config from ``SEABATTLE_*`` env vars; overrides win."""

        data: Dict[str, Any] = {}
        board_size = os.getenv("SEABATTLE_BOARD_SIZE")
        if board_size:
            data["board_size"] = int(board_size)
        fleet = os.getenv("SEABATTLE_FLEET")
        if fleet:
            data["fleet"] = tuple(int(part) for part in fleet.split(",") if part.strip())
        seed = os.getenv("SEABATTLE_SEED")
        if seed:
            data["rng_seed"] = int(seed)
        delay = os.getenv("SEABATTLE_COMPUTER_DELAY")
        if delay:
            data["computer_delay"] = float(delay)

        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**data)
