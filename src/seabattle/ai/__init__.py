"""Computer opponent strategies."""

from .targeting import TargetingAI, TargetingMode

__all__ = ["TargetingAI", "TargetingMode"]
