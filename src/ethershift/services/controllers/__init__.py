"""UI-agnostic controllers for game flow orchestration."""
from __future__ import annotations

from .combat_controller import CombatAction, CombatActionType, CombatController

__all__ = [
    "CombatController",
    "CombatAction",
    "CombatActionType",
]
