"""Event primitives shared by every service."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class GameEvent:
    """Base event returned by service operations."""


@dataclass(slots=True)
class ActionRejectedEvent(GameEvent):
    """An action that was refused with a player-visible explanation."""

    reason: str
    message: str
