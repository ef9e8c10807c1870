"""Grid movement, collision and shift-mode toggling."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from ethershift.core.types import Direction, direction_from_delta
from ethershift.domain.defs import ZoneGateInteractable
from ethershift.domain.state import GameSession
from ethershift.domain.visibility import reveal_around
from ethershift.services.events import GameEvent

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PlayerMovedEvent(GameEvent):
    x: int
    y: int
    facing: Direction


@dataclass(slots=True)
class GateSteppedEvent(GameEvent):
    """The player walked onto a visible zone gate; a transition should follow shortly."""

    gate_id: str
    zone_id: str
    x: int
    y: int


@dataclass(slots=True)
class ShiftToggledEvent(GameEvent):
    active: bool


class MovementService:
    """Moves the player one tile at a time and owns the shift toggle."""

    def move(self, session: GameSession, dx: int, dy: int) -> List[GameEvent]:
        facing = direction_from_delta(dx, dy)
        if facing is None:
            raise ValueError(f"Movement must be a single cardinal step, got ({dx}, {dy}).")
        state = session.state
        world = session.world
        if not state.is_idle:
            logger.debug("Move rejected: session busy")
            return []

        target = state.position.step(dx, dy)
        if not world.in_bounds(target.x, target.y):
            return []
        tile = world.tile_at(target.x, target.y)
        if tile is None:
            return []
        if tile.type == "WALL" and not state.is_shift_active:
            return []
        if tile.type == "WATER":
            return []

        state.facing = facing
        state.position = target
        world.replace_tiles(reveal_around(world.tiles, target.x, target.y))

        events: List[GameEvent] = [PlayerMovedEvent(x=target.x, y=target.y, facing=facing)]
        gate = tile.interactable
        if isinstance(gate, ZoneGateInteractable) and (state.is_shift_active or not gate.is_hidden):
            events.append(GateSteppedEvent(gate_id=gate.id, zone_id=state.zone_id, x=target.x, y=target.y))
        return events

    def toggle_shift(self, session: GameSession) -> List[GameEvent]:
        state = session.state
        if not state.is_idle:
            logger.debug("Shift toggle rejected: session busy")
            return []
        state.is_shift_active = not state.is_shift_active
        return [ShiftToggledEvent(active=state.is_shift_active)]
