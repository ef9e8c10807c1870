"""Timed, input-locking movement between zones."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from ethershift.domain.defs import TransitionMetadata, ZoneGateInteractable
from ethershift.domain.state import GameSession, Position
from ethershift.services.events import GameEvent
from ethershift.services.world_service import WorldService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TransitionStartedEvent(GameEvent):
    """Input is locked; the zone swap completes after the transition delay."""

    transition_id: int
    target: TransitionMetadata


@dataclass(slots=True)
class ZoneEnteredEvent(GameEvent):
    zone_id: str
    zone_name: str
    x: int
    y: int


class TransitionService:
    """Two-step zone change: lock and announce, then swap the world in."""

    def __init__(self, world_service: WorldService) -> None:
        self._world_service = world_service

    def begin(self, session: GameSession, target: TransitionMetadata) -> List[GameEvent]:
        state = session.state
        if state.is_transitioning:
            logger.debug("Transition to '%s' ignored: already transitioning", target.target_zone_id)
            return []
        state.is_transitioning = True
        state.transition_counter += 1
        return [TransitionStartedEvent(transition_id=state.transition_counter, target=target)]

    def begin_from_gate_step(self, session: GameSession, gate_id: str, zone_id: str, x: int, y: int) -> List[GameEvent]:
        """Start the transition queued by stepping onto a gate, if the player is still standing there."""
        state = session.state
        if not state.is_idle:
            return []
        if state.zone_id != zone_id or state.position != Position(x, y):
            logger.debug("Gate step for '%s' is stale; player has moved on", gate_id)
            return []
        tile = session.world.tile_at(x, y)
        gate = tile.interactable if tile is not None else None
        if not isinstance(gate, ZoneGateInteractable) or gate.id != gate_id:
            return []
        return self.begin(session, gate.transition)

    def complete(self, session: GameSession, transition_id: int, target: TransitionMetadata) -> List[GameEvent]:
        """Swap in the destination zone. A no-op if this transition is no longer the active one."""
        state = session.state
        if not state.is_transitioning or state.transition_counter != transition_id:
            logger.debug("Transition %s is stale; ignoring completion", transition_id)
            return []
        arrival = self._world_service.resolve_arrival(
            target.target_zone_id, target.target_x, target.target_y, target.target_facing
        )
        zone_def, world = self._world_service.build_world(arrival.zone.id, state.interacted_ids, arrival.position)
        session.world = world
        state.zone_id = zone_def.id
        state.zone_name = zone_def.name
        state.position = arrival.position
        state.facing = arrival.facing
        state.is_transitioning = False
        return [
            ZoneEnteredEvent(
                zone_id=zone_def.id,
                zone_name=zone_def.name,
                x=arrival.position.x,
                y=arrival.position.y,
            )
        ]
