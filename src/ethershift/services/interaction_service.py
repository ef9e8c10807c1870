"""Facing-tile interaction dispatch."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from ethershift.core.types import DIRECTION_DELTAS
from ethershift.domain.defs import (
    EnemyInteractable,
    ItemInteractable,
    NpcInteractable,
    ZoneGateInteractable,
)
from ethershift.domain.state import GameSession
from ethershift.services.combat_service import CombatService
from ethershift.services.dialogue_service import DialogueService
from ethershift.services.events import GameEvent
from ethershift.services.transition_service import TransitionService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NothingHereEvent(GameEvent):
    pass


@dataclass(slots=True)
class ObscuredEvent(GameEvent):
    """Something hidden sits on the target tile, but shift mode is off."""


@dataclass(slots=True)
class NpcSpokeEvent(GameEvent):
    npc_id: str
    npc_name: str
    line: str


@dataclass(slots=True)
class ItemAcquiredEvent(GameEvent):
    interactable_id: str
    item_id: str
    item_name: str


class InteractionService:
    """Resolves `interact` against the tile the player is facing."""

    def __init__(
        self,
        dialogue_service: DialogueService,
        combat_service: CombatService,
        transition_service: TransitionService,
    ) -> None:
        self._dialogue_service = dialogue_service
        self._combat_service = combat_service
        self._transition_service = transition_service

    def interact(self, session: GameSession) -> List[GameEvent]:
        state = session.state
        world = session.world
        if not state.is_idle:
            logger.debug("Interact rejected: session busy")
            return []

        here = world.tile_at(state.position.x, state.position.y)
        if (
            here is not None
            and isinstance(here.interactable, ZoneGateInteractable)
            and (state.is_shift_active or not here.interactable.is_hidden)
        ):
            return self._transition_service.begin(session, here.interactable.transition)

        dx, dy = DIRECTION_DELTAS[state.facing]
        target_pos = state.position.step(dx, dy)
        tile = world.tile_at(target_pos.x, target_pos.y)
        if tile is None or tile.interactable is None:
            return [NothingHereEvent()]
        interactable = tile.interactable
        if interactable.is_hidden and not state.is_shift_active:
            return [ObscuredEvent()]

        if isinstance(interactable, NpcInteractable):
            if interactable.dialogue_id is not None:
                return self._dialogue_service.open(session, interactable.dialogue_id)
            line = interactable.lines[0] if interactable.lines else "..."
            return [NpcSpokeEvent(npc_id=interactable.id, npc_name=interactable.name, line=line)]
        if isinstance(interactable, ItemInteractable):
            state.inventory.append(interactable.reward)
            state.record_interaction(interactable.id)
            world.clear_interactable(interactable.id)
            return [
                ItemAcquiredEvent(
                    interactable_id=interactable.id,
                    item_id=interactable.reward.id,
                    item_name=interactable.reward.name,
                )
            ]
        if isinstance(interactable, EnemyInteractable):
            return self._combat_service.engage(session, interactable)
        if isinstance(interactable, ZoneGateInteractable):
            return self._transition_service.begin(session, interactable.transition)
        raise TypeError(f"Unsupported interactable {interactable!r}")
