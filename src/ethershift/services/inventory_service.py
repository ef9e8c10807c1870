"""Inventory service for using consumables in and out of combat."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from ethershift.domain.defs import ItemDef
from ethershift.domain.item_effects import apply_item_effects, preview_item_effects
from ethershift.domain.state import GameSession, GameState
from ethershift.services.combat_service import CombatService
from ethershift.services.events import ActionRejectedEvent, GameEvent

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InventoryEntryView:
    """Grouped inventory row for the presentation layer."""

    item_id: str
    name: str
    kind: str
    quantity: int


@dataclass(slots=True)
class ItemConsumedEvent(GameEvent):
    item_id: str
    item_name: str
    hp_restored: int
    mp_restored: int


class InventoryService:
    """Consumes inventory items. Using an item in combat spends the player's turn."""

    def __init__(self, combat_service: CombatService) -> None:
        self._combat_service = combat_service

    def list_inventory(self, state: GameState) -> List[InventoryEntryView]:
        """Group inventory instances by id, keeping first-seen order."""
        rows: dict[str, InventoryEntryView] = {}
        for item in state.inventory:
            row = rows.get(item.id)
            if row is None:
                rows[item.id] = InventoryEntryView(item_id=item.id, name=item.name, kind=item.kind, quantity=1)
            else:
                row.quantity += 1
        return list(rows.values())

    def consume(self, session: GameSession, item_id: str) -> List[GameEvent]:
        state = session.state
        if state.is_transitioning or state.is_game_over or state.in_dialogue:
            logger.debug("Consume '%s' rejected: session locked", item_id)
            return []
        if state.in_combat and state.combat.phase == "WAITING":
            logger.debug("Consume '%s' rejected: enemy turn pending", item_id)
            return []

        index = self._find_index(state.inventory, item_id)
        if index is None:
            return [ActionRejectedEvent(reason="missing_item", message="That item is not in your inventory.")]
        item = state.inventory[index]
        if not item.is_consumable:
            return [ActionRejectedEvent(reason="not_consumable", message=f"{item.name} cannot be used.")]
        if not preview_item_effects(state.stats, item).had_effect:
            return [ActionRejectedEvent(reason="no_effect", message=f"{item.name} would have no effect.")]

        del state.inventory[index]
        result = apply_item_effects(state.stats, item)
        events: List[GameEvent] = [
            ItemConsumedEvent(
                item_id=item.id,
                item_name=item.name,
                hp_restored=result.hp_delta,
                mp_restored=result.mp_delta,
            )
        ]
        if state.in_combat:
            state.combat.reset_input()
            events.extend(self._combat_service.request_enemy_turn(state))
        return events

    @staticmethod
    def _find_index(inventory: List[ItemDef], item_id: str) -> int | None:
        for idx, item in enumerate(inventory):
            if item.id == item_id:
                return idx
        return None
