"""Pure helpers for applying item effects to player stats."""
from __future__ import annotations

from dataclasses import dataclass

from ethershift.domain.defs import ItemDef
from ethershift.domain.state import PlayerStats


@dataclass(slots=True)
class ItemEffectResult:
    """Summary of stat deltas produced by a consumable."""

    hp_delta: int = 0
    mp_delta: int = 0

    @property
    def had_effect(self) -> bool:
        return self.hp_delta != 0 or self.mp_delta != 0


def preview_item_effects(stats: PlayerStats, item: ItemDef) -> ItemEffectResult:
    """Return the deltas the item would produce without touching the stats."""
    result = ItemEffectResult()
    for effect in item.effects:
        if effect.kind == "heal_hp":
            result.hp_delta = min(stats.max_hp, stats.hp + result.hp_delta + effect.amount) - stats.hp
        elif effect.kind == "heal_mp":
            result.mp_delta = min(stats.max_mp, stats.mp + result.mp_delta + effect.amount) - stats.mp
    return result


def apply_item_effects(stats: PlayerStats, item: ItemDef) -> ItemEffectResult:
    """Apply healing/restoration effects, capped at the stat maximums."""
    result = preview_item_effects(stats, item)
    stats.hp += result.hp_delta
    stats.mp += result.mp_delta
    return result
