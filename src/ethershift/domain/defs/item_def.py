"""Item definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ethershift.core.types import ItemKind

from .effect_def import EffectDef


@dataclass(frozen=True, slots=True)
class ItemDef:
    """Inventory item; only CONSUMABLE items can be used from the inventory."""

    id: str
    name: str
    description: str
    kind: ItemKind
    effects: Tuple[EffectDef, ...] = ()

    @property
    def is_consumable(self) -> bool:
        return self.kind == "CONSUMABLE"
