"""Items repository."""
from __future__ import annotations

from typing import Dict, List

from ethershift.core.types import ITEM_KINDS
from ethershift.data.errors import DataValidationError
from ethershift.data.repositories.base import RepositoryBase
from ethershift.domain.defs import EffectDef, ItemDef

VALID_EFFECT_KINDS = ("heal_hp", "heal_mp")


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads item definitions (keys, consumables, artifacts)."""

    def __init__(self, base_path=None) -> None:
        super().__init__("items.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str):
                raise DataValidationError("Item IDs must be strings.")
            context = f"item '{raw_id}'"
            item_data = self._require_mapping(payload, context)
            self._assert_required(item_data, {"name", "description", "kind"}, context)
            kind = self._require_literal(item_data["kind"], ITEM_KINDS, f"{context} kind")
            effects = self._parse_effects(item_data.get("effects"), f"{context} effects")
            if effects and kind != "CONSUMABLE":
                raise DataValidationError(f"{context} only CONSUMABLE items may declare effects.")
            items[raw_id] = ItemDef(
                id=raw_id,
                name=self._require_str(item_data["name"], f"{context} name"),
                description=self._require_str(item_data["description"], f"{context} description"),
                kind=kind,  # type: ignore[arg-type]
                effects=tuple(effects),
            )
        return items

    def _parse_effects(self, raw_effects: object, context: str) -> List[EffectDef]:
        if raw_effects is None:
            return []
        if not isinstance(raw_effects, list):
            raise DataValidationError(f"{context} must be a list if provided.")
        effects: List[EffectDef] = []
        for index, entry in enumerate(raw_effects):
            effect_ctx = f"{context}[{index}]"
            effect_data = self._require_mapping(entry, effect_ctx)
            kind = self._require_literal(effect_data.get("kind"), VALID_EFFECT_KINDS, f"{effect_ctx} kind")
            amount = self._require_int(effect_data.get("amount"), f"{effect_ctx} amount")
            if amount <= 0:
                raise DataValidationError(f"{effect_ctx} amount must be positive.")
            effects.append(EffectDef(kind=kind, amount=amount))  # type: ignore[arg-type]
        return effects
