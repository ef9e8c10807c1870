"""Skills repository."""
from __future__ import annotations

from typing import Dict

from ethershift.core.types import DIRECTIONS, SKILL_EFFECTS
from ethershift.data.errors import DataValidationError
from ethershift.data.repositories.base import RepositoryBase
from ethershift.domain.defs import SkillDef


class SkillsRepository(RepositoryBase[SkillDef]):
    """Loads rune-gated combat skills."""

    def __init__(self, base_path=None) -> None:
        super().__init__("skills.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, SkillDef]:
        skills: Dict[str, SkillDef] = {}
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str):
                raise DataValidationError("Skill IDs must be strings.")
            context = f"skill '{raw_id}'"
            skill_data = self._require_mapping(payload, context)
            self._assert_required(
                skill_data,
                {"name", "description", "mp_cost", "damage_scale", "effect", "sequence"},
                context,
            )
            effect = self._require_literal(skill_data["effect"], SKILL_EFFECTS, f"{context} effect")
            sequence = self._require_str_list(skill_data["sequence"], f"{context} sequence")
            if not sequence:
                raise DataValidationError(f"{context} sequence must not be empty.")
            for step in sequence:
                self._require_literal(step, DIRECTIONS, f"{context} sequence entry")
            mp_cost = self._require_int(skill_data["mp_cost"], f"{context} mp_cost")
            if mp_cost < 0:
                raise DataValidationError(f"{context} mp_cost must be non-negative.")

            skills[raw_id] = SkillDef(
                id=raw_id,
                name=self._require_str(skill_data["name"], f"{context} name"),
                description=self._require_str(skill_data["description"], f"{context} description"),
                mp_cost=mp_cost,
                damage_scale=self._require_number(skill_data["damage_scale"], f"{context} damage_scale"),
                effect=effect,  # type: ignore[arg-type]
                sequence=tuple(sequence),  # type: ignore[arg-type]
                power=self._require_int(skill_data.get("power", 0), f"{context} power"),
            )
        return skills

    @staticmethod
    def _require_number(value: object, context: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataValidationError(f"{context} must be a number.")
        return float(value)
