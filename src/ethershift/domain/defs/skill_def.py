"""Skill definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ethershift.core.types import Direction, SkillEffect


@dataclass(frozen=True, slots=True)
class SkillDef:
    """A castable skill gated behind a rune sequence."""

    id: str
    name: str
    description: str
    mp_cost: int
    damage_scale: float
    effect: SkillEffect
    sequence: Tuple[Direction, ...]
    power: int = 0  # heal amount for HEAL, attack bonus for BUFF
