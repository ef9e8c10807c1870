"""Experience and level-up rules."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ethershift.domain.rules import (
    LEVEL_UP_ATTACK,
    LEVEL_UP_DEFENSE,
    LEVEL_UP_MAX_HP,
    LEVEL_UP_MAX_MP,
    XP_PER_LEVEL,
)
from ethershift.domain.state import PlayerStats


@dataclass(slots=True)
class LevelUpResult:
    new_level: int
    max_hp: int
    max_mp: int
    attack: int
    defense: int


def xp_threshold(level: int) -> int:
    return level * XP_PER_LEVEL


def apply_level_ups(stats: PlayerStats) -> List[LevelUpResult]:
    """Level up while cumulative xp meets the threshold; each level fully restores hp/mp."""
    results: List[LevelUpResult] = []
    while stats.xp >= xp_threshold(stats.level):
        stats.level += 1
        stats.max_hp += LEVEL_UP_MAX_HP
        stats.max_mp += LEVEL_UP_MAX_MP
        stats.attack += LEVEL_UP_ATTACK
        stats.defense += LEVEL_UP_DEFENSE
        stats.hp = stats.max_hp
        stats.mp = stats.max_mp
        results.append(
            LevelUpResult(
                new_level=stats.level,
                max_hp=stats.max_hp,
                max_mp=stats.max_mp,
                attack=stats.attack,
                defense=stats.defense,
            )
        )
    return results
