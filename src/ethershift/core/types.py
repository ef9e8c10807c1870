"""Shared type aliases for the core and domain layers."""
from typing import Dict, Literal, Tuple

Direction = Literal["UP", "DOWN", "LEFT", "RIGHT"]
TileType = Literal["EMPTY", "WALL", "WATER", "DOOR", "VOID"]
InteractableKind = Literal["NPC", "ITEM", "ENEMY", "ZONE_GATE"]
ItemKind = Literal["KEY", "CONSUMABLE", "ARTIFACT"]
SkillEffect = Literal["DMG", "HEAL", "BUFF"]
CombatPhase = Literal["MENU", "SKILL_SELECT", "INPUT", "WAITING"]
InputResult = Literal["NEUTRAL", "SUCCESS", "FAIL"]
LogKind = Literal["INFO", "COMBAT", "DIALOGUE", "SYSTEM"]

DIRECTIONS: Tuple[Direction, ...] = ("UP", "DOWN", "LEFT", "RIGHT")
TILE_TYPES: Tuple[TileType, ...] = ("EMPTY", "WALL", "WATER", "DOOR", "VOID")
INTERACTABLE_KINDS: Tuple[InteractableKind, ...] = ("NPC", "ITEM", "ENEMY", "ZONE_GATE")
ITEM_KINDS: Tuple[ItemKind, ...] = ("KEY", "CONSUMABLE", "ARTIFACT")
SKILL_EFFECTS: Tuple[SkillEffect, ...] = ("DMG", "HEAL", "BUFF")
COMBAT_PHASES: Tuple[CombatPhase, ...] = ("MENU", "SKILL_SELECT", "INPUT", "WAITING")
INPUT_RESULTS: Tuple[InputResult, ...] = ("NEUTRAL", "SUCCESS", "FAIL")
LOG_KINDS: Tuple[LogKind, ...] = ("INFO", "COMBAT", "DIALOGUE", "SYSTEM")

DIRECTION_DELTAS: Dict[Direction, Tuple[int, int]] = {
    "UP": (0, -1),
    "DOWN": (0, 1),
    "LEFT": (-1, 0),
    "RIGHT": (1, 0),
}


def direction_from_delta(dx: int, dy: int) -> Direction | None:
    """Return the cardinal direction for a unit step, or None for anything else."""
    for direction, delta in DIRECTION_DELTAS.items():
        if delta == (dx, dy):
            return direction
    return None


__all__ = [
    "Direction",
    "TileType",
    "InteractableKind",
    "ItemKind",
    "SkillEffect",
    "CombatPhase",
    "InputResult",
    "LogKind",
    "DIRECTIONS",
    "TILE_TYPES",
    "INTERACTABLE_KINDS",
    "ITEM_KINDS",
    "SKILL_EFFECTS",
    "COMBAT_PHASES",
    "INPUT_RESULTS",
    "LOG_KINDS",
    "DIRECTION_DELTAS",
    "direction_from_delta",
]
