"""Interactable variants placed on zone tiles.

Each variant carries only the payload relevant to its kind. `id` is stable
across zone reloads and is what the interaction history records.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union

from ethershift.core.types import Direction, InteractableKind

from .item_def import ItemDef


@dataclass(frozen=True, slots=True)
class TransitionMetadata:
    """Everything needed to re-enter a zone at a given spot."""

    target_zone_id: str
    target_zone_name: str
    target_x: int
    target_y: int
    target_facing: Direction


@dataclass(frozen=True, slots=True)
class EnemyStatsDef:
    hp: int
    max_hp: int
    attack: int
    defense: int
    xp_reward: int
    credits_reward: int = 0


@dataclass(frozen=True, slots=True)
class NpcInteractable:
    kind: ClassVar[InteractableKind] = "NPC"

    id: str
    name: str
    is_hidden: bool = False
    dialogue_id: str | None = None
    lines: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ItemInteractable:
    kind: ClassVar[InteractableKind] = "ITEM"

    id: str
    name: str
    reward: ItemDef
    is_hidden: bool = False


@dataclass(frozen=True, slots=True)
class EnemyInteractable:
    kind: ClassVar[InteractableKind] = "ENEMY"

    id: str
    name: str
    stats: EnemyStatsDef
    loot: ItemDef | None = None
    is_hidden: bool = False


@dataclass(frozen=True, slots=True)
class ZoneGateInteractable:
    kind: ClassVar[InteractableKind] = "ZONE_GATE"

    id: str
    name: str
    transition: TransitionMetadata
    is_hidden: bool = False


Interactable = Union[NpcInteractable, ItemInteractable, EnemyInteractable, ZoneGateInteractable]
