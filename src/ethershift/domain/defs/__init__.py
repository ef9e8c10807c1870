"""Domain definition exports."""

from .dialogue_def import DialogueNodeDef, DialogueOptionDef, DialogueTreeDef
from .effect_def import EffectDef
from .interactable_def import (
    EnemyInteractable,
    EnemyStatsDef,
    Interactable,
    ItemInteractable,
    NpcInteractable,
    TransitionMetadata,
    ZoneGateInteractable,
)
from .item_def import ItemDef
from .skill_def import SkillDef
from .zone_def import StartDef, ZoneDef

__all__ = [
    "DialogueNodeDef",
    "DialogueOptionDef",
    "DialogueTreeDef",
    "EffectDef",
    "EnemyInteractable",
    "EnemyStatsDef",
    "Interactable",
    "ItemInteractable",
    "NpcInteractable",
    "TransitionMetadata",
    "ZoneGateInteractable",
    "ItemDef",
    "SkillDef",
    "StartDef",
    "ZoneDef",
]
