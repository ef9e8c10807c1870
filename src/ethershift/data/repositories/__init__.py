"""Repository exports."""

from .dialogue_repo import DialogueRepository
from .items_repo import ItemsRepository
from .skills_repo import SkillsRepository
from .zones_repo import ZonesRepository

__all__ = [
    "DialogueRepository",
    "ItemsRepository",
    "SkillsRepository",
    "ZonesRepository",
]
