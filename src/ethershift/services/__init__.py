"""Service layer exports."""

from .combat_service import CombatService
from .controllers import CombatAction, CombatController
from .dialogue_service import DialogueService
from .engine import GameEngine
from .errors import FactoryError, SaveLoadError
from .events import ActionRejectedEvent, GameEvent
from .interaction_service import InteractionService
from .inventory_service import InventoryService
from .movement_service import MovementService
from .persistence_service import PersistenceService
from .save_service import SaveService
from .transition_service import TransitionService
from .world_service import WorldService

__all__ = [
    "CombatService",
    "CombatAction",
    "CombatController",
    "DialogueService",
    "GameEngine",
    "FactoryError",
    "SaveLoadError",
    "ActionRejectedEvent",
    "GameEvent",
    "InteractionService",
    "InventoryService",
    "MovementService",
    "PersistenceService",
    "SaveService",
    "TransitionService",
    "WorldService",
]
