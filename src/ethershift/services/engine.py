"""Action dispatcher: the engine's public surface for a presentation layer."""
from __future__ import annotations

import copy
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List

from ethershift.core.scheduler import Scheduler
from ethershift.core.types import Direction
from ethershift.data.repositories import (
    DialogueRepository,
    ItemsRepository,
    SkillsRepository,
    ZonesRepository,
)
from ethershift.data.save_store import InMemoryStore, SaveStore
from ethershift.domain import rules
from ethershift.domain.state import GameSession, GameState, append_log
from ethershift.domain.world import WorldState
from ethershift.services.combat_service import (
    CombatService,
    CombatView,
    EnemyTurnRequestedEvent,
    SkillExecutionRequestedEvent,
)
from ethershift.services.controllers import CombatAction, CombatController
from ethershift.services.dialogue_service import DialogueNodeView, DialogueService
from ethershift.services.events import GameEvent
from ethershift.services.factories import create_new_session
from ethershift.services.interaction_service import InteractionService
from ethershift.services.inventory_service import InventoryEntryView, InventoryService
from ethershift.services.movement_service import GateSteppedEvent, MovementService
from ethershift.services.narration import narrate
from ethershift.services.persistence_service import DEFAULT_SAVE_KEY, PersistenceService
from ethershift.services.save_service import SaveService
from ethershift.services.transition_service import TransitionService, TransitionStartedEvent
from ethershift.services.world_service import WorldService

logger = logging.getLogger(__name__)

Clock = Callable[[], str]


def wall_clock() -> str:
    return datetime.now().strftime("%H:%M:%S")


class GameEngine:
    """
    Owns one session and routes every action through the services.

    Each action returns the events it produced; narratable events are
    appended to the in-game log and request events become scheduled
    continuations. Continuations capture the engine epoch, which moves on
    every load and reset, so work queued for a replaced session never
    touches the new one.
    """

    def __init__(
        self,
        *,
        zones_repo: ZonesRepository,
        items_repo: ItemsRepository,
        skills_repo: SkillsRepository,
        dialogue_repo: DialogueRepository,
        store: SaveStore,
        seed: int = 0,
        scheduler: Scheduler | None = None,
        clock: Clock | None = None,
        save_key: str = DEFAULT_SAVE_KEY,
    ) -> None:
        self._zones_repo = zones_repo
        self._seed = seed
        self._scheduler = scheduler or Scheduler()
        self._clock = clock or wall_clock
        self._epoch = 0

        self._world_service = WorldService(zones_repo)
        self._movement_service = MovementService()
        self._combat_service = CombatService(skills_repo)
        self._combat_controller = CombatController(self._combat_service)
        self._dialogue_service = DialogueService(dialogue_repo)
        self._transition_service = TransitionService(self._world_service)
        self._interaction_service = InteractionService(
            self._dialogue_service, self._combat_service, self._transition_service
        )
        self._inventory_service = InventoryService(self._combat_service)
        self._persistence = PersistenceService(
            SaveService(zones_repo=zones_repo, items_repo=items_repo),
            store,
            key=save_key,
        )
        self._session = self._new_session()

    @classmethod
    def create(
        cls,
        *,
        seed: int = 0,
        store: SaveStore | None = None,
        definitions_path: Path | str | None = None,
        clock: Clock | None = None,
        save_key: str = DEFAULT_SAVE_KEY,
    ) -> "GameEngine":
        """Build an engine over the packaged (or given) content tables."""
        items_repo = ItemsRepository(base_path=definitions_path)
        dialogue_repo = DialogueRepository(base_path=definitions_path)
        return cls(
            zones_repo=ZonesRepository(items_repo, dialogue_repo, base_path=definitions_path),
            items_repo=items_repo,
            skills_repo=SkillsRepository(base_path=definitions_path),
            dialogue_repo=dialogue_repo,
            store=store if store is not None else InMemoryStore(),
            seed=seed,
            clock=clock,
            save_key=save_key,
        )

    # -----------------------
    # Read Side
    # -----------------------
    @property
    def state(self) -> GameState:
        """Deep copy of the player-side state."""
        return copy.deepcopy(self._session.state)

    @property
    def world(self) -> WorldState:
        """Deep copy of the active zone's tiles."""
        return copy.deepcopy(self._session.world)

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def snapshot(self) -> GameSession:
        return copy.deepcopy(self._session)

    def get_combat_view(self) -> CombatView | None:
        return self._combat_controller.get_combat_view(self._session.state)

    def get_available_combat_actions(self) -> dict:
        return self._combat_controller.get_available_actions(self._session.state)

    def get_dialogue_view(self) -> DialogueNodeView | None:
        return self._dialogue_service.get_current_node_view(self._session.state)

    def list_inventory(self) -> List[InventoryEntryView]:
        return self._inventory_service.list_inventory(self._session.state)

    def has_save(self) -> bool:
        return self._persistence.has_save()

    # -----------------------
    # Actions
    # -----------------------
    def move(self, dx: int, dy: int) -> List[GameEvent]:
        return self._dispatch(self._movement_service.move(self._session, dx, dy))

    def toggle_shift(self) -> List[GameEvent]:
        return self._dispatch(self._movement_service.toggle_shift(self._session))

    def interact(self) -> List[GameEvent]:
        return self._dispatch(self._interaction_service.interact(self._session))

    def consume_item(self, item_id: str) -> List[GameEvent]:
        return self._dispatch(self._inventory_service.consume(self._session, item_id))

    def combat_action(self, action: CombatAction) -> List[GameEvent]:
        return self._dispatch(self._combat_controller.apply_action(self._session, action))

    def rune_input(self, direction: Direction) -> List[GameEvent]:
        return self._dispatch(self._combat_controller.input_rune(self._session, direction))

    def select_dialogue_option(self, next_node_id: str | None) -> List[GameEvent]:
        return self._dispatch(self._dialogue_service.select_option(self._session, next_node_id))

    def save(self) -> List[GameEvent]:
        return self._dispatch(self._persistence.save(self._session, self._clock()))

    def load(self) -> List[GameEvent]:
        """Replace the session with the stored one. Failures are logged on the current session."""
        session, events = self._persistence.load()
        if session is None:
            return self._dispatch(events)
        self._session = session
        self._epoch += 1
        return events

    def reset_game(self) -> List[GameEvent]:
        """Delete the stored record and start over as a fresh process would."""
        self._persistence.clear()
        self._epoch += 1
        self._session = self._new_session()
        logger.info("Session reset (seed=%s)", self._seed)
        return []

    def advance_time(self, seconds: float) -> int:
        """Let `seconds` of game time pass, firing due continuations."""
        return self._scheduler.advance(seconds)

    def run_pending(self) -> int:
        """Fire every queued continuation, including ones they schedule."""
        return self._scheduler.run_pending()

    # -----------------------
    # Dispatch
    # -----------------------
    def _dispatch(self, events: List[GameEvent]) -> List[GameEvent]:
        state = self._session.state
        for event in events:
            line = narrate(event)
            if line is not None:
                message, kind = line
                append_log(state, message, kind, self._clock())
            self._schedule_follow_up(event)
        return events

    def _schedule_follow_up(self, event: GameEvent) -> None:
        epoch = self._epoch
        if isinstance(event, GateSteppedEvent):
            self._scheduler.schedule(
                rules.GATE_STEP_DELAY,
                f"gate_step:{event.gate_id}",
                lambda: self._continue(
                    epoch,
                    lambda: self._transition_service.begin_from_gate_step(
                        self._session, event.gate_id, event.zone_id, event.x, event.y
                    ),
                ),
            )
        elif isinstance(event, TransitionStartedEvent):
            self._scheduler.schedule(
                rules.TRANSITION_DELAY,
                f"transition:{event.transition_id}",
                lambda: self._continue(
                    epoch,
                    lambda: self._transition_service.complete(self._session, event.transition_id, event.target),
                ),
            )
        elif isinstance(event, EnemyTurnRequestedEvent):
            self._scheduler.schedule(
                rules.ENEMY_TURN_DELAY,
                f"enemy_turn:{event.combat_session_id}",
                lambda: self._continue(
                    epoch,
                    lambda: self._combat_service.run_enemy_turn(
                        self._session, event.combat_session_id, event.enemy_id
                    ),
                ),
            )
        elif isinstance(event, SkillExecutionRequestedEvent):
            self._scheduler.schedule(
                rules.SKILL_EXECUTION_DELAY,
                f"skill:{event.skill_id}",
                lambda: self._continue(
                    epoch,
                    lambda: self._combat_service.execute_skill(
                        self._session, event.combat_session_id, event.enemy_id, event.skill_id
                    ),
                ),
            )

    def _continue(self, epoch: int, resume: Callable[[], List[GameEvent]]) -> None:
        if epoch != self._epoch:
            logger.debug("Dropping continuation from epoch %s (now %s)", epoch, self._epoch)
            return
        self._dispatch(resume())

    def _new_session(self) -> GameSession:
        return create_new_session(
            self._seed,
            zones_repo=self._zones_repo,
            world_service=self._world_service,
            timestamp=self._clock(),
        )
