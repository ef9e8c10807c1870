"""UI-agnostic combat controller owning the phase machine and rune input."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Literal

from ethershift.core.types import Direction
from ethershift.domain.defs import SkillDef
from ethershift.domain.state import GameSession, GameState
from ethershift.services.combat_service import (
    CombatService,
    CombatView,
    SkillExecutionRequestedEvent,
)
from ethershift.services.events import ActionRejectedEvent, GameEvent

logger = logging.getLogger(__name__)

CombatActionType = Literal["ATTACK", "FLEE", "OPEN_SKILLS", "CANCEL_SKILL", "SELECT_SKILL"]


@dataclass(slots=True)
class CombatAction:
    """A structured combat decision from the player."""

    action_type: CombatActionType
    skill_id: str | None = None


@dataclass(slots=True)
class RuneAcceptedEvent(GameEvent):
    """A correct direction that does not yet complete the sequence."""

    direction: Direction
    progress: int
    length: int


@dataclass(slots=True)
class RuneFailedEvent(GameEvent):
    expected: Direction
    received: Direction


@dataclass(slots=True)
class RuneCompletedEvent(GameEvent):
    skill_id: str
    skill_name: str


@dataclass(slots=True)
class SkillMenuOpenedEvent(GameEvent):
    skill_ids: List[str]


@dataclass(slots=True)
class SkillSelectedEvent(GameEvent):
    skill_id: str
    skill_name: str
    length: int


@dataclass(slots=True)
class SkillCancelledEvent(GameEvent):
    pass


class CombatController:
    """
    Phase machine over CombatService.

    MENU -> SKILL_SELECT -> INPUT -> WAITING -> MENU, with ATTACK going from
    MENU straight to WAITING. Everything is refused outside combat, during
    WAITING and after game over; those refusals return no events.
    """

    def __init__(self, combat_service: CombatService) -> None:
        self._service = combat_service

    def get_combat_view(self, state: GameState) -> CombatView | None:
        return self._service.get_combat_view(state)

    def get_available_actions(self, state: GameState) -> dict:
        """
        Return structured data about what the player may do right now.

        Returns a dict with:
        - phase: the current combat phase, or None outside combat
        - actions: the CombatActionType values currently accepted
        - skills: the affordable SkillDefs (only in SKILL_SELECT)
        - accepts_runes: whether directional input is consumed
        """
        if not self._accepts_input(state):
            return {
                "phase": state.combat.phase if state.in_combat else None,
                "actions": [],
                "skills": [],
                "accepts_runes": False,
            }
        phase = state.combat.phase
        actions: List[CombatActionType] = []
        skills: List[SkillDef] = []
        if phase == "MENU":
            actions = ["ATTACK", "OPEN_SKILLS", "FLEE"]
        elif phase == "SKILL_SELECT":
            skills = self._service.get_affordable_skills(state)
            actions = ["SELECT_SKILL", "CANCEL_SKILL", "FLEE"] if skills else ["CANCEL_SKILL", "FLEE"]
        elif phase == "INPUT":
            actions = ["CANCEL_SKILL", "FLEE"]
        return {"phase": phase, "actions": actions, "skills": skills, "accepts_runes": phase == "INPUT"}

    def apply_action(self, session: GameSession, action: CombatAction) -> List[GameEvent]:
        state = session.state
        if not self._accepts_input(state):
            logger.debug("Combat action %s rejected: combat input locked", action.action_type)
            return []
        phase = state.combat.phase

        if action.action_type == "FLEE":
            return self._service.flee(session)
        if action.action_type == "ATTACK":
            if phase != "MENU":
                return []
            return self._service.basic_attack(session)
        if action.action_type == "OPEN_SKILLS":
            if phase != "MENU":
                return []
            state.combat.phase = "SKILL_SELECT"
            state.combat.reset_input()
            return [SkillMenuOpenedEvent(skill_ids=[skill.id for skill in self._service.get_affordable_skills(state)])]
        if action.action_type == "CANCEL_SKILL":
            if phase not in ("SKILL_SELECT", "INPUT"):
                return []
            state.combat.phase = "MENU"
            state.combat.reset_input()
            return [SkillCancelledEvent()]
        if action.action_type == "SELECT_SKILL":
            if phase != "SKILL_SELECT" or action.skill_id is None:
                return []
            return self._select_skill(state, action.skill_id)
        raise ValueError(f"Unknown combat action '{action.action_type}'.")

    def input_rune(self, session: GameSession, direction: Direction) -> List[GameEvent]:
        state = session.state
        if not self._accepts_input(state) or state.combat.phase != "INPUT":
            return []
        combat = state.combat
        skill = self._service.find_skill(combat.selected_skill_id or "")
        if skill is None:
            combat.phase = "MENU"
            combat.reset_input()
            return []

        expected = skill.sequence[len(combat.input_buffer)]
        if direction != expected:
            combat.input_buffer = []
            combat.last_input_result = "FAIL"
            return [RuneFailedEvent(expected=expected, received=direction)]

        combat.input_buffer.append(direction)
        if len(combat.input_buffer) < len(skill.sequence):
            combat.last_input_result = "NEUTRAL"
            return [
                RuneAcceptedEvent(direction=direction, progress=len(combat.input_buffer), length=len(skill.sequence))
            ]

        combat.last_input_result = "SUCCESS"
        combat.phase = "WAITING"
        enemy = state.active_enemy
        assert enemy is not None
        return [
            RuneCompletedEvent(skill_id=skill.id, skill_name=skill.name),
            SkillExecutionRequestedEvent(
                combat_session_id=combat.session_id,
                enemy_id=enemy.id,
                skill_id=skill.id,
            ),
        ]

    def _select_skill(self, state: GameState, skill_id: str) -> List[GameEvent]:
        skill = self._service.find_skill(skill_id)
        if skill is None:
            return [ActionRejectedEvent(reason="unknown_skill", message="That routine is not installed.")]
        if state.stats.mp < skill.mp_cost:
            return [ActionRejectedEvent(reason="insufficient_mp", message="Insufficient Ether (MP)!")]
        state.combat.phase = "INPUT"
        state.combat.selected_skill_id = skill.id
        state.combat.input_buffer = []
        state.combat.last_input_result = "NEUTRAL"
        return [SkillSelectedEvent(skill_id=skill.id, skill_name=skill.name, length=len(skill.sequence))]

    @staticmethod
    def _accepts_input(state: GameState) -> bool:
        if not state.in_combat or state.is_game_over or state.is_transitioning:
            return False
        return state.combat.phase != "WAITING"
