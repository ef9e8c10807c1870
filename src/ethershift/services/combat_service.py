"""Combat service resolving attacks, skills and enemy counter-attacks."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Literal

from ethershift.data.repositories import SkillsRepository
from ethershift.domain.defs import EnemyInteractable, SkillDef
from ethershift.domain.leveling import apply_level_ups
from ethershift.domain.rules import ATTACK_VARIANCE_MAX, ATTACK_VARIANCE_MIN
from ethershift.domain.state import ActiveEnemy, CombatState, GameSession, GameState
from ethershift.services.events import GameEvent

logger = logging.getLogger(__name__)

CombatOutcome = Literal["victory", "fled", "defeat"]


@dataclass(slots=True)
class CombatView:
    """Presentation view for the current engagement."""

    enemy_name: str
    enemy_hp: int
    enemy_max_hp: int
    phase: str
    selected_skill_id: str | None
    input_buffer: List[str]
    last_input_result: str
    attack_bonus: int


@dataclass(slots=True)
class CombatStartedEvent(GameEvent):
    combat_session_id: int
    enemy_id: str
    enemy_name: str


@dataclass(slots=True)
class PlayerAttackedEvent(GameEvent):
    enemy_name: str
    damage: int
    enemy_hp: int


@dataclass(slots=True)
class SkillCastEvent(GameEvent):
    skill_id: str
    skill_name: str
    mp_spent: int


@dataclass(slots=True)
class SkillDamageEvent(GameEvent):
    skill_name: str
    enemy_name: str
    damage: int
    enemy_hp: int


@dataclass(slots=True)
class SkillHealedEvent(GameEvent):
    skill_name: str
    amount: int
    player_hp: int


@dataclass(slots=True)
class SkillBuffedEvent(GameEvent):
    skill_name: str
    amount: int
    attack_bonus: int


@dataclass(slots=True)
class SkillFizzledEvent(GameEvent):
    skill_id: str
    reason: str


@dataclass(slots=True)
class EnemyAttackedEvent(GameEvent):
    enemy_name: str
    damage: int
    player_hp: int


@dataclass(slots=True)
class EnemyDefeatedEvent(GameEvent):
    enemy_id: str
    enemy_name: str
    xp: int
    credits: int


@dataclass(slots=True)
class LootAcquiredEvent(GameEvent):
    item_id: str
    item_name: str


@dataclass(slots=True)
class LevelUpEvent(GameEvent):
    level: int
    max_hp: int
    max_mp: int
    attack: int
    defense: int


@dataclass(slots=True)
class CombatEndedEvent(GameEvent):
    outcome: CombatOutcome


@dataclass(slots=True)
class PlayerDefeatedEvent(GameEvent):
    enemy_name: str


@dataclass(slots=True)
class EnemyTurnRequestedEvent(GameEvent):
    """Ask the caller to run the enemy's counter-attack after the enemy-turn delay."""

    combat_session_id: int
    enemy_id: str


@dataclass(slots=True)
class SkillExecutionRequestedEvent(GameEvent):
    """Ask the caller to resolve a rune-confirmed skill after the execution delay."""

    combat_session_id: int
    enemy_id: str
    skill_id: str


class CombatService:
    """Turn-based single-enemy combat.

    Player actions that leave the enemy standing put the engagement into
    WAITING and return an `EnemyTurnRequestedEvent`; the caller decides when
    the counter-attack fires. Continuations re-validate the combat session id
    and enemy id they were issued for and become no-ops when either changed.
    """

    def __init__(self, skills_repo: SkillsRepository) -> None:
        self._skills_repo = skills_repo

    # -----------------------
    # Engagement Lifecycle
    # -----------------------
    def engage(self, session: GameSession, enemy: EnemyInteractable) -> List[GameEvent]:
        state = session.state
        state.combat_counter += 1
        state.combat = CombatState(session_id=state.combat_counter)
        state.active_enemy = ActiveEnemy(
            id=f"combat::{enemy.id}",
            interactable_id=enemy.id,
            name=enemy.name,
            hp=enemy.stats.hp,
            max_hp=enemy.stats.max_hp,
            attack=enemy.stats.attack,
            defense=enemy.stats.defense,
            xp_reward=enemy.stats.xp_reward,
            credits_reward=enemy.stats.credits_reward,
            loot=enemy.loot,
        )
        state.in_combat = True
        return [
            CombatStartedEvent(
                combat_session_id=state.combat.session_id,
                enemy_id=state.active_enemy.id,
                enemy_name=enemy.name,
            )
        ]

    def flee(self, session: GameSession) -> List[GameEvent]:
        self._exit_combat(session.state)
        return [CombatEndedEvent(outcome="fled")]

    def get_combat_view(self, state: GameState) -> CombatView | None:
        enemy = state.active_enemy
        if not state.in_combat or enemy is None:
            return None
        combat = state.combat
        return CombatView(
            enemy_name=enemy.name,
            enemy_hp=enemy.hp,
            enemy_max_hp=enemy.max_hp,
            phase=combat.phase,
            selected_skill_id=combat.selected_skill_id,
            input_buffer=list(combat.input_buffer),
            last_input_result=combat.last_input_result,
            attack_bonus=combat.attack_bonus,
        )

    # -----------------------
    # Player Actions
    # -----------------------
    def basic_attack(self, session: GameSession) -> List[GameEvent]:
        state = session.state
        enemy = state.active_enemy
        if enemy is None:
            return []
        attack = state.stats.attack + state.combat.attack_bonus
        damage = math.floor(attack * state.rng.uniform(ATTACK_VARIANCE_MIN, ATTACK_VARIANCE_MAX))
        enemy.hp = max(0, enemy.hp - damage)
        events: List[GameEvent] = [PlayerAttackedEvent(enemy_name=enemy.name, damage=damage, enemy_hp=enemy.hp)]
        events.extend(self._finish_player_action(session))
        return events

    def find_skill(self, skill_id: str) -> SkillDef | None:
        try:
            return self._skills_repo.get(skill_id)
        except KeyError:
            return None

    def get_affordable_skills(self, state: GameState) -> List[SkillDef]:
        return [skill for skill in self._skills_repo.all() if skill.mp_cost <= state.stats.mp]

    def execute_skill(
        self, session: GameSession, combat_session_id: int, enemy_id: str, skill_id: str
    ) -> List[GameEvent]:
        """Resolve a skill whose rune sequence was completed. MP is re-checked here."""
        state = session.state
        if not self._is_current(state, combat_session_id, enemy_id):
            logger.debug("Skill '%s' continuation is stale; ignoring", skill_id)
            return []
        if state.combat.selected_skill_id != skill_id:
            logger.debug("Skill '%s' is no longer selected; ignoring", skill_id)
            return []
        try:
            skill = self._skills_repo.get(skill_id)
        except KeyError:
            logger.warning("Skill '%s' is not defined; returning to menu", skill_id)
            self._return_to_menu(state)
            return [SkillFizzledEvent(skill_id=skill_id, reason="unknown_skill")]
        if state.stats.mp < skill.mp_cost:
            self._return_to_menu(state)
            return [SkillFizzledEvent(skill_id=skill.id, reason="insufficient_mp")]

        state.stats.mp -= skill.mp_cost
        events: List[GameEvent] = [SkillCastEvent(skill_id=skill.id, skill_name=skill.name, mp_spent=skill.mp_cost)]
        enemy = state.active_enemy
        assert enemy is not None
        if skill.effect == "DMG":
            attack = state.stats.attack + state.combat.attack_bonus
            damage = math.floor(attack * skill.damage_scale)
            enemy.hp = max(0, enemy.hp - damage)
            events.append(
                SkillDamageEvent(skill_name=skill.name, enemy_name=enemy.name, damage=damage, enemy_hp=enemy.hp)
            )
        elif skill.effect == "HEAL":
            healed = min(state.stats.max_hp, state.stats.hp + skill.power) - state.stats.hp
            state.stats.hp += healed
            events.append(SkillHealedEvent(skill_name=skill.name, amount=healed, player_hp=state.stats.hp))
        elif skill.effect == "BUFF":
            state.combat.attack_bonus += skill.power
            events.append(
                SkillBuffedEvent(skill_name=skill.name, amount=skill.power, attack_bonus=state.combat.attack_bonus)
            )

        state.combat.reset_input()
        events.extend(self._finish_player_action(session))
        return events

    # -----------------------
    # Enemy Turn
    # -----------------------
    def request_enemy_turn(self, state: GameState) -> List[GameEvent]:
        """Lock input and ask for the counter-attack of the current enemy."""
        enemy = state.active_enemy
        if enemy is None:
            return []
        state.combat.phase = "WAITING"
        return [EnemyTurnRequestedEvent(combat_session_id=state.combat.session_id, enemy_id=enemy.id)]

    def run_enemy_turn(self, session: GameSession, combat_session_id: int, enemy_id: str) -> List[GameEvent]:
        state = session.state
        if not self._is_current(state, combat_session_id, enemy_id):
            logger.debug("Enemy turn for '%s' is stale; ignoring", enemy_id)
            return []
        enemy = state.active_enemy
        assert enemy is not None
        if not enemy.is_alive:
            return []

        damage = max(1, enemy.attack - state.stats.defense // 2)
        state.stats.hp = max(0, state.stats.hp - damage)
        events: List[GameEvent] = [EnemyAttackedEvent(enemy_name=enemy.name, damage=damage, player_hp=state.stats.hp)]
        if state.stats.hp == 0:
            self._exit_combat(state)
            state.is_game_over = True
            events.append(PlayerDefeatedEvent(enemy_name=enemy.name))
            return events

        self._return_to_menu(state)
        return events

    # -----------------------
    # Helpers
    # -----------------------
    def _finish_player_action(self, session: GameSession) -> List[GameEvent]:
        enemy = session.state.active_enemy
        assert enemy is not None
        if enemy.is_alive:
            return self.request_enemy_turn(session.state)
        return self._resolve_victory(session)

    def _resolve_victory(self, session: GameSession) -> List[GameEvent]:
        state = session.state
        enemy = state.active_enemy
        assert enemy is not None
        state.stats.xp += enemy.xp_reward
        state.stats.credits += enemy.credits_reward
        events: List[GameEvent] = [
            EnemyDefeatedEvent(
                enemy_id=enemy.id,
                enemy_name=enemy.name,
                xp=enemy.xp_reward,
                credits=enemy.credits_reward,
            )
        ]
        if enemy.loot is not None:
            state.inventory.append(enemy.loot)
            events.append(LootAcquiredEvent(item_id=enemy.loot.id, item_name=enemy.loot.name))

        session.world.clear_interactable(enemy.interactable_id)
        state.record_interaction(enemy.interactable_id)
        for result in apply_level_ups(state.stats):
            events.append(
                LevelUpEvent(
                    level=result.new_level,
                    max_hp=result.max_hp,
                    max_mp=result.max_mp,
                    attack=result.attack,
                    defense=result.defense,
                )
            )
        self._exit_combat(state)
        events.append(CombatEndedEvent(outcome="victory"))
        return events

    @staticmethod
    def _is_current(state: GameState, combat_session_id: int, enemy_id: str) -> bool:
        if not state.in_combat or state.is_game_over:
            return False
        if state.combat.session_id != combat_session_id:
            return False
        return state.active_enemy is not None and state.active_enemy.id == enemy_id

    @staticmethod
    def _return_to_menu(state: GameState) -> None:
        state.combat.phase = "MENU"
        state.combat.reset_input()

    @staticmethod
    def _exit_combat(state: GameState) -> None:
        state.in_combat = False
        state.active_enemy = None
        state.combat = CombatState()
