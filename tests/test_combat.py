from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from ethershift.data.paths import get_definitions_path
from ethershift.domain.defs import EnemyInteractable
from ethershift.domain.state import GameSession, Position
from ethershift.services.combat_service import (
    CombatEndedEvent,
    CombatService,
    EnemyAttackedEvent,
    EnemyDefeatedEvent,
    EnemyTurnRequestedEvent,
    LevelUpEvent,
    LootAcquiredEvent,
    PlayerDefeatedEvent,
    SkillExecutionRequestedEvent,
    SkillFizzledEvent,
)
from ethershift.services.controllers import CombatAction, CombatController
from ethershift.services.controllers.combat_controller import RuneCompletedEvent, RuneFailedEvent
from ethershift.services.events import ActionRejectedEvent
from ethershift.services.world_service import WorldService
from tests.helpers.sessions import Repos, build_repos, build_session, write_definitions


def _build_combat(
    seed: int = 7, repos: Repos | None = None
) -> tuple[CombatController, CombatService, GameSession]:
    repos = repos or build_repos()
    service = CombatService(repos.skills)
    session = build_session(seed=seed, repos=repos)
    sentinel = session.world.tile_at(8, 5).interactable
    assert isinstance(sentinel, EnemyInteractable)
    service.engage(session, sentinel)
    return CombatController(service), service, session


def _enemy_turn(service: CombatService, session: GameSession, request: EnemyTurnRequestedEvent):
    return service.run_enemy_turn(session, request.combat_session_id, request.enemy_id)


def _repos_with_triple_rune(tmp_path: Path) -> Repos:
    skills = json.loads((get_definitions_path() / "skills.json").read_text(encoding="utf-8"))
    skills["skill_triple"] = {
        "name": "Triple Tap",
        "description": "Test rune.",
        "mp_cost": 5,
        "damage_scale": 1.5,
        "effect": "DMG",
        "sequence": ["UP", "DOWN", "UP"],
    }
    return build_repos(write_definitions(tmp_path, skills=skills))


def test_engage_creates_a_fresh_combat_session() -> None:
    _controller, service, session = _build_combat()
    first_session_id = session.state.combat.session_id

    service.flee(session)
    service.engage(session, session.world.tile_at(8, 5).interactable)

    assert session.state.combat.session_id == first_session_id + 1
    assert session.state.combat.phase == "MENU"
    assert session.state.combat.input_buffer == []


def test_wrong_rune_resets_buffer_and_stays_in_input(tmp_path: Path) -> None:
    controller, _service, session = _build_combat(repos=_repos_with_triple_rune(tmp_path))
    controller.apply_action(session, CombatAction("OPEN_SKILLS"))
    controller.apply_action(session, CombatAction("SELECT_SKILL", skill_id="skill_triple"))

    controller.input_rune(session, "UP")
    controller.input_rune(session, "DOWN")
    assert session.state.combat.input_buffer == ["UP", "DOWN"]
    assert session.state.combat.last_input_result == "NEUTRAL"

    events = controller.input_rune(session, "LEFT")

    assert events == [RuneFailedEvent(expected="UP", received="LEFT")]
    assert session.state.combat.input_buffer == []
    assert session.state.combat.last_input_result == "FAIL"
    assert session.state.combat.phase == "INPUT"


def test_completed_rune_requests_skill_execution(tmp_path: Path) -> None:
    controller, service, session = _build_combat(repos=_repos_with_triple_rune(tmp_path))
    controller.apply_action(session, CombatAction("OPEN_SKILLS"))
    controller.apply_action(session, CombatAction("SELECT_SKILL", skill_id="skill_triple"))

    events = []
    for direction in ("UP", "DOWN", "UP"):
        events = controller.input_rune(session, direction)

    assert isinstance(events[0], RuneCompletedEvent)
    request = events[1]
    assert isinstance(request, SkillExecutionRequestedEvent)
    assert session.state.combat.last_input_result == "SUCCESS"
    assert session.state.combat.phase == "WAITING"
    assert controller.input_rune(session, "UP") == []

    resolved = service.execute_skill(session, request.combat_session_id, request.enemy_id, request.skill_id)

    assert session.state.active_enemy.hp == 50 - 15
    assert session.state.stats.mp == 45
    assert isinstance(resolved[-1], EnemyTurnRequestedEvent)
    assert session.state.combat.phase == "WAITING"


def test_select_skill_requires_enough_mp() -> None:
    controller, _service, session = _build_combat()
    controller.apply_action(session, CombatAction("OPEN_SKILLS"))
    session.state.stats.mp = 5

    events = controller.apply_action(session, CombatAction("SELECT_SKILL", skill_id="skill_code_breaker"))

    assert events == [ActionRejectedEvent(reason="insufficient_mp", message="Insufficient Ether (MP)!")]
    assert session.state.combat.phase == "SKILL_SELECT"
    assert controller.get_available_actions(session.state)["skills"] == []


def test_skill_fizzles_when_mp_drops_before_execution() -> None:
    controller, service, session = _build_combat()
    controller.apply_action(session, CombatAction("OPEN_SKILLS"))
    controller.apply_action(session, CombatAction("SELECT_SKILL", skill_id="skill_code_breaker"))
    for direction in ("UP", "DOWN", "UP"):
        controller.input_rune(session, direction)
    request = controller.input_rune(session, "RIGHT")[-1]
    session.state.stats.mp = 0

    events = service.execute_skill(session, request.combat_session_id, request.enemy_id, request.skill_id)

    assert events == [SkillFizzledEvent(skill_id="skill_code_breaker", reason="insufficient_mp")]
    assert session.state.combat.phase == "MENU"
    assert session.state.active_enemy.hp == 50


def test_cancel_skill_returns_to_menu() -> None:
    controller, _service, session = _build_combat()
    controller.apply_action(session, CombatAction("OPEN_SKILLS"))
    controller.apply_action(session, CombatAction("SELECT_SKILL", skill_id="skill_patch"))
    controller.input_rune(session, "LEFT")

    controller.apply_action(session, CombatAction("CANCEL_SKILL"))

    assert session.state.combat.phase == "MENU"
    assert session.state.combat.selected_skill_id is None
    assert session.state.combat.input_buffer == []


def test_heal_and_buff_skills() -> None:
    controller, service, session = _build_combat()
    csid = session.state.combat.session_id
    enemy_id = session.state.active_enemy.id
    session.state.stats.hp = 60

    session.state.combat.phase = "WAITING"
    session.state.combat.selected_skill_id = "skill_patch"
    service.execute_skill(session, csid, enemy_id, "skill_patch")
    assert session.state.stats.hp == 90
    assert session.state.active_enemy.hp == 50

    session.state.combat.phase = "WAITING"
    session.state.combat.selected_skill_id = "skill_overclock"
    service.execute_skill(session, csid, enemy_id, "skill_overclock")
    assert session.state.combat.attack_bonus == 4
    assert session.state.stats.mp == 50 - 15 - 12

    service.flee(session)
    assert session.state.combat.attack_bonus == 0


@pytest.mark.parametrize("seed", [1, 7, 42, 1234, 9999])
def test_basic_attacks_kill_the_sentinel_in_five_to_seven_turns(seed: int) -> None:
    controller, service, session = _build_combat(seed=seed)
    turns = 0
    while session.state.in_combat:
        turns += 1
        events = controller.apply_action(session, CombatAction("ATTACK"))
        if isinstance(events[-1], EnemyTurnRequestedEvent):
            _enemy_turn(service, session, events[-1])

    assert 5 <= turns <= 7
    assert session.state.stats.xp == 25
    assert session.state.stats.credits == 42
    assert [item.id for item in session.state.inventory] == ["item_stim_01"]
    assert session.state.interacted_ids == ["enemy_glitch_01"]
    assert session.world.tile_at(8, 5).interactable is None
    assert session.state.active_enemy is None
    assert session.state.combat.phase == "MENU"


def test_victory_rewards_apply_once_and_enemy_stays_gone_after_reload() -> None:
    controller, service, session = _build_combat()
    session.state.active_enemy.hp = 1

    events = controller.apply_action(session, CombatAction("ATTACK"))

    assert sum(isinstance(event, EnemyDefeatedEvent) for event in events) == 1
    assert sum(isinstance(event, LootAcquiredEvent) for event in events) == 1
    assert events[-1] == CombatEndedEvent(outcome="victory")
    assert controller.apply_action(session, CombatAction("ATTACK")) == []
    assert session.state.stats.xp == 25

    repos = build_repos()
    _zone, reloaded = WorldService(repos.zones).build_world(
        "sector_01", session.state.interacted_ids, Position(2, 5)
    )
    assert reloaded.tile_at(8, 5).interactable is None


def test_victory_can_level_up_and_restores_resources() -> None:
    controller, _service, session = _build_combat()
    stats = session.state.stats
    stats.xp = 90
    stats.hp = 12
    stats.mp = 3
    session.state.active_enemy.hp = 1

    events = controller.apply_action(session, CombatAction("ATTACK"))

    level_ups = [event for event in events if isinstance(event, LevelUpEvent)]
    assert len(level_ups) == 1
    assert stats.level == 2
    assert (stats.max_hp, stats.max_mp, stats.attack, stats.defense) == (120, 60, 13, 7)
    assert (stats.hp, stats.mp) == (120, 60)


def test_enemy_damage_uses_half_defense_with_minimum_one() -> None:
    controller, service, session = _build_combat()
    request = controller.apply_action(session, CombatAction("ATTACK"))[-1]

    events = _enemy_turn(service, session, request)

    assert events == [EnemyAttackedEvent(enemy_name="Glitch Sentinel", damage=6, player_hp=94)]
    assert session.state.combat.phase == "MENU"

    session.state.stats.defense = 40
    request = controller.apply_action(session, CombatAction("ATTACK"))[-1]
    assert _enemy_turn(service, session, request)[0].damage == 1


def test_hp_is_clamped_and_game_over_sets_exactly_at_zero() -> None:
    controller, service, session = _build_combat()
    session.state.stats.hp = 7
    request = controller.apply_action(session, CombatAction("ATTACK"))[-1]
    _enemy_turn(service, session, request)
    assert session.state.stats.hp == 1
    assert not session.state.is_game_over

    request = controller.apply_action(session, CombatAction("ATTACK"))[-1]
    events = _enemy_turn(service, session, request)

    assert session.state.stats.hp == 0
    assert session.state.is_game_over
    assert not session.state.in_combat
    assert isinstance(events[-1], PlayerDefeatedEvent)
    assert controller.apply_action(session, CombatAction("ATTACK")) == []


def test_stale_enemy_turn_after_flee_is_a_no_op() -> None:
    controller, service, session = _build_combat()
    request = controller.apply_action(session, CombatAction("ATTACK"))[-1]
    assert isinstance(request, EnemyTurnRequestedEvent)

    service.flee(session)
    before = copy.deepcopy(session)

    assert _enemy_turn(service, session, request) == []
    assert session == before


def test_stale_enemy_turn_from_previous_engagement_is_ignored() -> None:
    controller, service, session = _build_combat()
    request = controller.apply_action(session, CombatAction("ATTACK"))[-1]
    service.flee(session)
    service.engage(session, session.world.tile_at(8, 5).interactable)
    hp_before = session.state.stats.hp

    assert _enemy_turn(service, session, request) == []
    assert session.state.stats.hp == hp_before
    assert session.state.combat.phase == "MENU"


def test_waiting_phase_rejects_every_combat_action() -> None:
    controller, _service, session = _build_combat()
    controller.apply_action(session, CombatAction("ATTACK"))
    assert session.state.combat.phase == "WAITING"
    before = copy.deepcopy(session)

    for action_type in ("ATTACK", "FLEE", "OPEN_SKILLS", "CANCEL_SKILL"):
        assert controller.apply_action(session, CombatAction(action_type)) == []
    assert controller.input_rune(session, "UP") == []
    assert controller.get_available_actions(session.state)["actions"] == []
    assert session == before


def test_available_actions_follow_the_phase() -> None:
    controller, _service, session = _build_combat()

    assert controller.get_available_actions(session.state)["actions"] == ["ATTACK", "OPEN_SKILLS", "FLEE"]
    controller.apply_action(session, CombatAction("OPEN_SKILLS"))
    available = controller.get_available_actions(session.state)
    assert [skill.id for skill in available["skills"]] == ["skill_code_breaker", "skill_overclock", "skill_patch"]
    controller.apply_action(session, CombatAction("SELECT_SKILL", skill_id="skill_overclock"))
    assert controller.get_available_actions(session.state)["accepts_runes"] is True
