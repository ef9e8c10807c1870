from __future__ import annotations

import copy
import json
from pathlib import Path

from ethershift.data.paths import get_definitions_path
from ethershift.domain.state import GameSession, Position
from ethershift.services.combat_service import CombatService, CombatStartedEvent
from ethershift.services.dialogue_service import DialogueService, DialogueStartedEvent
from ethershift.services.interaction_service import (
    InteractionService,
    ItemAcquiredEvent,
    NothingHereEvent,
    NpcSpokeEvent,
    ObscuredEvent,
)
from ethershift.services.movement_service import MovementService
from ethershift.services.transition_service import TransitionService, TransitionStartedEvent
from ethershift.services.world_service import WorldService
from tests.helpers.sessions import Repos, build_repos, build_session, place_player, write_definitions


def _build_interaction() -> tuple[InteractionService, GameSession, Repos]:
    repos = build_repos()
    world_service = WorldService(repos.zones)
    service = InteractionService(
        DialogueService(repos.dialogue),
        CombatService(repos.skills),
        TransitionService(world_service),
    )
    return service, build_session(repos=repos), repos


def _enter_sector_02(session: GameSession, repos: Repos, x: int, y: int, facing) -> None:
    zone, world = WorldService(repos.zones).build_world("sector_02", session.state.interacted_ids, Position(x, y))
    session.world = world
    session.state.zone_id = zone.id
    session.state.zone_name = zone.name
    place_player(session, x, y, facing)


def test_empty_target_logs_nothing_interesting() -> None:
    service, session, _repos = _build_interaction()

    assert service.interact(session) == [NothingHereEvent()]


def test_hidden_cache_is_obscured_without_shift() -> None:
    service, session, _repos = _build_interaction()
    place_player(session, 9, 1, "RIGHT")
    before = copy.deepcopy(session)

    assert service.interact(session) == [ObscuredEvent()]
    assert session == before


def test_hidden_cache_is_collected_in_shift() -> None:
    service, session, _repos = _build_interaction()
    place_player(session, 9, 1, "RIGHT")
    MovementService().toggle_shift(session)

    events = service.interact(session)

    assert events == [ItemAcquiredEvent(interactable_id="chest_01", item_id="item_shard_01", item_name="Ether Shard")]
    assert [item.id for item in session.state.inventory] == ["item_shard_01"]
    assert session.state.interacted_ids == ["chest_01"]
    assert session.world.tile_at(10, 1).interactable is None
    assert service.interact(session) == [NothingHereEvent()]


def test_npc_with_dialogue_opens_the_tree() -> None:
    service, session, _repos = _build_interaction()
    place_player(session, 4, 2, "RIGHT")

    events = service.interact(session)

    assert isinstance(events[0], DialogueStartedEvent)
    assert events[0].node_id == "greeting"
    assert session.state.in_dialogue
    assert session.state.dialogue is not None and session.state.dialogue.tree_id == "sage_echo"


def test_npc_without_dialogue_speaks_a_single_line() -> None:
    service, session, repos = _build_interaction()
    _enter_sector_02(session, repos, 9, 8, "UP")

    events = service.interact(session)

    assert events == [
        NpcSpokeEvent(
            npc_id="npc_clerk",
            npc_name="Fragmented Clerk",
            line="Index corrupted... please hold... please hold...",
        )
    ]
    assert not session.state.in_dialogue


def test_enemy_engages_combat() -> None:
    service, session, _repos = _build_interaction()
    place_player(session, 7, 5, "RIGHT")

    events = service.interact(session)

    assert isinstance(events[0], CombatStartedEvent)
    assert session.state.in_combat
    assert session.state.combat.phase == "MENU"
    assert session.state.active_enemy is not None
    assert session.state.active_enemy.id == "combat::enemy_glitch_01"
    assert session.state.active_enemy.hp == 50


def test_facing_a_gate_starts_a_transition() -> None:
    service, session, _repos = _build_interaction()
    place_player(session, 10, 2, "RIGHT")

    events = service.interact(session)

    assert isinstance(events[0], TransitionStartedEvent)
    assert events[0].target.target_zone_id == "sector_02"
    assert session.state.is_transitioning


def test_standing_on_a_gate_starts_its_transition() -> None:
    service, session, _repos = _build_interaction()
    place_player(session, 11, 2, "UP")

    events = service.interact(session)

    assert isinstance(events[0], TransitionStartedEvent)
    assert events[0].transition_id == 1


def test_interact_is_ignored_while_busy() -> None:
    service, session, _repos = _build_interaction()
    place_player(session, 7, 5, "RIGHT")
    session.state.in_dialogue = True
    before = copy.deepcopy(session)

    assert service.interact(session) == []
    assert session == before


def test_hidden_gate_underfoot_needs_shift(tmp_path: Path) -> None:
    zones = json.loads((get_definitions_path() / "zones.json").read_text(encoding="utf-8"))
    zones["zones"]["sector_01"]["entities"][3]["hidden"] = True
    repos = build_repos(write_definitions(tmp_path, zones=zones))
    service = InteractionService(
        DialogueService(repos.dialogue),
        CombatService(repos.skills),
        TransitionService(WorldService(repos.zones)),
    )
    session = build_session(repos=repos)
    place_player(session, 11, 2, "UP")

    assert service.interact(session) == [NothingHereEvent()]
    assert not session.state.is_transitioning

    MovementService().toggle_shift(session)
    events = service.interact(session)

    assert isinstance(events[0], TransitionStartedEvent)
    assert session.state.is_transitioning
