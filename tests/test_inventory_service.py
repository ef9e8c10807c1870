from __future__ import annotations

import copy

from ethershift.domain.state import GameSession
from ethershift.services.combat_service import CombatService, EnemyTurnRequestedEvent
from ethershift.services.events import ActionRejectedEvent
from ethershift.services.interaction_service import InteractionService
from ethershift.services.inventory_service import InventoryService, ItemConsumedEvent
from ethershift.services.dialogue_service import DialogueService
from ethershift.services.transition_service import TransitionService
from ethershift.services.world_service import WorldService
from tests.helpers.sessions import Repos, build_repos, build_session, place_player


def _build_inventory() -> tuple[InventoryService, CombatService, GameSession, Repos]:
    repos = build_repos()
    combat = CombatService(repos.skills)
    return InventoryService(combat), combat, build_session(repos=repos), repos


def _engage_sentinel(session: GameSession, repos: Repos, combat: CombatService) -> None:
    interaction = InteractionService(
        DialogueService(repos.dialogue),
        combat,
        TransitionService(WorldService(repos.zones)),
    )
    place_player(session, 7, 5, "RIGHT")
    interaction.interact(session)


def test_list_inventory_groups_duplicates() -> None:
    service, _combat, session, repos = _build_inventory()
    stim = repos.items.get("item_stim_01")
    shard = repos.items.get("item_shard_01")
    session.state.inventory = [stim, shard, stim]

    rows = service.list_inventory(session.state)

    assert [(row.item_id, row.quantity) for row in rows] == [("item_stim_01", 2), ("item_shard_01", 1)]


def test_consume_heals_and_removes_one_instance() -> None:
    service, _combat, session, repos = _build_inventory()
    stim = repos.items.get("item_stim_01")
    session.state.inventory = [stim, stim]
    session.state.stats.hp = 50

    events = service.consume(session, "item_stim_01")

    assert events == [
        ItemConsumedEvent(item_id="item_stim_01", item_name="Bio-Stim Pack", hp_restored=30, mp_restored=0)
    ]
    assert session.state.stats.hp == 80
    assert len(session.state.inventory) == 1


def test_consume_clamps_at_max_hp() -> None:
    service, _combat, session, repos = _build_inventory()
    session.state.inventory = [repos.items.get("item_stim_01")]
    session.state.stats.hp = 90

    events = service.consume(session, "item_stim_01")

    assert isinstance(events[0], ItemConsumedEvent)
    assert events[0].hp_restored == 10
    assert session.state.stats.hp == 100


def test_consume_rejections_leave_inventory_untouched() -> None:
    service, _combat, session, repos = _build_inventory()
    session.state.inventory = [repos.items.get("item_shard_01"), repos.items.get("item_stim_01")]
    before = copy.deepcopy(session)

    missing = service.consume(session, "item_ether_cell")
    artifact = service.consume(session, "item_shard_01")
    full_hp = service.consume(session, "item_stim_01")

    assert [event.reason for event in missing + artifact + full_hp if isinstance(event, ActionRejectedEvent)] == [
        "missing_item",
        "not_consumable",
        "no_effect",
    ]
    assert session == before


def test_consume_in_combat_spends_the_turn() -> None:
    service, combat, session, repos = _build_inventory()
    _engage_sentinel(session, repos, combat)
    session.state.inventory = [repos.items.get("item_stim_01")]
    session.state.stats.hp = 40
    csid = session.state.combat.session_id

    events = service.consume(session, "item_stim_01")

    assert isinstance(events[0], ItemConsumedEvent)
    assert events[-1] == EnemyTurnRequestedEvent(
        combat_session_id=csid, enemy_id="combat::enemy_glitch_01"
    )
    assert session.state.combat.phase == "WAITING"


def test_consume_is_locked_while_waiting_or_busy() -> None:
    service, combat, session, repos = _build_inventory()
    _engage_sentinel(session, repos, combat)
    session.state.inventory = [repos.items.get("item_stim_01")]
    session.state.stats.hp = 40
    session.state.combat.phase = "WAITING"
    before = copy.deepcopy(session)

    assert service.consume(session, "item_stim_01") == []
    assert session == before

    session.state.combat.phase = "MENU"
    session.state.is_game_over = True
    assert service.consume(session, "item_stim_01") == []
    assert session.state.stats.hp == 40
