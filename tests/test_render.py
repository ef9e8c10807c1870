from __future__ import annotations

from ethershift.presentation.cli.render import render_grid, render_inventory, render_log, tile_glyph
from ethershift.services.inventory_service import InventoryEntryView
from tests.helpers.sessions import build_session, place_player


def test_grid_hides_fog_and_draws_the_player() -> None:
    session = build_session()

    rows = render_grid(session.state, session.world)

    assert len(rows) == 10
    assert all(len(row) == 12 for row in rows)
    assert rows[5][2] == "v"
    assert rows[0] == " " * 12
    assert rows[5][0] == "#"


def test_hidden_interactables_only_show_in_shift() -> None:
    session = build_session()
    place_player(session, 9, 1, "RIGHT")
    cache_tile = session.world.tile_at(10, 1)

    assert tile_glyph(cache_tile, shift_active=False) == "."
    assert tile_glyph(cache_tile, shift_active=True) == "$"


def test_log_is_rendered_newest_first_with_limit() -> None:
    session = build_session()

    lines = render_log(session.state.log, limit=1)

    assert len(lines) == 1
    assert lines[0].startswith("[12:00:00] SYSTEM")


def test_empty_inventory_message() -> None:
    assert render_inventory([]) == ["Inventory is empty."]
    entry = InventoryEntryView(item_id="item_stim_01", name="Bio-Stim Pack", kind="CONSUMABLE", quantity=2)
    rows = render_inventory([entry])
    assert rows == ["- Bio-Stim Pack x2 (CONSUMABLE) [item_stim_01]"]
