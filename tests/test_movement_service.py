from __future__ import annotations

import copy

import pytest

from ethershift.domain.state import Position
from ethershift.services.movement_service import (
    GateSteppedEvent,
    MovementService,
    PlayerMovedEvent,
    ShiftToggledEvent,
)
from tests.helpers.sessions import build_session, place_player


def test_three_moves_up_from_start() -> None:
    session = build_session()
    service = MovementService()
    assert session.state.position == Position(2, 5)
    assert session.state.facing == "DOWN"

    for _ in range(3):
        events = service.move(session, 0, -1)
        assert isinstance(events[0], PlayerMovedEvent)

    assert session.state.position == Position(2, 2)
    assert session.state.facing == "UP"
    for cx, cy in [(2, 5), (2, 4), (2, 3), (2, 2)]:
        for x, y in [(cx, cy), (cx + 2, cy), (cx - 1, cy - 2), (cx + 1, cy + 1)]:
            tile = session.world.tile_at(x, y)
            assert tile is not None and tile.is_revealed


def test_wall_blocks_without_shift_and_keeps_facing() -> None:
    session = build_session()
    service = MovementService()
    place_player(session, 2, 4, "UP")

    assert service.move(session, 1, 0) == []

    assert session.state.position == Position(2, 4)
    assert session.state.facing == "UP"


def test_shift_allows_walking_through_walls() -> None:
    session = build_session()
    service = MovementService()
    place_player(session, 2, 4, "UP")

    toggled = service.toggle_shift(session)
    assert toggled == [ShiftToggledEvent(active=True)]

    events = service.move(session, 1, 0)

    assert events == [PlayerMovedEvent(x=3, y=4, facing="RIGHT")]
    assert session.world.tile_at(3, 4).type == "WALL"


def test_water_is_impassable_even_in_shift() -> None:
    session = build_session()
    service = MovementService()
    place_player(session, 7, 7, "LEFT")
    service.toggle_shift(session)

    assert service.move(session, 1, 0) == []
    assert session.state.position == Position(7, 7)
    assert session.state.facing == "LEFT"


def test_grid_edge_blocks_movement() -> None:
    session = build_session()
    service = MovementService()
    place_player(session, 1, 1, "UP")
    service.toggle_shift(session)

    assert service.move(session, -1, 0)
    assert session.state.position == Position(0, 1)
    assert service.move(session, -1, 0) == []
    assert session.state.position == Position(0, 1)


def test_moves_rejected_while_busy_leave_session_untouched() -> None:
    session = build_session()
    service = MovementService()
    for flag in ("in_combat", "in_dialogue", "is_transitioning", "is_game_over"):
        setattr(session.state, flag, True)
        before = copy.deepcopy(session)

        assert service.move(session, 0, -1) == []
        assert service.toggle_shift(session) == []
        assert session == before

        setattr(session.state, flag, False)


def test_diagonal_or_long_steps_are_programming_errors() -> None:
    session = build_session()
    with pytest.raises(ValueError):
        MovementService().move(session, 1, 1)
    with pytest.raises(ValueError):
        MovementService().move(session, 0, 2)


def test_stepping_onto_a_visible_gate_requests_a_transition() -> None:
    session = build_session()
    service = MovementService()
    place_player(session, 10, 2, "RIGHT")

    events = service.move(session, 1, 0)

    assert events[-1] == GateSteppedEvent(gate_id="gate_s01_s02", zone_id="sector_01", x=11, y=2)
