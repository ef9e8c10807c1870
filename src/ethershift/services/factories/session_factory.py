"""Factory for fresh game sessions."""
from __future__ import annotations

from ethershift.core.rng import RNG
from ethershift.data.repositories import ZonesRepository
from ethershift.domain import rules
from ethershift.domain.state import GameSession, GameState, PlayerStats, Position, append_log
from ethershift.services.errors import FactoryError
from ethershift.services.world_service import WorldService


def create_starting_stats() -> PlayerStats:
    return PlayerStats(
        hp=rules.STARTING_HP,
        max_hp=rules.STARTING_HP,
        mp=rules.STARTING_MP,
        max_mp=rules.STARTING_MP,
        attack=rules.STARTING_ATTACK,
        defense=rules.STARTING_DEFENSE,
    )


def create_new_session(
    seed: int,
    *,
    zones_repo: ZonesRepository,
    world_service: WorldService,
    timestamp: str,
) -> GameSession:
    """Build a new-game session at the configured start with fog cleared around the player."""
    start = zones_repo.get_start()
    position = Position(start.x, start.y)
    zone_def, world = world_service.build_world(start.zone_id, (), position)
    start_tile = world.tile_at(position.x, position.y)
    if start_tile is None or start_tile.type in ("WALL", "WATER"):
        raise FactoryError(f"Start position ({start.x}, {start.y}) in zone '{zone_def.id}' is not walkable.")
    state = GameState(
        seed=seed,
        rng=RNG(seed),
        zone_id=zone_def.id,
        zone_name=zone_def.name,
        position=position,
        facing=start.facing,
        stats=create_starting_stats(),
    )
    append_log(state, rules.INITIAL_LOG_MESSAGE, "SYSTEM", timestamp)
    return GameSession(state=state, world=world)
