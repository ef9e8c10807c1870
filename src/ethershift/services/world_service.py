"""Zone loading and world construction."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ethershift.core.types import Direction
from ethershift.data.repositories import ZonesRepository
from ethershift.domain.defs import ZoneDef
from ethershift.domain.state import Position
from ethershift.domain.visibility import reveal_around
from ethershift.domain.world import Tile, WorldState, apply_history, build_zone_tiles

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Arrival:
    """Resolved destination after zone fallback has been applied."""

    zone: ZoneDef
    position: Position
    facing: Direction


class WorldService:
    """Builds World State for a zone from static definitions and interaction history."""

    def __init__(self, zones_repo: ZonesRepository) -> None:
        self._zones_repo = zones_repo

    def load_zone(self, zone_id: str) -> Tuple[ZoneDef, List[Tile]]:
        """Return fresh tiles for the zone, falling back to the default zone on a miss."""
        try:
            zone_def = self._zones_repo.get(zone_id)
        except KeyError:
            zone_def = self._zones_repo.get_default()
            logger.warning("Unknown zone '%s'; loading default zone '%s'", zone_id, zone_def.id)
        return zone_def, build_zone_tiles(zone_def)

    def resolve_arrival(self, zone_id: str, x: int, y: int, facing: Direction) -> Arrival:
        """Pick the zone and spot a traveller lands on, keeping them inside the grid."""
        try:
            zone_def = self._zones_repo.get(zone_id)
        except KeyError:
            zone_def = self._zones_repo.get_default()
            start = self._zones_repo.get_start()
            if start.zone_id == zone_def.id:
                return Arrival(zone=zone_def, position=Position(start.x, start.y), facing=start.facing)
        clamped = Position(min(max(x, 0), zone_def.width - 1), min(max(y, 0), zone_def.height - 1))
        return Arrival(zone=zone_def, position=clamped, facing=facing)

    def build_world(self, zone_id: str, interacted_ids: Iterable[str], center: Position) -> Tuple[ZoneDef, WorldState]:
        """Load a zone, prune cleared interactables and reveal fog around `center`."""
        zone_def, tiles = self.load_zone(zone_id)
        tiles = apply_history(tiles, interacted_ids)
        tiles = reveal_around(tiles, center.x, center.y)
        logger.info("Loaded zone '%s' (%dx%d)", zone_def.id, zone_def.width, zone_def.height)
        return zone_def, WorldState(zone_id=zone_def.id, width=zone_def.width, height=zone_def.height, tiles=tiles)
