"""Tile grid model for the active zone."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Tuple

from ethershift.core.types import TileType
from ethershift.domain.defs import Interactable, ZoneDef


@dataclass(slots=True)
class Tile:
    """A single grid cell. Once revealed it stays revealed."""

    id: str
    x: int
    y: int
    type: TileType
    interactable: Interactable | None = None
    is_revealed: bool = False


def build_zone_tiles(zone_def: ZoneDef) -> List[Tile]:
    """Create fresh tiles for every cell of the zone, row-major, all unrevealed."""
    tiles: List[Tile] = []
    for y in range(zone_def.height):
        for x in range(zone_def.width):
            tiles.append(
                Tile(
                    id=f"tile_{x}_{y}",
                    x=x,
                    y=y,
                    type=zone_def.tile_type_at(x, y),
                    interactable=zone_def.entities.get((x, y)),
                )
            )
    return tiles


def apply_history(tiles: Iterable[Tile], interacted_ids: Iterable[str]) -> List[Tile]:
    """Strip interactables whose id appears in the interaction history."""
    cleared = set(interacted_ids)
    result: List[Tile] = []
    for tile in tiles:
        if tile.interactable is not None and tile.interactable.id in cleared:
            result.append(replace(tile, interactable=None))
        else:
            result.append(tile)
    return result


@dataclass
class WorldState:
    """Tiles of the active zone, indexed by position."""

    zone_id: str
    width: int
    height: int
    tiles: List[Tile]
    _index: Dict[Tuple[int, int], int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._reindex()

    def _reindex(self) -> None:
        self._index = {(tile.x, tile.y): idx for idx, tile in enumerate(self.tiles)}

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> Tile | None:
        idx = self._index.get((x, y))
        if idx is None:
            return None
        return self.tiles[idx]

    def replace_tiles(self, tiles: List[Tile]) -> None:
        self.tiles = tiles
        self._reindex()

    def find_interactable(self, interactable_id: str) -> Tile | None:
        for tile in self.tiles:
            if tile.interactable is not None and tile.interactable.id == interactable_id:
                return tile
        return None

    def clear_interactable(self, interactable_id: str) -> bool:
        """Remove the interactable with this id from its tile. Returns True if one was found."""
        tile = self.find_interactable(interactable_id)
        if tile is None:
            return False
        self.tiles[self._index[(tile.x, tile.y)]] = replace(tile, interactable=None)
        return True
