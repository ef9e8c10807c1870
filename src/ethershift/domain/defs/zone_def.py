"""Zone layout definitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from ethershift.core.types import Direction, TileType

from .interactable_def import Interactable


@dataclass(frozen=True, slots=True)
class ZoneDef:
    """Static layout for a zone: a row-major grid of tile types plus entity placements."""

    id: str
    name: str
    width: int
    height: int
    rows: Tuple[Tuple[TileType, ...], ...]
    entities: Dict[Tuple[int, int], Interactable] = field(default_factory=dict)

    def tile_type_at(self, x: int, y: int) -> TileType:
        return self.rows[y][x]


@dataclass(frozen=True, slots=True)
class StartDef:
    """Where a new game begins."""

    zone_id: str
    x: int
    y: int
    facing: Direction
