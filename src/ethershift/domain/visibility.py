"""Fog-of-war reveal calculation."""
from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable, List

from ethershift.domain.rules import FOG_RADIUS
from ethershift.domain.world import Tile


def reveal_around(tiles: Iterable[Tile], center_x: int, center_y: int, radius: float = FOG_RADIUS) -> List[Tile]:
    """Reveal every tile within Euclidean `radius` of the center. Revealed tiles never revert."""
    result: List[Tile] = []
    for tile in tiles:
        if tile.is_revealed:
            result.append(tile)
            continue
        distance = math.hypot(tile.x - center_x, tile.y - center_y)
        if distance <= radius:
            result.append(replace(tile, is_revealed=True))
        else:
            result.append(tile)
    return result
