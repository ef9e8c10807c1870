from __future__ import annotations

import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ethershift.core.types import Direction
from ethershift.data.paths import get_definitions_path
from ethershift.data.repositories import (
    DialogueRepository,
    ItemsRepository,
    SkillsRepository,
    ZonesRepository,
)
from ethershift.data.save_store import InMemoryStore, SaveStore
from ethershift.domain.state import GameSession, Position
from ethershift.domain.visibility import reveal_around
from ethershift.services.engine import GameEngine
from ethershift.services.factories import create_new_session
from ethershift.services.world_service import WorldService

FIXED_TIMESTAMP = "12:00:00"

UP = (0, -1)
DOWN = (0, 1)
LEFT = (-1, 0)
RIGHT = (1, 0)

# From the sector_01 start (2,5) to (7,5) facing the Glitch Sentinel at (8,5).
WALK_TO_SENTINEL: List[Tuple[int, int]] = [UP] * 3 + [RIGHT] * 4 + [DOWN] * 3 + [RIGHT]
# From the start to (10,2), one step west of the sector_01 gate.
WALK_TO_GATE_APPROACH: List[Tuple[int, int]] = [UP] * 3 + [RIGHT] * 8
# From the start to (4,2) facing the sage at (5,2).
WALK_TO_SAGE: List[Tuple[int, int]] = [UP] * 3 + [RIGHT] * 2

_DEFINITION_FILES = ("items.json", "skills.json", "dialogue.json", "zones.json")


def fixed_clock() -> str:
    return FIXED_TIMESTAMP


@dataclass
class Repos:
    items: ItemsRepository
    skills: SkillsRepository
    dialogue: DialogueRepository
    zones: ZonesRepository


def build_repos(base_path: Path | None = None) -> Repos:
    items = ItemsRepository(base_path=base_path)
    dialogue = DialogueRepository(base_path=base_path)
    return Repos(
        items=items,
        skills=SkillsRepository(base_path=base_path),
        dialogue=dialogue,
        zones=ZonesRepository(items, dialogue, base_path=base_path),
    )


def build_session(seed: int = 7, repos: Repos | None = None) -> GameSession:
    repos = repos or build_repos()
    return create_new_session(
        seed,
        zones_repo=repos.zones,
        world_service=WorldService(repos.zones),
        timestamp=FIXED_TIMESTAMP,
    )


def build_engine(
    seed: int = 7,
    store: SaveStore | None = None,
    definitions_path: Path | None = None,
) -> GameEngine:
    return GameEngine.create(
        seed=seed,
        store=store if store is not None else InMemoryStore(),
        definitions_path=definitions_path,
        clock=fixed_clock,
    )


def place_player(session: GameSession, x: int, y: int, facing: Direction) -> None:
    """Teleport the player for service-level tests, revealing fog as a move would."""
    session.state.position = Position(x, y)
    session.state.facing = facing
    session.world.replace_tiles(reveal_around(session.world.tiles, x, y))


def walk(engine: GameEngine, steps: List[Tuple[int, int]]) -> bool:
    """Apply each step in order; False as soon as one is rejected."""
    for dx, dy in steps:
        if not engine.move(dx, dy):
            return False
    return True


def write_definitions(base: Path, **overrides: Dict[str, Any]) -> Path:
    """Copy the packaged definitions into `base`, replacing any file named by keyword (e.g. skills=...)."""
    base.mkdir(parents=True, exist_ok=True)
    source = get_definitions_path()
    for filename in _DEFINITION_FILES:
        key = filename.removesuffix(".json")
        if key in overrides:
            (base / filename).write_text(json.dumps(overrides[key], indent=2), encoding="utf-8")
        else:
            shutil.copyfile(source / filename, base / filename)
    return base
