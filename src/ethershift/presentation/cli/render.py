"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
import textwrap
from typing import Dict, Iterable, List

from ethershift.domain.state import GameState, LogEntry
from ethershift.domain.world import Tile, WorldState
from ethershift.services.combat_service import CombatView
from ethershift.services.dialogue_service import DialogueNodeView
from ethershift.services.inventory_service import InventoryEntryView

FOG_GLYPH = " "
TILE_GLYPHS: Dict[str, str] = {
    "EMPTY": ".",
    "WALL": "#",
    "WATER": "~",
    "DOOR": "+",
    "VOID": ":",
}
INTERACTABLE_GLYPHS: Dict[str, str] = {
    "NPC": "N",
    "ITEM": "$",
    "ENEMY": "E",
    "ZONE_GATE": ">",
}
PLAYER_GLYPHS: Dict[str, str] = {"UP": "^", "DOWN": "v", "LEFT": "<", "RIGHT": ">"}
ARROW_GLYPHS: Dict[str, str] = {"UP": "↑", "DOWN": "↓", "LEFT": "←", "RIGHT": "→"}


def debug_enabled() -> bool:
    """Return True only when ETHERSHIFT_DEBUG is explicitly set to '1'."""
    return os.getenv("ETHERSHIFT_DEBUG") == "1"


def tile_glyph(tile: Tile, *, shift_active: bool) -> str:
    if not tile.is_revealed:
        return FOG_GLYPH
    interactable = tile.interactable
    if interactable is not None and (shift_active or not interactable.is_hidden):
        return INTERACTABLE_GLYPHS[interactable.kind]
    return TILE_GLYPHS[tile.type]


def render_grid(state: GameState, world: WorldState) -> List[str]:
    """Return one string per grid row with the player drawn at their position."""
    rows: List[List[str]] = [[FOG_GLYPH] * world.width for _ in range(world.height)]
    for tile in world.tiles:
        rows[tile.y][tile.x] = tile_glyph(tile, shift_active=state.is_shift_active)
    rows[state.position.y][state.position.x] = "@" if state.is_game_over else PLAYER_GLYPHS[state.facing]
    return ["".join(row) for row in rows]


def render_status(state: GameState) -> str:
    stats = state.stats
    shift = " [SHIFT]" if state.is_shift_active else ""
    return (
        f"{state.zone_name}{shift} | Lv {stats.level} XP {stats.xp} | "
        f"HP {stats.hp}/{stats.max_hp} MP {stats.mp}/{stats.max_mp} | "
        f"ATK {stats.attack} DEF {stats.defense} | CR {stats.credits}"
    )


def render_log(entries: Iterable[LogEntry], limit: int = 6) -> List[str]:
    lines: List[str] = []
    for entry in list(entries)[:limit]:
        lines.append(f"[{entry.timestamp}] {entry.kind:<8} {entry.message}")
    return lines


def render_combat(view: CombatView) -> List[str]:
    lines = [f"== {view.enemy_name} ({view.enemy_hp}/{view.enemy_max_hp} HP) =="]
    lines.append(f"Phase: {view.phase}")
    if view.attack_bonus:
        lines.append(f"Overclocked: +{view.attack_bonus} ATK")
    if view.phase == "INPUT":
        entered = " ".join(ARROW_GLYPHS[step] for step in view.input_buffer) or "-"
        lines.append(f"Runes: {entered}  ({view.last_input_result})")
    return lines


def render_dialogue(view: DialogueNodeView, width: int = 60) -> List[str]:
    lines = [f"{view.speaker}:"]
    lines.extend("  " + line for line in textwrap.wrap(view.text, width=width))
    for index, (label, _next) in enumerate(view.options, start=1):
        lines.append(f"  {index}. {label}")
    return lines


def render_inventory(entries: List[InventoryEntryView]) -> List[str]:
    if not entries:
        return ["Inventory is empty."]
    return [f"- {entry.name} x{entry.quantity} ({entry.kind}) [{entry.item_id}]" for entry in entries]
