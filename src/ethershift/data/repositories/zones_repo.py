"""Repository for zone layouts and their entity placements."""
from __future__ import annotations

from typing import Dict, List, Tuple

from ethershift.core.types import DIRECTIONS, INTERACTABLE_KINDS, TileType
from ethershift.data.errors import DataReferenceError, DataValidationError
from ethershift.data.repositories.base import RepositoryBase
from ethershift.data.repositories.dialogue_repo import DialogueRepository
from ethershift.data.repositories.items_repo import ItemsRepository
from ethershift.domain.defs import (
    EnemyInteractable,
    EnemyStatsDef,
    Interactable,
    ItemDef,
    ItemInteractable,
    NpcInteractable,
    StartDef,
    TransitionMetadata,
    ZoneDef,
    ZoneGateInteractable,
)

LAYOUT_LEGEND: Dict[str, TileType] = {
    ".": "EMPTY",
    "#": "WALL",
    "~": "WATER",
    "D": "DOOR",
    "V": "VOID",
}


class ZonesRepository(RepositoryBase[ZoneDef]):
    """Loads zone grids, resolving item and dialogue references."""

    def __init__(
        self,
        items_repo: ItemsRepository,
        dialogue_repo: DialogueRepository | None = None,
        base_path=None,
    ) -> None:
        super().__init__("zones.json", base_path)
        self._items_repo = items_repo
        self._dialogue_repo = dialogue_repo
        self._default_zone_id: str | None = None
        self._start: StartDef | None = None

    def get_default(self) -> ZoneDef:
        """Return the zone used when a lookup misses."""
        self._ensure_loaded()
        assert self._default_zone_id is not None
        return self.get(self._default_zone_id)

    def get_start(self) -> StartDef:
        """Return the new-game starting location."""
        self._ensure_loaded()
        assert self._start is not None
        return self._start

    def _build(self, raw: dict[str, object]) -> Dict[str, ZoneDef]:
        self._assert_required(raw, {"default_zone", "start", "zones"}, "zones.json")
        raw_zones = self._require_mapping(raw["zones"], "zones.json zones")

        # Gate targets need the destination name, so read names before building.
        zone_names: Dict[str, str] = {}
        for zone_id, payload in raw_zones.items():
            zone_data = self._require_mapping(payload, f"zone '{zone_id}'")
            zone_names[zone_id] = self._require_str(zone_data.get("name"), f"zone '{zone_id}' name")

        zones: Dict[str, ZoneDef] = {}
        seen_entity_ids: set[str] = set()
        for zone_id, payload in raw_zones.items():
            zones[zone_id] = self._build_zone(zone_id, payload, zone_names, seen_entity_ids)

        default_zone_id = self._require_str(raw["default_zone"], "zones.json default_zone")
        if default_zone_id not in zones:
            raise DataReferenceError(f"Default zone '{default_zone_id}' is not defined.")
        start = self._parse_start(raw["start"], zones)

        self._default_zone_id = default_zone_id
        self._start = start
        return zones

    def _build_zone(
        self,
        zone_id: str,
        payload: object,
        zone_names: Dict[str, str],
        seen_entity_ids: set[str],
    ) -> ZoneDef:
        context = f"zone '{zone_id}'"
        zone_data = self._require_mapping(payload, context)
        self._assert_required(zone_data, {"name", "width", "height", "layout"}, context)
        width = self._require_int(zone_data["width"], f"{context} width")
        height = self._require_int(zone_data["height"], f"{context} height")
        if width <= 0 or height <= 0:
            raise DataValidationError(f"{context} dimensions must be positive.")
        rows = self._parse_layout(zone_data["layout"], width, height, context)

        entities: Dict[Tuple[int, int], Interactable] = {}
        raw_entities = zone_data.get("entities", [])
        if not isinstance(raw_entities, list):
            raise DataValidationError(f"{context} entities must be a list.")
        for index, entry in enumerate(raw_entities):
            entity_ctx = f"{context} entities[{index}]"
            entity_data = self._require_mapping(entry, entity_ctx)
            x = self._require_int(entity_data.get("x"), f"{entity_ctx} x")
            y = self._require_int(entity_data.get("y"), f"{entity_ctx} y")
            if not (0 <= x < width and 0 <= y < height):
                raise DataValidationError(f"{entity_ctx} is outside the zone grid.")
            if (x, y) in entities:
                raise DataValidationError(f"{entity_ctx} overlaps another entity at ({x}, {y}).")
            interactable = self._parse_interactable(entity_data, zone_names, entity_ctx)
            if interactable.id in seen_entity_ids:
                raise DataValidationError(f"{entity_ctx} reuses interactable id '{interactable.id}'.")
            seen_entity_ids.add(interactable.id)
            entities[(x, y)] = interactable

        return ZoneDef(
            id=zone_id,
            name=zone_names[zone_id],
            width=width,
            height=height,
            rows=rows,
            entities=entities,
        )

    def _parse_layout(
        self, raw_layout: object, width: int, height: int, context: str
    ) -> Tuple[Tuple[TileType, ...], ...]:
        lines = self._require_str_list(raw_layout, f"{context} layout")
        if len(lines) != height:
            raise DataValidationError(f"{context} layout must have {height} rows.")
        rows: List[Tuple[TileType, ...]] = []
        for y, line in enumerate(lines):
            if len(line) != width:
                raise DataValidationError(f"{context} layout row {y} must have {width} columns.")
            row: List[TileType] = []
            for x, char in enumerate(line):
                tile_type = LAYOUT_LEGEND.get(char)
                if tile_type is None:
                    raise DataValidationError(f"{context} layout has unknown symbol '{char}' at ({x}, {y}).")
                row.append(tile_type)
            rows.append(tuple(row))
        return tuple(rows)

    def _parse_interactable(
        self, entity_data: dict[str, object], zone_names: Dict[str, str], context: str
    ) -> Interactable:
        kind = self._require_literal(entity_data.get("kind"), INTERACTABLE_KINDS, f"{context} kind")
        entity_id = self._require_str(entity_data.get("id"), f"{context} id")
        name = self._require_str(entity_data.get("name"), f"{context} name")
        is_hidden = self._require_bool(entity_data.get("hidden", False), f"{context} hidden")

        if kind == "NPC":
            dialogue_id = entity_data.get("dialogue")
            if dialogue_id is not None:
                dialogue_id = self._require_str(dialogue_id, f"{context} dialogue")
                if self._dialogue_repo is not None and not self._dialogue_repo.has(dialogue_id):
                    raise DataReferenceError(f"{context} references unknown dialogue '{dialogue_id}'.")
            lines = self._require_str_list(entity_data.get("lines", []), f"{context} lines")
            return NpcInteractable(
                id=entity_id, name=name, is_hidden=is_hidden, dialogue_id=dialogue_id, lines=tuple(lines)
            )
        if kind == "ITEM":
            item_id = self._require_str(entity_data.get("item"), f"{context} item")
            return ItemInteractable(
                id=entity_id, name=name, reward=self._resolve_item(item_id, context), is_hidden=is_hidden
            )
        if kind == "ENEMY":
            stats = self._parse_enemy_stats(entity_data.get("stats"), f"{context} stats")
            loot_id = entity_data.get("loot")
            loot = None
            if loot_id is not None:
                loot = self._resolve_item(self._require_str(loot_id, f"{context} loot"), context)
            return EnemyInteractable(id=entity_id, name=name, stats=stats, loot=loot, is_hidden=is_hidden)

        target = self._require_mapping(entity_data.get("target"), f"{context} target")
        target_zone = self._require_str(target.get("zone"), f"{context} target zone")
        if target_zone not in zone_names:
            raise DataReferenceError(f"{context} targets unknown zone '{target_zone}'.")
        transition = TransitionMetadata(
            target_zone_id=target_zone,
            target_zone_name=zone_names[target_zone],
            target_x=self._require_int(target.get("x"), f"{context} target x"),
            target_y=self._require_int(target.get("y"), f"{context} target y"),
            target_facing=self._require_literal(  # type: ignore[arg-type]
                target.get("facing", "DOWN"), DIRECTIONS, f"{context} target facing"
            ),
        )
        return ZoneGateInteractable(id=entity_id, name=name, transition=transition, is_hidden=is_hidden)

    def _parse_enemy_stats(self, value: object, context: str) -> EnemyStatsDef:
        stats = self._require_mapping(value, context)
        self._assert_required(stats, {"hp", "attack", "defense", "xp_reward"}, context)
        hp = self._require_int(stats["hp"], f"{context} hp")
        if hp <= 0:
            raise DataValidationError(f"{context} hp must be positive.")
        return EnemyStatsDef(
            hp=hp,
            max_hp=self._require_int(stats.get("max_hp", hp), f"{context} max_hp"),
            attack=self._require_int(stats["attack"], f"{context} attack"),
            defense=self._require_int(stats["defense"], f"{context} defense"),
            xp_reward=self._require_int(stats["xp_reward"], f"{context} xp_reward"),
            credits_reward=self._require_int(stats.get("credits_reward", 0), f"{context} credits_reward"),
        )

    def _parse_start(self, value: object, zones: Dict[str, ZoneDef]) -> StartDef:
        start = self._require_mapping(value, "zones.json start")
        zone_id = self._require_str(start.get("zone"), "zones.json start zone")
        zone = zones.get(zone_id)
        if zone is None:
            raise DataReferenceError(f"Start zone '{zone_id}' is not defined.")
        x = self._require_int(start.get("x"), "zones.json start x")
        y = self._require_int(start.get("y"), "zones.json start y")
        if not (0 <= x < zone.width and 0 <= y < zone.height):
            raise DataValidationError("zones.json start position is outside the zone grid.")
        facing = self._require_literal(start.get("facing", "DOWN"), DIRECTIONS, "zones.json start facing")
        return StartDef(zone_id=zone_id, x=x, y=y, facing=facing)  # type: ignore[arg-type]

    def _resolve_item(self, item_id: str, context: str) -> ItemDef:
        try:
            return self._items_repo.get(item_id)
        except KeyError as exc:
            raise DataReferenceError(f"{context} references unknown item '{item_id}'.") from exc
