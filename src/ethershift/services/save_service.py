"""Serialization helpers for session save/load."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from ethershift.core.rng import RNG, RNGStatePayload
from ethershift.core.types import (
    COMBAT_PHASES,
    DIRECTIONS,
    INPUT_RESULTS,
    LOG_KINDS,
    TILE_TYPES,
)
from ethershift.data.repositories import ItemsRepository, ZonesRepository
from ethershift.domain.defs import Interactable, ItemDef
from ethershift.domain.state import (
    ActiveEnemy,
    CombatState,
    DialogueState,
    GameSession,
    GameState,
    LogEntry,
    PlayerStats,
    Position,
)
from ethershift.domain.world import Tile, WorldState
from ethershift.services.errors import SaveLoadError

SavePayload = Dict[str, Any]


class SaveService:
    """Converts a session to/from a validated, versioned payload.

    Item and interactable references are stored by id and resolved against
    the repositories on load, so a record never carries content tables.
    """

    SAVE_VERSION = 1

    def __init__(self, *, zones_repo: ZonesRepository, items_repo: ItemsRepository) -> None:
        self._zones_repo = zones_repo
        self._items_repo = items_repo

    def serialize(self, session: GameSession) -> SavePayload:
        """Return a JSON-serializable payload for the store."""
        state = session.state
        payload: SavePayload = {
            "save_version": self.SAVE_VERSION,
            "metadata": self._build_metadata(state),
            "rng": state.rng.export_state(),
            "state": self._serialize_state(state),
            "world": self._serialize_world(session.world),
        }
        return payload

    def deserialize(self, payload: Mapping[str, Any]) -> GameSession:
        """Rehydrate a session from a persisted payload. Raises SaveLoadError on any defect."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        version = payload.get("save_version")
        if version != self.SAVE_VERSION:
            raise SaveLoadError(
                f"Save format version {version!r} is not supported (expected {self.SAVE_VERSION})."
            )
        rng_payload = payload.get("rng")
        state_payload = payload.get("state")
        world_payload = payload.get("world")
        if not all(isinstance(section, Mapping) for section in (rng_payload, state_payload, world_payload)):
            raise SaveLoadError("Save data is missing required sections.")

        seed = self._require_int(state_payload.get("seed"), "state.seed")
        rng = RNG(seed)
        try:
            rng.restore_state(self._coerce_rng_payload(rng_payload))
        except ValueError as exc:
            raise SaveLoadError(f"Invalid RNG state: {exc}") from exc

        state = self._deserialize_state(state_payload, seed, rng)
        world = self._deserialize_world(world_payload)
        if world.zone_id != state.zone_id:
            raise SaveLoadError("world.zone_id does not match state.zone_id.")
        if not world.in_bounds(state.position.x, state.position.y):
            raise SaveLoadError("state.position lies outside the saved zone.")
        return GameSession(state=state, world=world)

    # -----------------------
    # Serialization
    # -----------------------
    def _build_metadata(self, state: GameState) -> Dict[str, Any]:
        return {
            "zone_id": state.zone_id,
            "zone_name": state.zone_name,
            "level": state.stats.level,
            "credits": state.stats.credits,
            "seed": state.seed,
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }

    def _serialize_state(self, state: GameState) -> Dict[str, Any]:
        enemy = state.active_enemy
        return {
            "seed": state.seed,
            "zone_id": state.zone_id,
            "zone_name": state.zone_name,
            "position": {"x": state.position.x, "y": state.position.y},
            "facing": state.facing,
            "stats": {
                "hp": state.stats.hp,
                "max_hp": state.stats.max_hp,
                "mp": state.stats.mp,
                "max_mp": state.stats.max_mp,
                "attack": state.stats.attack,
                "defense": state.stats.defense,
                "level": state.stats.level,
                "xp": state.stats.xp,
                "credits": state.stats.credits,
            },
            "inventory": [item.id for item in state.inventory],
            "is_shift_active": state.is_shift_active,
            "log": [
                {"id": entry.id, "timestamp": entry.timestamp, "message": entry.message, "kind": entry.kind}
                for entry in state.log
            ],
            "log_counter": state.log_counter,
            "in_combat": state.in_combat,
            "active_enemy": None
            if enemy is None
            else {
                "id": enemy.id,
                "interactable_id": enemy.interactable_id,
                "name": enemy.name,
                "hp": enemy.hp,
                "max_hp": enemy.max_hp,
                "attack": enemy.attack,
                "defense": enemy.defense,
                "xp_reward": enemy.xp_reward,
                "credits_reward": enemy.credits_reward,
                "loot": enemy.loot.id if enemy.loot else None,
            },
            "combat": {
                "session_id": state.combat.session_id,
                "phase": state.combat.phase,
                "selected_skill_id": state.combat.selected_skill_id,
                "input_buffer": list(state.combat.input_buffer),
                "last_input_result": state.combat.last_input_result,
                "attack_bonus": state.combat.attack_bonus,
            },
            "combat_counter": state.combat_counter,
            "in_dialogue": state.in_dialogue,
            "dialogue": None
            if state.dialogue is None
            else {"tree_id": state.dialogue.tree_id, "node_id": state.dialogue.node_id},
            "is_transitioning": state.is_transitioning,
            "transition_counter": state.transition_counter,
            "is_game_over": state.is_game_over,
            "interacted_ids": list(state.interacted_ids),
        }

    def _serialize_world(self, world: WorldState) -> Dict[str, Any]:
        return {
            "zone_id": world.zone_id,
            "tiles": [
                {
                    "id": tile.id,
                    "x": tile.x,
                    "y": tile.y,
                    "type": tile.type,
                    "is_revealed": tile.is_revealed,
                    "interactable": tile.interactable.id if tile.interactable else None,
                }
                for tile in world.tiles
            ],
        }

    # -----------------------
    # Deserialization
    # -----------------------
    def _deserialize_state(self, payload: Mapping[str, Any], seed: int, rng: RNG) -> GameState:
        position = self._require_dict(payload.get("position"), "state.position")
        state = GameState(
            seed=seed,
            rng=rng,
            zone_id=self._require_str(payload.get("zone_id"), "state.zone_id"),
            zone_name=self._require_str(payload.get("zone_name"), "state.zone_name"),
            position=Position(
                self._require_int(position.get("x"), "state.position.x"),
                self._require_int(position.get("y"), "state.position.y"),
            ),
            facing=self._require_choice(payload.get("facing"), DIRECTIONS, "state.facing"),
            stats=self._coerce_stats(payload.get("stats")),
        )
        state.inventory = [
            self._resolve_item(item_id, "state.inventory")
            for item_id in self._coerce_str_list(payload.get("inventory"), "state.inventory")
        ]
        state.is_shift_active = self._require_bool(payload.get("is_shift_active"), "state.is_shift_active")
        state.log = self._coerce_log(payload.get("log"))
        state.log_counter = self._coerce_non_negative_int(payload.get("log_counter"), "state.log_counter")
        state.in_combat = self._require_bool(payload.get("in_combat"), "state.in_combat")
        state.active_enemy = self._coerce_enemy(payload.get("active_enemy"))
        state.combat = self._coerce_combat(payload.get("combat"))
        state.combat_counter = self._coerce_non_negative_int(payload.get("combat_counter"), "state.combat_counter")
        state.in_dialogue = self._require_bool(payload.get("in_dialogue"), "state.in_dialogue")
        dialogue = payload.get("dialogue")
        if dialogue is not None:
            mapping = self._require_dict(dialogue, "state.dialogue")
            state.dialogue = DialogueState(
                tree_id=self._require_str(mapping.get("tree_id"), "state.dialogue.tree_id"),
                node_id=self._require_str(mapping.get("node_id"), "state.dialogue.node_id"),
            )
        state.is_transitioning = self._require_bool(payload.get("is_transitioning"), "state.is_transitioning")
        state.transition_counter = self._coerce_non_negative_int(
            payload.get("transition_counter"), "state.transition_counter"
        )
        state.is_game_over = self._require_bool(payload.get("is_game_over"), "state.is_game_over")
        state.interacted_ids = self._coerce_str_list(payload.get("interacted_ids"), "state.interacted_ids")

        # Only idle sessions are ever written; anything else has no continuation to resume it.
        if not state.is_idle:
            raise SaveLoadError("state is mid-combat, dialogue, transition or game over.")
        if state.active_enemy is not None or state.dialogue is not None:
            raise SaveLoadError("state carries combat or dialogue data outside those phases.")
        return state

    def _deserialize_world(self, payload: Mapping[str, Any]) -> WorldState:
        zone_id = self._require_str(payload.get("zone_id"), "world.zone_id")
        try:
            zone_def = self._zones_repo.get(zone_id)
        except KeyError as exc:
            raise SaveLoadError(f"world.zone_id '{zone_id}' is not a known zone.") from exc
        placed: Dict[str, Interactable] = {entity.id: entity for entity in zone_def.entities.values()}

        raw_tiles = payload.get("tiles")
        if not isinstance(raw_tiles, list):
            raise SaveLoadError("world.tiles must be a list.")
        if len(raw_tiles) != zone_def.width * zone_def.height:
            raise SaveLoadError(f"world.tiles must contain {zone_def.width * zone_def.height} tiles.")

        tiles: List[Tile] = []
        seen: set[tuple[int, int]] = set()
        for index, raw_tile in enumerate(raw_tiles):
            context = f"world.tiles[{index}]"
            mapping = self._require_dict(raw_tile, context)
            x = self._require_int(mapping.get("x"), f"{context}.x")
            y = self._require_int(mapping.get("y"), f"{context}.y")
            if not (0 <= x < zone_def.width and 0 <= y < zone_def.height) or (x, y) in seen:
                raise SaveLoadError(f"{context} has an invalid or duplicate position ({x}, {y}).")
            seen.add((x, y))
            interactable_id = mapping.get("interactable")
            interactable: Interactable | None = None
            if interactable_id is not None:
                key = self._require_str(interactable_id, f"{context}.interactable")
                interactable = placed.get(key)
                if interactable is None:
                    raise SaveLoadError(f"{context} references unknown interactable '{key}'.")
            tiles.append(
                Tile(
                    id=self._require_str(mapping.get("id"), f"{context}.id"),
                    x=x,
                    y=y,
                    type=self._require_choice(mapping.get("type"), TILE_TYPES, f"{context}.type"),
                    interactable=interactable,
                    is_revealed=self._require_bool(mapping.get("is_revealed"), f"{context}.is_revealed"),
                )
            )
        return WorldState(zone_id=zone_def.id, width=zone_def.width, height=zone_def.height, tiles=tiles)

    def _coerce_stats(self, value: Any) -> PlayerStats:
        mapping = self._require_dict(value, "state.stats")
        fields = ("hp", "max_hp", "mp", "max_mp", "attack", "defense", "level", "xp", "credits")
        values = {name: self._coerce_non_negative_int(mapping.get(name), f"state.stats.{name}") for name in fields}
        stats = PlayerStats(**values)
        if stats.hp > stats.max_hp or stats.mp > stats.max_mp:
            raise SaveLoadError("state.stats hp/mp exceed their maximums.")
        if stats.level < 1:
            raise SaveLoadError("state.stats.level must be at least 1.")
        return stats

    def _coerce_log(self, value: Any) -> List[LogEntry]:
        if not isinstance(value, list):
            raise SaveLoadError("state.log must be a list.")
        entries: List[LogEntry] = []
        for index, raw in enumerate(value):
            context = f"state.log[{index}]"
            mapping = self._require_dict(raw, context)
            entries.append(
                LogEntry(
                    id=self._require_str(mapping.get("id"), f"{context}.id"),
                    timestamp=self._require_str(mapping.get("timestamp"), f"{context}.timestamp"),
                    message=self._require_str(mapping.get("message"), f"{context}.message"),
                    kind=self._require_choice(mapping.get("kind"), LOG_KINDS, f"{context}.kind"),
                )
            )
        return entries

    def _coerce_enemy(self, value: Any) -> ActiveEnemy | None:
        if value is None:
            return None
        mapping = self._require_dict(value, "state.active_enemy")
        loot_id = mapping.get("loot")
        loot = None if loot_id is None else self._resolve_item(loot_id, "state.active_enemy.loot")
        ints = {
            name: self._coerce_non_negative_int(mapping.get(name), f"state.active_enemy.{name}")
            for name in ("hp", "max_hp", "attack", "defense", "xp_reward", "credits_reward")
        }
        return ActiveEnemy(
            id=self._require_str(mapping.get("id"), "state.active_enemy.id"),
            interactable_id=self._require_str(mapping.get("interactable_id"), "state.active_enemy.interactable_id"),
            name=self._require_str(mapping.get("name"), "state.active_enemy.name"),
            loot=loot,
            **ints,
        )

    def _coerce_combat(self, value: Any) -> CombatState:
        mapping = self._require_dict(value, "state.combat")
        selected = mapping.get("selected_skill_id")
        if selected is not None:
            selected = self._require_str(selected, "state.combat.selected_skill_id")
        return CombatState(
            session_id=self._coerce_non_negative_int(mapping.get("session_id"), "state.combat.session_id"),
            phase=self._require_choice(mapping.get("phase"), COMBAT_PHASES, "state.combat.phase"),
            selected_skill_id=selected,
            input_buffer=[
                self._require_choice(entry, DIRECTIONS, "state.combat.input_buffer")
                for entry in self._coerce_str_list(mapping.get("input_buffer"), "state.combat.input_buffer")
            ],
            last_input_result=self._require_choice(
                mapping.get("last_input_result"), INPUT_RESULTS, "state.combat.last_input_result"
            ),
            attack_bonus=self._coerce_non_negative_int(mapping.get("attack_bonus"), "state.combat.attack_bonus"),
        )

    def _resolve_item(self, item_id: Any, context: str) -> ItemDef:
        key = self._require_str(item_id, context)
        try:
            return self._items_repo.get(key)
        except KeyError as exc:
            raise SaveLoadError(f"{context} references unknown item '{key}'.") from exc

    def _coerce_rng_payload(self, payload: Mapping[str, Any]) -> RNGStatePayload:
        version = self._require_int(payload.get("version"), "rng.version")
        state_values = payload.get("state")
        if not isinstance(state_values, list):
            raise SaveLoadError("Invalid RNG state payload.")
        for index, word in enumerate(state_values):
            if not 0 <= self._require_int(word, f"rng.state[{index}]") < 2**32:
                raise SaveLoadError(f"rng.state[{index}] is out of range.")
        gauss = payload.get("gauss")
        return {"version": version, "state": state_values, "gauss": gauss}

    @staticmethod
    def _require_dict(value: Any, context: str) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_bool(value: Any, context: str) -> bool:
        if not isinstance(value, bool):
            raise SaveLoadError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_choice(value: Any, allowed: tuple, context: str) -> Any:
        if value not in allowed:
            raise SaveLoadError(f"{context} has invalid value {value!r}.")
        return value

    def _coerce_non_negative_int(self, value: Any, context: str) -> int:
        value_int = self._require_int(value, context)
        if value_int < 0:
            raise SaveLoadError(f"{context} must be a non-negative integer.")
        return value_int

    def _coerce_str_list(self, value: Any, context: str) -> List[str]:
        if not isinstance(value, list):
            raise SaveLoadError(f"{context} must be a list.")
        return [self._require_str(entry, f"{context}[{index}]") for index, entry in enumerate(value)]
