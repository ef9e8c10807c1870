"""Session state: the single mutable unit the engine owns and persists."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ethershift.core.rng import RNG
from ethershift.core.types import CombatPhase, Direction, InputResult, LogKind
from ethershift.domain.defs import ItemDef
from ethershift.domain.rules import MAX_LOG_ENTRIES
from ethershift.domain.world import WorldState


@dataclass(frozen=True, slots=True)
class Position:
    x: int
    y: int

    def step(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)


@dataclass(slots=True)
class PlayerStats:
    """Player combat stats. hp and mp always stay within [0, max]."""

    hp: int
    max_hp: int
    mp: int
    max_mp: int
    attack: int
    defense: int
    level: int = 1
    xp: int = 0
    credits: int = 0


@dataclass(slots=True)
class ActiveEnemy:
    """Combat-scoped copy of an enemy interactable's stats."""

    id: str  # "combat::<interactable id>"
    interactable_id: str
    name: str
    hp: int
    max_hp: int
    attack: int
    defense: int
    xp_reward: int
    credits_reward: int = 0
    loot: ItemDef | None = None

    @property
    def is_alive(self) -> bool:
        return self.hp > 0


@dataclass(slots=True)
class CombatState:
    session_id: int = 0
    phase: CombatPhase = "MENU"
    selected_skill_id: str | None = None
    input_buffer: List[Direction] = field(default_factory=list)
    last_input_result: InputResult = "NEUTRAL"
    attack_bonus: int = 0

    def reset_input(self) -> None:
        self.selected_skill_id = None
        self.input_buffer = []
        self.last_input_result = "NEUTRAL"


@dataclass(slots=True)
class DialogueState:
    tree_id: str
    node_id: str


@dataclass(slots=True)
class LogEntry:
    id: str
    timestamp: str
    message: str
    kind: LogKind = "INFO"


@dataclass
class GameState:
    """Everything about the player's session except the tiles themselves."""

    seed: int
    rng: RNG
    zone_id: str
    zone_name: str
    position: Position
    facing: Direction
    stats: PlayerStats
    inventory: List[ItemDef] = field(default_factory=list)
    is_shift_active: bool = False
    log: List[LogEntry] = field(default_factory=list)
    log_counter: int = 0
    in_combat: bool = False
    active_enemy: ActiveEnemy | None = None
    combat: CombatState = field(default_factory=CombatState)
    combat_counter: int = 0
    in_dialogue: bool = False
    dialogue: DialogueState | None = None
    is_transitioning: bool = False
    transition_counter: int = 0
    is_game_over: bool = False
    interacted_ids: List[str] = field(default_factory=list)

    @property
    def is_idle(self) -> bool:
        """True when no combat, dialogue, transition or game over is in effect."""
        return not (self.in_combat or self.in_dialogue or self.is_transitioning or self.is_game_over)

    def record_interaction(self, interactable_id: str) -> None:
        if interactable_id not in self.interacted_ids:
            self.interacted_ids.append(interactable_id)


def append_log(state: GameState, message: str, kind: LogKind, timestamp: str) -> LogEntry:
    """Prepend a log entry, keeping only the most recent MAX_LOG_ENTRIES."""
    state.log_counter += 1
    entry = LogEntry(id=f"log_{state.log_counter}", timestamp=timestamp, message=message, kind=kind)
    state.log.insert(0, entry)
    del state.log[MAX_LOG_ENTRIES:]
    return entry


@dataclass
class GameSession:
    """The engine's owned session: player-side state plus the active zone's tiles."""

    state: GameState
    world: WorldState
