"""Turns service events into in-game log lines."""
from __future__ import annotations

from typing import Tuple

from ethershift.core.types import LogKind
from ethershift.services.combat_service import (
    CombatEndedEvent,
    CombatStartedEvent,
    EnemyAttackedEvent,
    EnemyDefeatedEvent,
    LevelUpEvent,
    LootAcquiredEvent,
    PlayerAttackedEvent,
    PlayerDefeatedEvent,
    SkillBuffedEvent,
    SkillCastEvent,
    SkillDamageEvent,
    SkillFizzledEvent,
    SkillHealedEvent,
)
from ethershift.services.controllers.combat_controller import RuneFailedEvent, SkillSelectedEvent
from ethershift.services.dialogue_service import (
    DialogueAdvancedEvent,
    DialogueEndedEvent,
    DialogueStartedEvent,
)
from ethershift.services.events import ActionRejectedEvent, GameEvent
from ethershift.services.interaction_service import (
    ItemAcquiredEvent,
    NothingHereEvent,
    NpcSpokeEvent,
    ObscuredEvent,
)
from ethershift.services.inventory_service import ItemConsumedEvent
from ethershift.services.movement_service import ShiftToggledEvent
from ethershift.services.persistence_service import LoadFailedEvent
from ethershift.services.transition_service import TransitionStartedEvent, ZoneEnteredEvent

LogLine = Tuple[str, LogKind]


def narrate(event: GameEvent) -> LogLine | None:
    """Return the log line for an event, or None if the event is silent."""
    if isinstance(event, ActionRejectedEvent):
        return event.message, "SYSTEM"
    if isinstance(event, ShiftToggledEvent):
        if event.active:
            return ">> ETHER SHIFT ACTIVATED <<", "SYSTEM"
        return "Shift disengaged. Reality stabilized.", "SYSTEM"
    if isinstance(event, NothingHereEvent):
        return "Nothing interesting here.", "INFO"
    if isinstance(event, ObscuredEvent):
        return "You sense something... but reality obscures it.", "INFO"
    if isinstance(event, NpcSpokeEvent):
        return f'{event.npc_name}: "{event.line}"', "DIALOGUE"
    if isinstance(event, ItemAcquiredEvent):
        return f"Acquired: {event.item_name}", "INFO"
    if isinstance(event, (DialogueStartedEvent, DialogueAdvancedEvent)):
        return f'{event.speaker}: "{event.text}"', "DIALOGUE"
    if isinstance(event, DialogueEndedEvent):
        if event.reason == "missing_node":
            return "The transmission breaks off.", "DIALOGUE"
        return None
    if isinstance(event, CombatStartedEvent):
        return f"⚠️ ENCOUNTER: {event.enemy_name} engaged!", "COMBAT"
    if isinstance(event, PlayerAttackedEvent):
        return f"You dealt {event.damage} damage to {event.enemy_name}.", "COMBAT"
    if isinstance(event, SkillSelectedEvent):
        return f"Channeling '{event.skill_name}'. Enter the rune sequence.", "COMBAT"
    if isinstance(event, RuneFailedEvent):
        return "Rune sequence broken. Realign and try again.", "COMBAT"
    if isinstance(event, SkillCastEvent):
        return f"You cast '{event.skill_name}'!", "COMBAT"
    if isinstance(event, SkillDamageEvent):
        return f"You dealt {event.damage} damage to {event.enemy_name}.", "COMBAT"
    if isinstance(event, SkillHealedEvent):
        return f"{event.skill_name} restores {event.amount} HP.", "COMBAT"
    if isinstance(event, SkillBuffedEvent):
        return f"{event.skill_name} boosts your attack by {event.amount}.", "COMBAT"
    if isinstance(event, SkillFizzledEvent):
        if event.reason == "insufficient_mp":
            return "Insufficient Ether (MP)!", "SYSTEM"
        return "The routine fizzles out.", "SYSTEM"
    if isinstance(event, EnemyAttackedEvent):
        return f"{event.enemy_name} strikes! You take {event.damage} DMG.", "COMBAT"
    if isinstance(event, PlayerDefeatedEvent):
        return "CRITICAL FAILURE. SYSTEM SHUTTING DOWN...", "SYSTEM"
    if isinstance(event, EnemyDefeatedEvent):
        message = f"Target eliminated. +{event.xp} XP"
        if event.credits > 0:
            message += f", +{event.credits} Credits"
        return message, "SYSTEM"
    if isinstance(event, LootAcquiredEvent):
        return f"LOOT: Retrieved [{event.item_name}]", "INFO"
    if isinstance(event, LevelUpEvent):
        return f"LEVEL UP! You are now level {event.level}.", "SYSTEM"
    if isinstance(event, CombatEndedEvent):
        if event.outcome == "fled":
            return "You disengaged from combat.", "INFO"
        return None
    if isinstance(event, ItemConsumedEvent):
        parts = []
        if event.hp_restored:
            parts.append(f"+{event.hp_restored} HP")
        if event.mp_restored:
            parts.append(f"+{event.mp_restored} MP")
        return f"Used {event.item_name} ({', '.join(parts)}).", "INFO"
    if isinstance(event, TransitionStartedEvent):
        return f"ESTABLISHING HANDSHAKE with {event.target.target_zone_name}...", "SYSTEM"
    if isinstance(event, ZoneEnteredEvent):
        return f"Entered {event.zone_name}.", "SYSTEM"
    if isinstance(event, LoadFailedEvent):
        return event.message, "SYSTEM"
    return None
