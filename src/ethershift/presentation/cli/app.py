"""Console-driven UI loop for EtherShift."""
from __future__ import annotations

import logging
import secrets
from typing import Callable, Dict, List

from ethershift.data.save_store import JsonFileStore
from ethershift.presentation.cli import config
from ethershift.presentation.cli.render import (
    debug_enabled,
    render_combat,
    render_dialogue,
    render_grid,
    render_inventory,
    render_log,
    render_status,
)
from ethershift.services import CombatAction, GameEngine

_MAX_RANDOM_SEED = 2**31 - 1

_MOVES: Dict[str, tuple[int, int]] = {
    "w": (0, -1),
    "s": (0, 1),
    "a": (-1, 0),
    "d": (1, 0),
}
_RUNES = {"w": "UP", "s": "DOWN", "a": "LEFT", "d": "RIGHT"}

_HELP = """Exploration: w/a/s/d move, e interact, shift toggle, use <item_id>, inv, save, load, reset, quit
Combat: attack, skills, skill <n>, cancel, flee, use <item_id>; during rune input w/a/s/d
Dialogue: enter an option number"""


def main() -> None:
    """Start the interactive CLI session."""
    settings = config.load_config()
    logging.basicConfig(level=settings["log_level"], format="%(levelname)s %(name)s: %(message)s")
    seed = settings["seed"] if settings["seed"] is not None else _prompt_seed()
    engine = GameEngine.create(seed=seed, store=JsonFileStore(config.get_save_dir()))
    print("=== ETHER SHIFT ===")
    print(f"Game started with seed: {seed}")
    print(_HELP)
    while True:
        _draw(engine)
        try:
            raw = input("> ").strip().lower()
        except EOFError:
            break
        if raw in ("quit", "q", "exit"):
            break
        if raw in ("help", "?"):
            print(_HELP)
            continue
        _handle_command(engine, raw)
        if debug_enabled() and len(engine.scheduler):
            print(f"[debug] pending: {', '.join(engine.scheduler.pending())}")
        engine.run_pending()
    print("Goodbye!")


def _prompt_seed() -> int:
    while True:
        raw_value = input("Enter seed (blank for random): ").strip()
        if not raw_value:
            return secrets.randbelow(_MAX_RANDOM_SEED)
        try:
            return int(raw_value)
        except ValueError:
            print("Invalid seed. Please enter a valid integer.")


def _draw(engine: GameEngine) -> None:
    state = engine.state
    print()
    for row in render_grid(state, engine.world):
        print(row)
    print(render_status(state))
    combat_view = engine.get_combat_view()
    if combat_view is not None:
        for line in render_combat(combat_view):
            print(line)
        actions = engine.get_available_combat_actions()
        if actions["skills"]:
            for index, skill in enumerate(actions["skills"], start=1):
                sequence = " ".join(skill.sequence)
                print(f"  {index}. {skill.name} ({skill.mp_cost} MP) [{sequence}]")
    dialogue_view = engine.get_dialogue_view()
    if dialogue_view is not None:
        for line in render_dialogue(dialogue_view):
            print(line)
    if state.is_game_over:
        print("*** GAME OVER *** (load or reset)")
    for line in render_log(state.log):
        print(line)


def _handle_command(engine: GameEngine, raw: str) -> None:
    state = engine.state
    command, _, argument = raw.partition(" ")
    system: Dict[str, Callable[[], object]] = {
        "save": engine.save,
        "load": engine.load,
        "reset": engine.reset_game,
    }
    if command in system:
        system[command]()
        return
    if command == "inv":
        for line in render_inventory(engine.list_inventory()):
            print(line)
        return
    if command == "use" and argument:
        engine.consume_item(argument.strip())
        return

    if state.in_dialogue:
        _handle_dialogue(engine, command)
        return
    if state.in_combat:
        _handle_combat(engine, command, argument)
        return

    if command in _MOVES:
        engine.move(*_MOVES[command])
    elif command in ("e", "interact"):
        engine.interact()
    elif command == "shift":
        engine.toggle_shift()
    elif command:
        print("Unknown command. Type 'help' for the list.")


def _handle_dialogue(engine: GameEngine, command: str) -> None:
    view = engine.get_dialogue_view()
    if view is None:
        return
    try:
        index = int(command) - 1
    except ValueError:
        print("Choose an option number.")
        return
    if not 0 <= index < len(view.options):
        print("Invalid option.")
        return
    engine.select_dialogue_option(view.options[index][1])


def _handle_combat(engine: GameEngine, command: str, argument: str) -> None:
    actions = engine.get_available_combat_actions()
    if actions["accepts_runes"] and command in _RUNES:
        engine.rune_input(_RUNES[command])
        return
    simple: Dict[str, CombatAction] = {
        "attack": CombatAction("ATTACK"),
        "skills": CombatAction("OPEN_SKILLS"),
        "cancel": CombatAction("CANCEL_SKILL"),
        "flee": CombatAction("FLEE"),
    }
    if command in simple:
        engine.combat_action(simple[command])
        return
    if command == "skill":
        skills: List = actions["skills"]
        try:
            index = int(argument) - 1
        except ValueError:
            print("Usage: skill <n>")
            return
        if not 0 <= index < len(skills):
            print("Invalid skill.")
            return
        engine.combat_action(CombatAction("SELECT_SKILL", skill_id=skills[index].id))
        return
    print("Unknown combat command. Type 'help' for the list.")
