"""Fixed game-rule constants."""
from __future__ import annotations

FOG_RADIUS = 2.5
MAX_LOG_ENTRIES = 50

# Continuation delays, in seconds on the scheduler clock.
GATE_STEP_DELAY = 0.1
SKILL_EXECUTION_DELAY = 0.3
ENEMY_TURN_DELAY = 1.0
TRANSITION_DELAY = 1.5

ATTACK_VARIANCE_MIN = 0.8
ATTACK_VARIANCE_MAX = 1.2

XP_PER_LEVEL = 100
LEVEL_UP_MAX_HP = 20
LEVEL_UP_MAX_MP = 10
LEVEL_UP_ATTACK = 3
LEVEL_UP_DEFENSE = 2

STARTING_HP = 100
STARTING_MP = 50
STARTING_ATTACK = 10
STARTING_DEFENSE = 5

INITIAL_LOG_MESSAGE = "System Online. Neural link established. Welcome back, Architect."
