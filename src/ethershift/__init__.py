"""Runtime game-state engine for the Ether Shift tile RPG."""

__version__ = "0.1.0"
