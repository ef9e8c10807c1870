"""Effect definition primitives."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

EffectKind = Literal["heal_hp", "heal_mp"]


@dataclass(frozen=True, slots=True)
class EffectDef:
    """Simple effect definition (e.g., heal HP)."""

    kind: EffectKind
    amount: int
