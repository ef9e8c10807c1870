"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random
from typing import Any, Dict, TypedDict


class RNGStatePayload(TypedDict):
    version: int
    state: list
    gauss: Any


class RNG:
    """Seeded random.Random wrapper whose state can be saved with the session."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._random = Random(seed)

    def uniform(self, a: float, b: float) -> float:
        """Return a random floating point number N such that a <= N <= b."""
        return self._random.uniform(a, b)

    def export_state(self) -> RNGStatePayload:
        """Return a JSON-serializable snapshot of the generator state."""
        version, internal, gauss = self._random.getstate()
        return {"version": version, "state": list(internal), "gauss": gauss}

    def restore_state(self, payload: Dict[str, Any]) -> None:
        """Restore a snapshot produced by export_state."""
        try:
            version = payload["version"]
            internal = tuple(payload["state"])
            gauss = payload.get("gauss")
        except (KeyError, TypeError) as exc:
            raise ValueError("RNG state payload is incomplete.") from exc
        try:
            self._random.setstate((version, internal, gauss))
        except (TypeError, ValueError, OverflowError) as exc:
            raise ValueError(f"RNG state payload is invalid: {exc}") from exc

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RNG):
            return NotImplemented
        return self.seed == other.seed and self._random.getstate() == other._random.getstate()

    def __repr__(self) -> str:
        return f"RNG(seed={self.seed})"
