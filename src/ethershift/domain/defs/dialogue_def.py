"""Dialogue tree definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(frozen=True, slots=True)
class DialogueOptionDef:
    """Selectable reply; a next_node_id of None ends the conversation."""

    label: str
    next_node_id: str | None


@dataclass(frozen=True, slots=True)
class DialogueNodeDef:
    id: str
    speaker: str
    text: str
    options: Tuple[DialogueOptionDef, ...] = ()


@dataclass(frozen=True, slots=True)
class DialogueTreeDef:
    id: str
    start_node_id: str
    nodes: Dict[str, DialogueNodeDef] = field(default_factory=dict)

    def get_node(self, node_id: str) -> DialogueNodeDef | None:
        return self.nodes.get(node_id)
