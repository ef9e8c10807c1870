"""Dialogue-tree traversal."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Tuple

from ethershift.data.repositories import DialogueRepository
from ethershift.domain.defs import DialogueNodeDef
from ethershift.domain.state import DialogueState, GameSession, GameState
from ethershift.services.events import ActionRejectedEvent, GameEvent

logger = logging.getLogger(__name__)

DialogueEndReason = Literal["finished", "missing_node"]


@dataclass(slots=True)
class DialogueNodeView:
    """Data returned to the presentation layer for rendering."""

    tree_id: str
    node_id: str
    speaker: str
    text: str
    options: List[Tuple[str, str | None]] = field(default_factory=list)


@dataclass(slots=True)
class DialogueStartedEvent(GameEvent):
    tree_id: str
    node_id: str
    speaker: str
    text: str


@dataclass(slots=True)
class DialogueAdvancedEvent(GameEvent):
    node_id: str
    speaker: str
    text: str


@dataclass(slots=True)
class DialogueEndedEvent(GameEvent):
    reason: DialogueEndReason


class DialogueService:
    """Application service that walks dialogue trees.

    While a conversation is open every other action is locked out by the
    engine; only `select_option` moves the session forward.
    """

    def __init__(self, dialogue_repo: DialogueRepository) -> None:
        self._dialogue_repo = dialogue_repo

    def open(self, session: GameSession, tree_id: str) -> List[GameEvent]:
        """Start a conversation at the tree's start node."""
        state = session.state
        try:
            tree = self._dialogue_repo.get(tree_id)
        except KeyError:
            logger.warning("Dialogue tree '%s' is not defined", tree_id)
            return [ActionRejectedEvent(reason="missing_dialogue", message="The signal dissolves into static.")]
        node = tree.nodes[tree.start_node_id]
        state.in_dialogue = True
        state.dialogue = DialogueState(tree_id=tree.id, node_id=node.id)
        return [DialogueStartedEvent(tree_id=tree.id, node_id=node.id, speaker=node.speaker, text=node.text)]

    def select_option(self, session: GameSession, next_node_id: str | None) -> List[GameEvent]:
        """Advance to `next_node_id`, or end the conversation on None or an unknown node."""
        state = session.state
        if not state.in_dialogue or state.dialogue is None:
            return []
        if state.is_transitioning or state.is_game_over:
            return []
        if next_node_id is None:
            self._close(state)
            return [DialogueEndedEvent(reason="finished")]

        node = self._lookup(state.dialogue.tree_id, next_node_id)
        if node is None:
            logger.warning(
                "Dialogue node '%s' missing from tree '%s'; closing conversation",
                next_node_id,
                state.dialogue.tree_id,
            )
            self._close(state)
            return [DialogueEndedEvent(reason="missing_node")]
        state.dialogue.node_id = node.id
        return [DialogueAdvancedEvent(node_id=node.id, speaker=node.speaker, text=node.text)]

    def get_current_node_view(self, state: GameState) -> DialogueNodeView | None:
        """Return the view model for the active node, if a conversation is open."""
        if not state.in_dialogue or state.dialogue is None:
            return None
        node = self._lookup(state.dialogue.tree_id, state.dialogue.node_id)
        if node is None:
            return None
        return DialogueNodeView(
            tree_id=state.dialogue.tree_id,
            node_id=node.id,
            speaker=node.speaker,
            text=node.text,
            options=[(option.label, option.next_node_id) for option in node.options],
        )

    def _lookup(self, tree_id: str, node_id: str) -> DialogueNodeDef | None:
        try:
            tree = self._dialogue_repo.get(tree_id)
        except KeyError:
            return None
        return tree.get_node(node_id)

    @staticmethod
    def _close(state: GameState) -> None:
        state.in_dialogue = False
        state.dialogue = None
