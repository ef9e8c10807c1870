"""Repository for dialogue trees."""
from __future__ import annotations

from typing import Dict, Tuple

from ethershift.data.errors import DataValidationError
from ethershift.data.repositories.base import RepositoryBase
from ethershift.domain.defs import DialogueNodeDef, DialogueOptionDef, DialogueTreeDef


class DialogueRepository(RepositoryBase[DialogueTreeDef]):
    """Loads dialogue trees and validates their structure.

    Option targets are not cross-checked here; a dangling target is handled by
    the dialogue service closing the conversation.
    """

    def __init__(self, base_path=None) -> None:
        super().__init__("dialogue.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, DialogueTreeDef]:
        trees: Dict[str, DialogueTreeDef] = {}
        for tree_id, tree_payload in raw.items():
            if not isinstance(tree_id, str):
                raise DataValidationError("Dialogue tree ids must be strings.")
            context = f"dialogue tree '{tree_id}'"
            tree_data = self._require_mapping(tree_payload, context)
            start = self._require_str(tree_data.get("start"), f"{context} start")
            raw_nodes = self._require_mapping(tree_data.get("nodes"), f"{context} nodes")
            nodes: Dict[str, DialogueNodeDef] = {}
            for node_id, node_payload in raw_nodes.items():
                node_ctx = f"{context} node '{node_id}'"
                node_data = self._require_mapping(node_payload, node_ctx)
                nodes[node_id] = DialogueNodeDef(
                    id=node_id,
                    speaker=self._require_str(node_data.get("speaker"), f"{node_ctx} speaker"),
                    text=self._require_str(node_data.get("text"), f"{node_ctx} text"),
                    options=self._parse_options(node_data.get("options"), node_ctx),
                )
            if start not in nodes:
                raise DataValidationError(f"{context} start node '{start}' is not defined.")
            trees[tree_id] = DialogueTreeDef(id=tree_id, start_node_id=start, nodes=nodes)
        return trees

    def _parse_options(self, raw_options: object, context: str) -> Tuple[DialogueOptionDef, ...]:
        if raw_options is None:
            return ()
        if not isinstance(raw_options, list):
            raise DataValidationError(f"{context} options must be a list if provided.")
        options = []
        for index, entry in enumerate(raw_options):
            option_ctx = f"{context} options[{index}]"
            option_data = self._require_mapping(entry, option_ctx)
            label = self._require_str(option_data.get("label"), f"{option_ctx} label")
            next_node = option_data.get("next")
            if next_node is not None:
                next_node = self._require_str(next_node, f"{option_ctx} next")
            options.append(DialogueOptionDef(label=label, next_node_id=next_node))
        return tuple(options)
