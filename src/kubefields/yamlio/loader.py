#!/usr/bin/env python3
"""
KUBEFIELDS LOADER
-----------------
Parses a YAML stream into ruamel.yaml node graphs, one per Kubernetes
object. `kind: List` documents are unwrapped into their items.

Author: KubeFields Team
Date: 2026-10-18
"""

import logging
from typing import Iterable, List

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from ruamel.yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from kubefields.core.errors import DocumentError
from kubefields.ownership.ledger import get_map_value, get_map_value_node

logger = logging.getLogger("kubefields.loader")

NULL_VALUES = ("", "~", "null", "Null", "NULL")


def _is_empty_document(node: Node) -> bool:
    return isinstance(node, ScalarNode) and node.style is None and node.value in NULL_VALUES


def drop_comments(node: Node, seen=None):
    """Clears comments the composer attached; ownership comments replace them."""
    if seen is None:
        seen = set()
    if id(node) in seen:
        return
    seen.add(id(node))
    node.comment = None
    if isinstance(node, MappingNode):
        for key_node, value_node in node.value:
            drop_comments(key_node, seen)
            drop_comments(value_node, seen)
    elif isinstance(node, SequenceNode):
        for item in node.value:
            drop_comments(item, seen)


def unwrap_list_kind(root: MappingNode) -> List[Node]:
    """Returns the items of a `kind: List` object, or the object itself."""
    if get_map_value(root, "kind") != "List":
        return [root]
    items = get_map_value_node(root, "items")
    if not isinstance(items, SequenceNode):
        return [root]
    logger.debug("unwrapped List with %d items", len(items.value))
    return list(items.value)


class KubeLoader:
    """Round-trip composer configured like the exporter that mirrors it."""

    def __init__(self):
        self.yaml = YAML(typ='rt')

    def compose(self, text: str) -> List[Node]:
        try:
            return [node for node in self.yaml.compose_all(text) if node is not None]
        except YAMLError as e:
            mark = getattr(e, 'problem_mark', None) or getattr(e, 'context_mark', None)
            if mark is not None:
                raise DocumentError(f"invalid YAML: {getattr(e, 'problem', None) or e}",
                                    line=mark.line + 1, column=mark.column + 1) from e
            raise DocumentError(f"invalid YAML: {e}") from e

    def load_documents(self, text: str) -> List[MappingNode]:
        """Every Kubernetes object in the stream, in order."""
        documents: List[MappingNode] = []
        for position, node in enumerate(self.compose(text)):
            if _is_empty_document(node):
                continue
            for root in self._roots(node, position):
                drop_comments(root)
                documents.append(root)
        return documents

    def _roots(self, node: Node, position: int) -> Iterable[MappingNode]:
        if not isinstance(node, MappingNode):
            raise DocumentError(f"document {position} is not a mapping (got {type(node).__name__})")
        for root in unwrap_list_kind(node):
            if not isinstance(root, MappingNode):
                raise DocumentError(f"List item in document {position} is not a mapping")
            yield root
