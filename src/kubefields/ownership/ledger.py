#!/usr/bin/env python3
"""
KUBEFIELDS LEDGER
-----------------
Reads metadata.managedFields from a resource's node graph and removes it
once the annotations are in place.

Author: KubeFields Team
Date: 2026-10-18
"""

import logging
from typing import Any, Dict, List, Optional

from ruamel.yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from kubefields.core.errors import LedgerError
from kubefields.core.models import ManagedFieldsEntry
from kubefields.output.timefmt import parse_rfc3339

logger = logging.getLogger("kubefields.ledger")


def get_map_value_node(mapping: Node, key: str) -> Optional[Node]:
    if not isinstance(mapping, MappingNode):
        return None
    for key_node, value_node in mapping.value:
        if isinstance(key_node, ScalarNode) and key_node.value == key:
            return value_node
    return None


def get_map_value(mapping: Node, key: str) -> Optional[str]:
    node = get_map_value_node(mapping, key)
    if isinstance(node, ScalarNode):
        return node.value
    return None


def fields_tree(node: Node) -> Optional[Dict[str, Any]]:
    """Converts a FieldsV1 mapping node into nested dicts keyed by selector."""
    if not isinstance(node, MappingNode):
        return None
    tree: Dict[str, Any] = {}
    for key_node, value_node in node.value:
        if isinstance(key_node, ScalarNode):
            tree[key_node.value] = fields_tree(value_node)
    return tree


def _parse_entry(node: Node, position: int) -> ManagedFieldsEntry:
    if not isinstance(node, MappingNode):
        raise LedgerError(f"managedFields[{position}] is not a mapping")

    entry = ManagedFieldsEntry(
        manager=get_map_value(node, "manager") or "",
        operation=get_map_value(node, "operation") or "",
        subresource=get_map_value(node, "subresource") or "",
        api_version=get_map_value(node, "apiVersion") or "",
    )

    raw_time = get_map_value(node, "time")
    if raw_time:
        try:
            entry.time = parse_rfc3339(raw_time)
        except ValueError as e:
            raise LedgerError(f"managedFields[{position}]: invalid time {raw_time!r}: {e}") from e

    fields_node = get_map_value_node(node, "fieldsV1")
    if fields_node is not None:
        entry.fields = fields_tree(fields_node)
    return entry


def extract_managed_fields(root: Node) -> List[ManagedFieldsEntry]:
    """
    Returns the ledger entries of a resource. A resource without metadata
    or without managedFields yields an empty list, which is not an error.
    """
    if not isinstance(root, MappingNode):
        raise LedgerError(f"expected a mapping at the document root, got {type(root).__name__}")

    metadata = get_map_value_node(root, "metadata")
    if not isinstance(metadata, MappingNode):
        return []

    managed = get_map_value_node(metadata, "managedFields")
    if managed is None:
        return []
    if not isinstance(managed, SequenceNode):
        raise LedgerError(f"metadata.managedFields is not a sequence ({type(managed).__name__})")

    entries = [_parse_entry(item, i) for i, item in enumerate(managed.value)]
    logger.debug("found %d managedFields entries", len(entries))
    return entries


def strip_managed_fields(root: Node) -> bool:
    """Removes metadata.managedFields. Returns True when something was removed."""
    metadata = get_map_value_node(root, "metadata")
    if not isinstance(metadata, MappingNode):
        return False
    for i, (key_node, _) in enumerate(metadata.value):
        if isinstance(key_node, ScalarNode) and key_node.value == "managedFields":
            del metadata.value[i]
            return True
    return False
