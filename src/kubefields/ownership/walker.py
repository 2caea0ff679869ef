#!/usr/bin/env python3
"""
KUBEFIELDS OWNERSHIP WALKER
---------------------------
Descends a FieldsV1 ownership tree in lock-step with the YAML node graph
and collects one AnnotationTarget per owned node.

A claim that cannot be resolved against the current rendering (a field
that was omitted, an index out of range, an associative key with no
matching element) is skipped. It never aborts the sibling claims, and it
is only reported through the optional `unresolved` list.

Author: KubeFields Team
Date: 2026-10-18
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ruamel.yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from kubefields.core.models import (
    AnnotationTarget,
    ManagedFieldsEntry,
    OwnerInfo,
    UnresolvedClaim,
)
from kubefields.ownership.grammar import (
    AssociativeKey,
    Dot,
    Field,
    Index,
    SetValue,
    parse_segment,
    scalar_text,
)

logger = logging.getLogger("kubefields.walker")

# Keyed by id() of the owned value node
TargetMap = Dict[int, AnnotationTarget]


def is_leaf(subtree: Any) -> bool:
    """An empty mapping means 'this exact path is owned'."""
    return isinstance(subtree, dict) and not subtree


def find_mapping_field(node: Node, name: str) -> Tuple[Optional[Node], Optional[Node]]:
    if not isinstance(node, MappingNode):
        return None, None
    for key_node, value_node in node.value:
        if isinstance(key_node, ScalarNode) and key_node.value == name:
            return key_node, value_node
    return None, None


def find_item_by_index(node: Node, position: int) -> Optional[Node]:
    if not isinstance(node, SequenceNode) or position >= len(node.value):
        return None
    return node.value[position]


def find_item_by_value(node: Node, value: Any) -> Optional[Node]:
    text = scalar_text(value)
    if text is None or not isinstance(node, SequenceNode):
        return None
    for item in node.value:
        if isinstance(item, ScalarNode) and item.value == text:
            return item
    return None


def matches_associative_key(item: MappingNode, fields: Dict[str, Any]) -> bool:
    for name, wanted in fields.items():
        _, value_node = find_mapping_field(item, name)
        if not isinstance(value_node, ScalarNode):
            return False
        text = scalar_text(wanted)
        # Strict equality: false only matches false
        if text is None or value_node.value != text:
            return False
    return True


def find_item_by_key(node: Node, fields: Dict[str, Any]) -> Optional[Node]:
    if not isinstance(node, SequenceNode) or not fields:
        return None
    for item in node.value:
        if isinstance(item, MappingNode) and matches_associative_key(item, fields):
            return item
    return None


def walk(node: Node, parent_key: Optional[Node], subtree: Any, owner: OwnerInfo,
         targets: TargetMap, path: Tuple[str, ...] = (),
         unresolved: Optional[List[UnresolvedClaim]] = None):
    """
    Resolves every claim in `subtree` against `node`.

    parent_key is the mapping key that led to `node`; it becomes the key
    anchor of a dot marker.
    """
    if not isinstance(subtree, dict):
        return

    for key, child in subtree.items():
        selector = parse_segment(key)
        here = path + (key,)

        if isinstance(selector, Dot):
            targets[id(node)] = AnnotationTarget(parent_key, node, owner)
            continue

        if isinstance(selector, Field):
            key_node, value_node = find_mapping_field(node, selector.name)
            if value_node is None:
                _skip(owner, here, unresolved)
                continue
            if is_leaf(child):
                targets[id(value_node)] = AnnotationTarget(key_node, value_node, owner)
            else:
                walk(value_node, key_node, child, owner, targets, here, unresolved)
            continue

        if isinstance(selector, Index):
            item = find_item_by_index(node, selector.position)
        elif isinstance(selector, AssociativeKey):
            item = find_item_by_key(node, selector.fields)
        elif isinstance(selector, SetValue):
            item = find_item_by_value(node, selector.value)
        else:
            item = None

        if item is None:
            _skip(owner, here, unresolved)
            continue

        # Sequence items have no key anchor; set members are always leaves
        if isinstance(selector, SetValue) or is_leaf(child):
            targets[id(item)] = AnnotationTarget(None, item, owner)
        else:
            walk(item, None, child, owner, targets, here, unresolved)


def _skip(owner: OwnerInfo, path: Tuple[str, ...], unresolved: Optional[List[UnresolvedClaim]]):
    dotted = ".".join(path)
    logger.debug("claim %s by %s not found in document", dotted, owner.manager)
    if unresolved is not None:
        unresolved.append(UnresolvedClaim(manager=owner.manager, path=dotted))


def collect_targets(root: Node, entries: Iterable[ManagedFieldsEntry]) -> Tuple[TargetMap, List[UnresolvedClaim]]:
    """Pass 1 of annotation: resolve every entry's claims, last writer wins."""
    targets: TargetMap = {}
    unresolved: List[UnresolvedClaim] = []
    for entry in entries:
        if entry.fields is None:
            continue
        walk(root, None, entry.fields, entry.owner, targets, unresolved=unresolved)
    return targets, unresolved
