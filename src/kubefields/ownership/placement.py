#!/usr/bin/env python3
"""
KUBEFIELDS PLACEMENT ENGINE
---------------------------
Decides which node of a resolved target carries the comment text, and
whether it is a head comment (own line above) or an inline comment (end
of line).

Author: KubeFields Team
Date: 2026-10-18
"""

import logging
from datetime import datetime, timezone
from typing import Iterable

from ruamel.yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from kubefields.core.models import (
    AnnotateOptions,
    AnnotationTarget,
    ManagedFieldsEntry,
    PlacementMode,
    ResourceDocument,
)
from kubefields.output.formatter import format_comment
from kubefields.ownership.walker import collect_targets

logger = logging.getLogger("kubefields.placement")


def is_flow_empty(node: Node) -> bool:
    """Empty collections are emitted as {} or [] on the key's line."""
    return isinstance(node, (MappingNode, SequenceNode)) and not node.value


def place(document: ResourceDocument, target: AnnotationTarget, text: str, mode: PlacementMode):
    """Sets exactly one comment field for `target`."""
    key_node, value_node = target.key_node, target.value_node

    if mode == PlacementMode.ABOVE:
        document.set_head_comment(key_node if key_node is not None else value_node, text)
        return

    if isinstance(value_node, ScalarNode):
        # Field values and set members alike
        document.set_line_comment(value_node, text)
    elif is_flow_empty(value_node):
        # A key-level comment is lost next to a flow-style {} / [], so the
        # value carries it
        document.set_line_comment(value_node, text)
    elif isinstance(value_node, MappingNode) and key_node is None:
        # Associative list item: comment goes above the item's first line
        first_key = value_node.value[0][0]
        document.set_head_comment(first_key, text)
    elif isinstance(value_node, SequenceNode) and key_node is None:
        document.set_head_comment(value_node, text)
    elif key_node is not None:
        # Non-empty container: the opening line carries the comment
        document.set_line_comment(key_node, text)
    else:
        logger.debug("no placement for %s owned by %s", type(value_node).__name__, target.owner.manager)


def annotate(document: ResourceDocument, entries: Iterable[ManagedFieldsEntry], options: AnnotateOptions):
    """
    Two passes: collect every target from every ledger entry, then format
    and place one comment per target.
    """
    targets, unresolved = collect_targets(document.root, entries)
    document.unresolved.extend(unresolved)

    now = options.now or datetime.now(timezone.utc)
    for target in targets.values():
        text = format_comment(target.owner, now, options.time_mode, options.show_operation)
        place(document, target, text, options.placement)

    logger.info("placed %d ownership comments (%d claims unresolved)", len(targets), len(unresolved))
