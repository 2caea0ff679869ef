#!/usr/bin/env python3
"""
KUBEFIELDS CORE MODELS
----------------------
Defines the data structures shared by the ledger reader, the ownership
walker, the placement engine and the exporter.

The YAML AST is ruamel.yaml's composed node graph. Comment text is kept
next to it in a ResourceDocument, keyed by node identity, so two scalars
with the same text stay distinguishable.

Author: KubeFields Team
Date: 2026-10-18
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ruamel.yaml.nodes import MappingNode, Node


class PlacementMode(str, Enum):
    INLINE = "inline"
    ABOVE = "above"


class TimeMode(str, Enum):
    RELATIVE = "relative"
    ABSOLUTE = "absolute"
    HIDE = "hide"


@dataclass(frozen=True)
class OwnerInfo:
    """Who last set a field, and when."""
    manager: str
    subresource: str = ""
    time: Optional[datetime] = None
    operation: str = ""


@dataclass
class ManagedFieldsEntry:
    """
    One element of metadata.managedFields.

    `fields` is the FieldsV1 ownership tree converted to plain dicts:
    selector key -> child tree, where an empty dict is a leaf marker.
    """
    manager: str = ""
    operation: str = ""
    subresource: str = ""
    api_version: str = ""
    time: Optional[datetime] = None
    fields: Optional[Dict[str, Any]] = None

    @property
    def owner(self) -> OwnerInfo:
        return OwnerInfo(
            manager=self.manager,
            subresource=self.subresource,
            time=self.time,
            operation=self.operation,
        )


@dataclass
class AnnotationTarget:
    """
    A resolved ownership claim.

    key_node is the mapping key that led to the owned value (None for
    sequence items and the document root). value_node is the owned node.
    """
    key_node: Optional[Node]
    value_node: Node
    owner: OwnerInfo


@dataclass
class UnresolvedClaim:
    manager: str
    path: str


@dataclass
class NodeComments:
    node: Node                    # Held so the id() key stays valid
    head: Optional[str] = None    # Rendered on its own line above the node
    inline: Optional[str] = None  # Rendered at the end of the node's line


@dataclass
class ResourceDocument:
    """
    One Kubernetes object undergoing annotation.

    Built by the loader, enriched by the ledger reader and the placement
    engine, consumed by the exporter.
    """
    root: MappingNode
    entries: List[ManagedFieldsEntry] = field(default_factory=list)
    comments: Dict[int, NodeComments] = field(default_factory=dict)
    unresolved: List[UnresolvedClaim] = field(default_factory=list)
    stripped: bool = False

    def _record(self, node: Node) -> NodeComments:
        record = self.comments.get(id(node))
        if record is None:
            record = NodeComments(node=node)
            self.comments[id(node)] = record
        return record

    def set_head_comment(self, node: Node, text: str):
        self._record(node).head = text

    def set_line_comment(self, node: Node, text: str):
        self._record(node).inline = text

    def comments_for(self, node: Node) -> Optional[NodeComments]:
        return self.comments.get(id(node))


@dataclass
class AnnotateOptions:
    """Run-wide configuration. `now` is injectable for deterministic output."""
    placement: PlacementMode = PlacementMode.INLINE
    time_mode: TimeMode = TimeMode.RELATIVE
    show_operation: bool = False
    now: Optional[datetime] = None
    min_gap: int = 2
    outlier_threshold: int = 40


@dataclass
class AnnotationReport:
    content: str
    documents: int = 0
    found_managed_fields: bool = False
    unresolved: List[UnresolvedClaim] = field(default_factory=list)
