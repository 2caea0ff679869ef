#!/usr/bin/env python3
"""
KUBEFIELDS EXPORTER - High-Fidelity Round-Trip
----------------------------------------------
Serialises annotated node graphs back to YAML in kubectl's layout
(2-space mappings, compact sequences) and renders the ownership comments
recorded on each ResourceDocument.

ruamel.yaml writes the document; the exporter then re-reads its own
output to learn the line and column of every node, and places each
comment relative to that position.

Author: KubeFields Team
Date: 2026-10-18
"""

import io
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from kubefields.core.models import ResourceDocument

BLOCK_STYLES = ("|", ">")


@dataclass
class NodePosition:
    line: int         # 0-based line of the node's first character
    column: int
    inline_line: int  # Line an end-of-line comment attaches to


class KubeExporter:
    """
    The Reconstructor: converts annotated node graphs back to YAML text.
    """

    def _yaml(self) -> YAML:
        # ruamel closes its cached serializer after one stream; one instance per call
        yaml = YAML(typ='rt')
        # kubectl style: 2 spaces, sequences flush with their parent key
        yaml.indent(mapping=2, sequence=2, offset=0)
        yaml.width = 4096
        return yaml

    def serialize(self, root: Node) -> str:
        stream = io.StringIO()
        self._yaml().serialize(root, stream)
        return stream.getvalue()

    def export(self, documents: Sequence[ResourceDocument]) -> str:
        """Exports every document into one stream with '---' separators."""
        rendered = [self.render(doc) for doc in documents]
        return "---\n".join(rendered)

    def render(self, document: ResourceDocument) -> str:
        text = self.serialize(document.root)
        if not document.comments:
            return text

        # Re-read our own output; it has the same shape as document.root
        positions: Dict[int, NodePosition] = {}
        _map_positions(document.root, self._yaml().compose(text), positions, set())

        heads: Dict[int, List[Tuple[int, str]]] = {}
        inlines: Dict[int, str] = {}
        lines = text.split("\n")

        for node in _preorder(document.root):
            record = document.comments_for(node)
            pos = positions.get(id(node))
            if record is None or pos is None:
                continue
            if record.head is not None:
                indent = _head_indent(lines[pos.line], pos.column)
                heads.setdefault(pos.line, []).append((indent, record.head))
            if record.inline is not None:
                inlines[pos.inline_line] = record.inline

        out: List[str] = []
        for i, line in enumerate(lines):
            for indent, comment in heads.get(i, []):
                out.append(" " * indent + "# " + comment)
            if i in inlines:
                line = line.rstrip() + " # " + inlines[i]
            out.append(line)
        return "\n".join(out)


def _head_indent(line: str, column: int) -> int:
    """
    Column for a comment line above a node. A node that opens a sequence
    item ("- name: x") gets its comment at the dash, above the whole item.
    """
    prefix = line[:column]
    if "-" in prefix and not prefix.strip(" -"):
        return len(line) - len(line.lstrip(" "))
    return column


def _position(node: Node) -> NodePosition:
    start, end = node.start_mark, node.end_mark
    if isinstance(node, ScalarNode) and node.style not in BLOCK_STYLES:
        inline_line = end.line
    else:
        inline_line = start.line
    return NodePosition(line=start.line, column=start.column, inline_line=inline_line)


def _map_positions(original: Node, emitted: Node, positions: Dict[int, NodePosition], seen: set):
    if id(original) in seen:
        return
    seen.add(id(original))
    positions[id(original)] = _position(emitted)

    if isinstance(original, MappingNode):
        for (key, value), (e_key, e_value) in zip(original.value, emitted.value):
            _map_positions(key, e_key, positions, seen)
            _map_positions(value, e_value, positions, seen)
    elif isinstance(original, SequenceNode):
        for item, e_item in zip(original.value, emitted.value):
            _map_positions(item, e_item, positions, seen)


def _preorder(root: Node, seen: Optional[set] = None):
    if seen is None:
        seen = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node
        if isinstance(node, MappingNode):
            children = [child for pair in node.value for child in pair]
        elif isinstance(node, SequenceNode):
            children = list(node.value)
        else:
            children = []
        stack.extend(reversed(children))
