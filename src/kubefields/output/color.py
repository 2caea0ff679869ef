#!/usr/bin/env python3
"""
KUBEFIELDS COLOR ANNOTATOR
--------------------------
Colours the "# ..." part of ownership comments by manager. Each manager
gets the next palette colour on first sight and keeps it for the rest of
the run. YAML content is never coloured.

Author: KubeFields Team
Date: 2026-10-18
"""

import os
import re
from typing import Dict, List, Optional, Sequence

from rich.color import ColorSystem
from rich.style import Style

from kubefields.output.aligner import MIN_GAP, OUTLIER_THRESHOLD, align_comments, split_inline_comment

BRIGHT_PALETTE: List[Style] = [
    Style(color="bright_cyan"),
    Style(color="bright_green"),
    Style(color="bright_yellow"),
    Style(color="bright_magenta"),
    Style(color="bright_red"),
    Style(color="bright_blue"),
    Style(color="cyan"),
    Style(color="yellow"),
]

# The opening line of a mapping entry or a sequence item
NODE_LINE = re.compile(r"""^(-( |$)|['"].*?['"]:( |$)|[^\s#][^#]*?:( |$))""")


class ColorManager:
    def __init__(self, palette: Optional[Sequence[Style]] = None):
        self.palette = list(palette or BRIGHT_PALETTE)
        self.assigned: Dict[str, int] = {}

    def style_for(self, manager: str) -> Style:
        if manager not in self.assigned:
            self.assigned[manager] = len(self.assigned)
        return self.palette[self.assigned[manager] % len(self.palette)]

    def wrap(self, text: str, manager: str) -> str:
        return self.style_for(manager).render(text, color_system=ColorSystem.STANDARD)


def extract_manager_name(comment: str) -> str:
    """'# kubectl /status (5m ago)' -> 'kubectl'"""
    text = comment[2:] if comment.startswith("# ") else comment
    for delimiter in (" /", " ("):
        idx = text.find(delimiter)
        if idx >= 0:
            return text[:idx]
    return text


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def is_emitted_head_comment(lines: List[str], index: int) -> bool:
    """
    Head comments sit directly above the node they describe (or above
    another head comment for that node) at the node's indentation.
    Comment-like lines inside block scalars fail this test and stay plain.
    """
    indent = _indent(lines[index])
    for line in lines[index + 1:]:
        if _indent(line) != indent:
            return False
        stripped = line.strip()
        if stripped.startswith("# "):
            continue
        return bool(NODE_LINE.match(stripped))
    return False


def colorize_line(line: str, manager: ColorManager, head_comment: bool = True) -> str:
    content, comment, has_inline = split_inline_comment(line)
    if has_inline:
        name = extract_manager_name(comment)
        if name:
            return content + " " + manager.wrap(comment, name)
        return line

    stripped = line.lstrip(" \t")
    if head_comment and stripped.startswith("# "):
        start = len(line) - len(stripped)
        name = extract_manager_name(stripped)
        if name:
            return line[:start] + manager.wrap(stripped, name)
    return line


def colorize(text: str, manager: ColorManager) -> str:
    lines = text.split("\n")
    return "\n".join(
        colorize_line(line, manager, head_comment=is_emitted_head_comment(lines, i))
        for i, line in enumerate(lines)
    )


def resolve_color(flag: str, is_tty: bool) -> bool:
    """always/never win outright; auto honours NO_COLOR, then the TTY."""
    if flag == "always":
        return True
    if flag == "never":
        return False
    if os.environ.get("NO_COLOR"):
        return False
    return is_tty


def format_output(text: str, color_enabled: bool, manager: Optional[ColorManager] = None,
                  min_gap: int = MIN_GAP, outlier_threshold: int = OUTLIER_THRESHOLD) -> str:
    """Alignment always runs; colour only when enabled."""
    aligned = align_comments(text, min_gap=min_gap, outlier_threshold=outlier_threshold)
    if color_enabled and manager is not None:
        return colorize(aligned, manager)
    return aligned
