#!/usr/bin/env python3
"""
KUBEFIELDS COLUMN ALIGNER
-------------------------
Lines up inline comments of serialised YAML into columns.

Consecutive lines with an inline comment form a block; any other line
breaks it. Within a block, a line whose content is more than
OUTLIER_THRESHOLD characters wider than the narrowest line is aligned on
its own, so one long value does not push its neighbours' comments far
to the right. Every other run of lines is aligned to its widest content
plus MIN_GAP.

Author: KubeFields Team
Date: 2026-10-18
"""

from dataclasses import dataclass
from typing import List, Tuple

MIN_GAP = 2
OUTLIER_THRESHOLD = 40

DELIMITER = " # "


@dataclass
class AnnotatedLine:
    content: str
    comment: str
    has_comment: bool
    original: str


def split_inline_comment(line: str) -> Tuple[str, str, bool]:
    """
    Splits "content # comment" at the last " # ". The comment keeps its
    "# " prefix. Head-comment lines ("   # ...") are not inline comments.
    """
    if line.lstrip(" \t").startswith("#"):
        return line, "", False
    idx = line.rfind(DELIMITER)
    if idx < 0:
        return line, "", False
    return line[:idx], line[idx + 1:], True


def align_comments(text: str, min_gap: int = MIN_GAP, outlier_threshold: int = OUTLIER_THRESHOLD) -> str:
    lines = text.split("\n")
    parsed = []
    for line in lines:
        content, comment, has = split_inline_comment(line)
        parsed.append(AnnotatedLine(content, comment, has, line))

    result: List[str] = []
    i = 0
    while i < len(parsed):
        if not parsed[i].has_comment:
            result.append(parsed[i].original)
            i += 1
            continue
        start = i
        while i < len(parsed) and parsed[i].has_comment:
            i += 1
        result.extend(_align_block(parsed[start:i], min_gap, outlier_threshold))

    return "\n".join(result)


def _align_block(block: List[AnnotatedLine], min_gap: int, outlier_threshold: int) -> List[str]:
    min_width = min(len(al.content) for al in block)

    def is_outlier(al: AnnotatedLine) -> bool:
        return len(al.content) - min_width > outlier_threshold

    # Spans of consecutive non-outliers; each outlier is a span of its own
    spans: List[Tuple[int, int]] = []
    i = 0
    while i < len(block):
        if is_outlier(block[i]):
            spans.append((i, i + 1))
            i += 1
            continue
        start = i
        while i < len(block) and not is_outlier(block[i]):
            i += 1
        spans.append((start, i))

    out: List[str] = []
    for start, end in spans:
        column = max(len(al.content) for al in block[start:end]) + min_gap
        for al in block[start:end]:
            gap = max(column - len(al.content), min_gap)
            out.append(al.content + " " * gap + al.comment)
    return out
