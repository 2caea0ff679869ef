#!/usr/bin/env python3
"""
KUBEFIELDS COMMENT FORMATTER
----------------------------
Builds the text of an ownership comment:

    relative:  "manager /sub (2h15m ago)"
    absolute:  "manager /sub (2026-02-07T12:00:00Z)"
    hide:      "manager /sub"

With show_operation the lowercase operation joins the parens:
"manager (2h15m ago, apply)" or "manager (apply)" when times are hidden.
The leading "# " is added by the exporter, not here.

Author: KubeFields Team
Date: 2026-10-18
"""

from datetime import datetime
from typing import List

from kubefields.core.models import OwnerInfo, TimeMode
from kubefields.output.timefmt import format_absolute, format_relative


def format_comment(owner: OwnerInfo, now: datetime, time_mode: TimeMode = TimeMode.RELATIVE,
                   show_operation: bool = False) -> str:
    base = owner.manager
    if owner.subresource:
        base = f"{owner.manager} /{owner.subresource}"

    details: List[str] = []
    if owner.time is not None:
        if time_mode == TimeMode.RELATIVE:
            details.append(format_relative(now, owner.time))
        elif time_mode == TimeMode.ABSOLUTE:
            details.append(format_absolute(owner.time))

    if show_operation and owner.operation:
        details.append(owner.operation.lower())

    if not details:
        return base
    return f"{base} ({', '.join(details)})"
