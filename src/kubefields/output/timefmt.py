#!/usr/bin/env python3
"""
KUBEFIELDS TIME FORMATTING
--------------------------
Compact ages ("5m ago", "2h15m ago", "3d ago") and UTC timestamps for
ownership comments.

Author: KubeFields Team
Date: 2026-10-18
"""

from datetime import datetime, timezone


def format_relative(now: datetime, then: datetime) -> str:
    """Age of `then` as seen from `now`. Future timestamps read 'just now'."""
    delta = now - then
    if delta.total_seconds() < 0:
        return "just now"

    total_seconds = int(delta.total_seconds())
    if total_seconds < 60:
        return f"{total_seconds}s ago"

    total_minutes = total_seconds // 60
    if total_minutes < 60:
        secs = total_seconds - total_minutes * 60
        if secs:
            return f"{total_minutes}m{secs}s ago"
        return f"{total_minutes}m ago"

    total_hours = total_minutes // 60
    if total_hours < 24:
        mins = total_minutes - total_hours * 60
        if mins:
            return f"{total_hours}h{mins}m ago"
        return f"{total_hours}h ago"

    total_days = total_hours // 24
    if total_days < 30:
        return f"{total_days}d ago"
    if total_days < 365:
        return f"{total_days // 30}mo ago"
    return f"{total_days // 365}y ago"


def format_absolute(then: datetime) -> str:
    """RFC 3339 / ISO 8601 in UTC, second precision."""
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    return then.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_rfc3339(value: str) -> datetime:
    """Parses managedFields timestamps such as 2024-04-10T00:34:50Z."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp {value!r} has no timezone")
    return parsed
