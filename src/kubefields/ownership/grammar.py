#!/usr/bin/env python3
"""
KUBEFIELDS PATH GRAMMAR
-----------------------
Parses a single FieldsV1 key into a selector:

    .                         -> Dot
    f:<name>                  -> Field
    k:<json object>           -> AssociativeKey
    v:<json scalar>           -> SetValue
    i:<non-negative int>      -> Index

Anything else is Unknown and is skipped by the walker.

Author: KubeFields Team
Date: 2026-10-18
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class Dot:
    pass


@dataclass(frozen=True)
class Field:
    name: str


@dataclass(frozen=True)
class AssociativeKey:
    fields: Dict[str, Any]


@dataclass(frozen=True)
class SetValue:
    value: Any


@dataclass(frozen=True)
class Index:
    position: int


@dataclass(frozen=True)
class Unknown:
    raw: str


Selector = Union[Dot, Field, AssociativeKey, SetValue, Index, Unknown]

DOT = Dot()


def parse_segment(key: str) -> Selector:
    """Never raises; malformed keys come back as Unknown."""
    if key == ".":
        return DOT

    prefix, sep, payload = key.partition(":")
    if not sep:
        return Unknown(key)

    if prefix == "f":
        return Field(payload)

    if prefix == "k":
        try:
            fields = json.loads(payload)
        except ValueError:
            return Unknown(key)
        if not isinstance(fields, dict):
            return Unknown(key)
        return AssociativeKey(fields)

    if prefix == "v":
        try:
            return SetValue(json.loads(payload))
        except ValueError:
            return Unknown(key)

    if prefix == "i":
        if not (payload.isascii() and payload.isdigit()):
            return Unknown(key)
        return Index(int(payload))

    return Unknown(key)


def scalar_text(value: Any) -> Optional[str]:
    """
    Renders a decoded JSON value the way it would appear as YAML scalar
    text, so it can be compared against ScalarNode.value.
    Returns None for values that can never match a scalar.
    """
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    return None
