#!/usr/bin/env python3
"""
KUBEFIELDS ERRORS
-----------------
Fatal conditions for a single input stream. Anything the walker cannot
resolve is NOT an error and never shows up here.

Author: KubeFields Team
Date: 2026-10-18
"""

from typing import Optional


class KubeFieldsError(Exception):
    """Base class for every failure surfaced to the CLI."""


class DocumentError(KubeFieldsError):
    """Input is not valid YAML, or a document root is not a mapping."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class LedgerError(KubeFieldsError):
    """metadata.managedFields exists but cannot be read."""
