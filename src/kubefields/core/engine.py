#!/usr/bin/env python3
"""
KUBEFIELDS ENGINE - The Orchestrator
------------------------------------
Runs a YAML stream through the annotation phases:

1. Load (parse + List unwrap)
2. Ledger extraction (metadata.managedFields)
3. Ownership walk + comment placement
4. Ledger stripping
5. Export, alignment and optional colour

Documents are processed one at a time; nothing is shared between them
except the run configuration and the colour assignment.

Author: KubeFields Team
Date: 2026-10-18
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional

from kubefields.core.models import AnnotateOptions, AnnotationReport, ResourceDocument
from kubefields.output.color import ColorManager, format_output
from kubefields.ownership.ledger import extract_managed_fields, strip_managed_fields
from kubefields.ownership.placement import annotate
from kubefields.yamlio.exporter import KubeExporter
from kubefields.yamlio.loader import KubeLoader

logger = logging.getLogger("kubefields.engine")

NO_MANAGED_FIELDS_WARNING = "no managedFields found. Did you use --show-managed-fields?"


class AnnotationEngine:
    """
    Principal orchestrator: owns the loader, exporter and colour state for
    one run.
    """

    def __init__(self, options: Optional[AnnotateOptions] = None, color_enabled: bool = False,
                 color_manager: Optional[ColorManager] = None):
        self.options = options or AnnotateOptions()
        self.color_enabled = color_enabled
        self.color_manager = color_manager or ColorManager()
        self.loader = KubeLoader()
        self.exporter = KubeExporter()

    def prepare(self, text: str) -> List[ResourceDocument]:
        """Phases 1-4. Raises DocumentError / LedgerError on fatal input."""
        documents = [ResourceDocument(root=root) for root in self.loader.load_documents(text)]
        logger.info("loaded %d document(s)", len(documents))

        # One clock reading for the whole stream keeps ages consistent
        options = self.options
        if options.now is None:
            options = replace(options, now=datetime.now(timezone.utc))

        for position, doc in enumerate(documents):
            doc.entries = extract_managed_fields(doc.root)
            if doc.entries:
                annotate(doc, doc.entries, options)
            doc.stripped = strip_managed_fields(doc.root)

            if doc.unresolved:
                logger.warning("document %d: %d managed field(s) could not be annotated",
                               position, len(doc.unresolved))
                for claim in doc.unresolved:
                    logger.info("  unresolved %s (%s)", claim.path, claim.manager)
        return documents

    def render(self, documents: List[ResourceDocument]) -> str:
        """Phase 5."""
        text = self.exporter.export(documents)
        return format_output(
            text,
            self.color_enabled,
            self.color_manager,
            min_gap=self.options.min_gap,
            outlier_threshold=self.options.outlier_threshold,
        )

    def process(self, text: str) -> AnnotationReport:
        documents = self.prepare(text)
        found = any(doc.entries for doc in documents)
        if not found:
            logger.warning(NO_MANAGED_FIELDS_WARNING)

        return AnnotationReport(
            content=self.render(documents),
            documents=len(documents),
            found_managed_fields=found,
            unresolved=[claim for doc in documents for claim in doc.unresolved],
        )
