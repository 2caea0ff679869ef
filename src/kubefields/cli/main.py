#!/usr/bin/env python3
"""
KUBEFIELDS CLI
--------------
Reads Kubernetes resource YAML (with --show-managed-fields), annotates
every managed field with its owner and age, and writes the result to
stdout:

    kubectl get deploy nginx -o yaml --show-managed-fields | kubectl-fields
    kubectl get deploy -o yaml --show-managed-fields | kubectl-fields --above
    kubectl-fields deploy.yaml --mtime absolute --show-operation

Author: KubeFields Team
Date: 2026-10-18
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from kubefields.core.engine import AnnotationEngine
from kubefields.core.errors import KubeFieldsError
from kubefields.core.models import AnnotateOptions, PlacementMode, TimeMode
from kubefields.output.color import ColorManager, resolve_color

# Diagnostics only; the annotated YAML goes straight to stdout
console = Console(stderr=True)

VERSION = "kubectl-fields v0.3.0"


class KubeFieldsCLI:
    """
    CLI wrapper that translates flags into an AnnotationEngine run.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="kubectl-fields",
            description="Annotate Kubernetes YAML with field ownership information",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=__doc__.split("\n\n")[1] if __doc__ else None,
        )
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("--version", action="version", version=VERSION)
        self.parser.add_argument("path", nargs="?", default="-",
                                 help="YAML file to annotate (default: stdin)")
        self.parser.add_argument("--above", action="store_true",
                                 help="Place annotations on the line above each field instead of inline")
        self.parser.add_argument("--mtime", choices=[m.value for m in TimeMode], default=TimeMode.RELATIVE.value,
                                 help="Timestamp display: relative, absolute, hide (default: relative)")
        self.parser.add_argument("--show-operation", action="store_true",
                                 help="Include operation type (apply, update) in annotations")
        self.parser.add_argument("--color", choices=["auto", "always", "never"], default="auto",
                                 help="Color output: auto, always, never (default: auto)")
        self.parser.add_argument("-v", "--verbose", action="count", default=0,
                                 help="Increase log verbosity (-v info, -vv debug)")

    def _setup_logging(self, verbosity: int):
        level = logging.WARNING
        if verbosity == 1:
            level = logging.INFO
        elif verbosity > 1:
            level = logging.DEBUG
        logging.basicConfig(
            level=level,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        )

    def _read_input(self, path: str) -> str:
        if path == "-":
            return sys.stdin.read()
        input_path = Path(path)
        if not input_path.is_file():
            raise KubeFieldsError(f"path '{path}' not found")
        return input_path.read_text(encoding='utf-8-sig')

    def run(self, argv: Optional[List[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        self._setup_logging(args.verbose)

        options = AnnotateOptions(
            placement=PlacementMode.ABOVE if args.above else PlacementMode.INLINE,
            time_mode=TimeMode(args.mtime),
            show_operation=args.show_operation,
        )
        engine = AnnotationEngine(
            options,
            color_enabled=resolve_color(args.color, sys.stdout.isatty()),
            color_manager=ColorManager(),
        )

        try:
            report = engine.process(self._read_input(args.path))
        except KubeFieldsError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False, soft_wrap=True)
            return 1

        sys.stdout.write(report.content)
        sys.stdout.flush()
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KubeFieldsCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(130)


if __name__ == "__main__":
    main()
