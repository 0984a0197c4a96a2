"""
Scan Command - Full directory scan.

Scans a directory, reconciles against the stored project and prints
a summary.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer

from codemarks.domain.errors import CodemarksError
from codemarks.interface.cli.console import console, exit_with_error, get_container
from codemarks.interface.cli.formatters import ScanResultFormatter

logger = logging.getLogger(__name__)


def scan(
    ctx: typer.Context,
    directory: Path = typer.Option(
        Path("."),
        "--directory",
        "-d",
        help="Directory to scan.",
    ),
    ignore: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        "-i",
        help="Gitignore-style pattern to skip (repeatable).",
    ),
):
    """
    Scan a directory for code annotations.

    Annotations that disappeared since the last scan are marked resolved;
    annotations that reappear are reopened.
    """
    container = get_container(ctx)

    try:
        result = container.scan_service.scan(directory, ignore or [])
    except (CodemarksError, OSError) as e:
        exit_with_error(e, "Error scanning directory")

    ScanResultFormatter(console).display(result, ephemeral=container.ephemeral)
