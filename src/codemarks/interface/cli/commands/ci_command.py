"""
CI Command - Fail a pipeline when annotations are present.

Exit codes: 0 when none are found, 1 when any are found, 2 on error.
Never reads or writes the per-user files.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from codemarks.domain.errors import CodemarksError
from codemarks.interface.cli.console import console, exit_with_error, get_container

logger = logging.getLogger(__name__)


def ci(
    ctx: typer.Context,
    directory: Path = typer.Option(
        Path("."),
        "--directory",
        "-d",
        help="Directory to check.",
    ),
    pattern: Optional[str] = typer.Option(
        None,
        "--pattern",
        help="Regex to match instead of the built-in default.",
    ),
    ignore: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        "-i",
        help="Gitignore-style pattern to skip (repeatable).",
    ),
):
    """
    Check a directory for annotations and exit non-zero if any are found.
    """
    container = get_container(ctx, initialize=False)

    try:
        result = container.ci_service.check(directory, pattern, ignore or [])
    except (CodemarksError, OSError) as e:
        exit_with_error(e, "Error checking directory")

    for match in result.matches:
        console.print(escape(f"{match.path}:{match.line_number}: {match.line}"))

    if result.count:
        console.print(f"\n[red]Found {result.count} codemarks matching pattern.[/red]")
    else:
        console.print("[green]No codemarks found matching pattern.[/green]")

    raise typer.Exit(result.exit_code)
