"""
Clean Command - Remove resolved codemarks.
"""

import logging
from typing import Optional

import typer

from codemarks.domain.errors import CodemarksError
from codemarks.interface.cli.console import console, exit_with_error, get_container
from codemarks.interface.cli.formatters import CleanReportFormatter

logger = logging.getLogger(__name__)


def clean(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be removed without changing anything.",
    ),
    project: Optional[str] = typer.Option(
        None,
        "--project",
        "-p",
        help="Only clean this project.",
    ),
):
    """
    Remove resolved codemarks from the projects database.

    Projects left without codemarks are removed entirely.
    """
    container = get_container(ctx)

    if container.ephemeral:
        console.print("Nothing to clean (ephemeral mode).")
        return

    try:
        report = container.clean_service.clean(dry_run=dry_run, project=project)
    except (CodemarksError, OSError) as e:
        exit_with_error(e, "Error cleaning projects database")

    CleanReportFormatter(console).display(report)
