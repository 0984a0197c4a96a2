"""
List Command - Show stored codemarks grouped by project.
"""

import logging
from typing import Optional

import typer
from rich.markup import escape

from codemarks.domain.errors import CodemarksError
from codemarks.interface.cli.console import console, exit_with_error, get_container
from codemarks.interface.cli.formatters import CodemarkListFormatter

logger = logging.getLogger(__name__)


def list_codemarks(
    ctx: typer.Context,
    project: Optional[str] = typer.Option(
        None,
        "--project",
        "-p",
        help="Only show codemarks for this project.",
    ),
    summary: bool = typer.Option(
        False,
        "--summary",
        help="Show per-project counts instead of individual codemarks.",
    ),
):
    """
    List all codemarks in the projects database.

    Resolved codemarks are marked with ✅.
    """
    container = get_container(ctx)

    if container.ephemeral:
        console.print("No code annotations available (ephemeral mode).")
        return

    try:
        database = container.store.load()
    except (CodemarksError, OSError) as e:
        exit_with_error(e, "Error loading projects database")

    if database.is_empty:
        console.print("No code annotations found. Run 'codemarks scan' first.")
        return

    if project is not None and not database.get(project):
        console.print(f"No code annotations found for project '{escape(project)}'.")
        return

    formatter = CodemarkListFormatter(console)
    if summary:
        formatter.display_summary(database)
    else:
        formatter.display(database, project)
