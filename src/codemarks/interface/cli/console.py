"""
Shared console objects and error exits for CLI commands.
"""

import logging
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from codemarks.application.container import Container
from codemarks.domain.errors import CodemarksError

logger = logging.getLogger(__name__)

# ``ci`` uses 1 for "annotations found", so errors use 2 everywhere
EXIT_ERROR = 2

console = Console(soft_wrap=True, emoji=False, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, emoji=False, highlight=False)


def exit_with_error(error: Exception, context: str | None = None) -> NoReturn:
    """
    Report an error on stderr and exit with EXIT_ERROR.

    Args:
        error: The exception to report
        context: Optional prefix, e.g. "Error scanning directory"
    """
    logger.debug("Command failed", exc_info=error)
    prefix = context or "Error"
    err_console.print(f"[red]❌ {escape(prefix)}:[/red] {escape(str(error))}")
    raise typer.Exit(EXIT_ERROR)


def get_container(ctx: typer.Context, initialize: bool = True) -> Container:
    """
    Fetch the container built by the root callback.

    Args:
        ctx: Typer context
        initialize: Create the per-user files if they are missing

    Raises:
        typer.Exit: If the per-user directory cannot be set up
    """
    container = ctx.obj if isinstance(ctx.obj, Container) else Container()
    if initialize:
        try:
            created = container.initialize()
        except (CodemarksError, OSError) as e:
            exit_with_error(e, "Failed to initialize codemarks")
        for path in created:
            kind = "config" if path.name == "config.json" else "projects"
            console.print(f"Created default {kind} file at {escape(str(path))}")
    return container
