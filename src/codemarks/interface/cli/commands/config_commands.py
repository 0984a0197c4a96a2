"""
Config Commands - Show and change the annotation pattern.

Wires the ``config`` sub-app: ``show``, ``set-pattern`` and ``reset``.
"""

import logging

import typer
from rich.markup import escape
from rich.table import Table

from codemarks.domain.errors import CodemarksError
from codemarks.interface.cli.console import console, exit_with_error, get_container

logger = logging.getLogger(__name__)


def config_show(ctx: typer.Context):
    """
    Show the current configuration and file locations.
    """
    container = get_container(ctx)

    try:
        config = container.config_provider.load()
    except (CodemarksError, OSError) as e:
        exit_with_error(e, "Error loading configuration")

    table = Table(title="Codemarks Configuration", show_header=False)
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    suffix = "" if not config.is_default else " (default)"
    table.add_row("Annotation pattern", escape(config.annotation_pattern) + suffix)
    if container.ephemeral:
        table.add_row("Storage", "ephemeral (nothing is read or written)")
    else:
        table.add_row("Config file", escape(str(container.config_path)))
        table.add_row("Projects file", escape(str(container.projects_path)))

    console.print(table)


def config_set_pattern(
    ctx: typer.Context,
    pattern: str = typer.Argument(..., help="Regular expression matching an annotation line."),
):
    """
    Set a custom annotation pattern.

    The pattern is compiled first; an invalid regex leaves the stored
    pattern unchanged. The first capture group becomes the description.
    """
    container = get_container(ctx)

    try:
        config = container.config_provider.set_pattern(pattern)
    except (CodemarksError, OSError) as e:
        exit_with_error(e, "Invalid pattern")

    console.print(f"[green]✅ Annotation pattern set to:[/green] {escape(config.annotation_pattern)}")
    if container.ephemeral:
        console.print("[yellow]Ephemeral mode: the pattern was not saved.[/yellow]")


def config_reset(ctx: typer.Context):
    """
    Reset the configuration to defaults.
    """
    container = get_container(ctx)

    try:
        config = container.config_provider.reset()
    except (CodemarksError, OSError) as e:
        exit_with_error(e, "Error resetting configuration")

    console.print(
        f"[green]✅ Configuration reset. Annotation pattern:[/green] {escape(config.annotation_pattern)}"
    )


config_app = typer.Typer(
    name="config",
    help="⚙️ Annotation pattern configuration",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

config_app.command("show")(config_show)
config_app.command("set-pattern")(config_set_pattern)
config_app.command("reset")(config_reset)
