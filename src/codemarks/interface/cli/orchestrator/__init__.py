"""
CLI Orchestrator - Main Entry Point

Wires every command into the ``codemarks`` Typer app. The root callback
handles the global options, sets up logging and builds the Container
shared by all commands through ``ctx.obj``.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from codemarks import __version__
from codemarks.application.container import Container
from codemarks.infrastructure.logging_config import setup_logging
from codemarks.interface.cli.commands.ci_command import ci
from codemarks.interface.cli.commands.clean_command import clean
from codemarks.interface.cli.commands.config_commands import config_app
from codemarks.interface.cli.commands.list_command import list_codemarks
from codemarks.interface.cli.commands.scan_command import scan
from codemarks.interface.cli.commands.watch_command import watch
from codemarks.interface.cli.console import console

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="codemarks",
    help="📌 Codemarks helps you track code annotations (TODO, FIXME, HACK) across projects.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    ephemeral: bool = typer.Option(
        False,
        "--ephemeral",
        "--no-storage",
        envvar="CODEMARKS_EPHEMERAL",
        help="Do not read or write any files under ~/.codemarks.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write debug logs to this file.",
    ),
):
    """
    📌 Codemarks - Track code annotations across projects

    Scans source trees for TODO, FIXME and HACK comments and keeps a
    per-project record. Annotations that disappear are marked resolved
    instead of being forgotten.

    Storage: ~/.codemarks/config.json and ~/.codemarks/projects.json,
    or nothing at all with --ephemeral.
    """
    setup_logging(logging.DEBUG if verbose else logging.WARNING, log_file)

    if ctx.obj is None:
        ctx.obj = Container(ephemeral=ephemeral)
    logger.debug("Running '%s' (ephemeral=%s)", ctx.invoked_subcommand, ephemeral)


@app.command("version")
def version():
    """Show the codemarks version."""
    console.print(f"codemarks version {__version__}")


app.command("scan")(scan)
app.command("list")(list_codemarks)
app.command("ci")(ci)
app.command("watch")(watch)
app.command("clean")(clean)
app.add_typer(config_app, name="config")
