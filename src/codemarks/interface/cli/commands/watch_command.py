"""
Watch Command - Incremental updates on file changes.

Runs in the foreground until interrupted with Ctrl+C.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from codemarks.application.watch_service import DEFAULT_DEBOUNCE_MS, FileUpdate, WatchSession
from codemarks.domain.errors import CodemarksError
from codemarks.interface.cli.console import console, exit_with_error, get_container

logger = logging.getLogger(__name__)


def print_session(session: WatchSession) -> None:
    console.print(f"[bold]👀 Watching[/bold] {escape(str(session.directory))}")
    console.print(f"Project: {escape(session.project)}")
    if session.ignore_patterns:
        console.print(f"Ignoring: {escape(', '.join(session.ignore_patterns))}")
    console.print(f"Pattern: {escape(session.pattern)}")
    console.print(f"Debounce: {session.debounce_ms}ms")
    console.print("[dim]Press Ctrl+C to stop.[/dim]")


def print_update(update: FileUpdate) -> None:
    """Report one processed file."""
    name = escape(update.relative or str(update.path))

    if update.skipped_reason == "deleted":
        console.print(f"[yellow]File deleted:[/yellow] {name} (entries kept until the next scan)")
        return
    if update.skipped_reason == "unreadable":
        console.print(f"[yellow]Skipped unreadable file:[/yellow] {name}")
        return

    console.print(f"Scanning changed file: {name}")
    if not update.codemarks:
        console.print("  No annotations found")
        return
    console.print(f"  Found {update.matched_count} annotations:")
    for codemark in update.codemarks:
        console.print(f"    Line {codemark.line_number}: {escape(codemark.description)}")


def watch(
    ctx: typer.Context,
    directory: Path = typer.Option(
        Path("."),
        "--directory",
        "-d",
        help="Directory to watch.",
    ),
    ignore: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        "-i",
        help="Gitignore-style pattern to skip (repeatable).",
    ),
    debounce: int = typer.Option(
        DEFAULT_DEBOUNCE_MS,
        "--debounce",
        help="Milliseconds a file must stay unchanged before it is processed.",
        min=0,
    ),
):
    """
    Watch a directory and update codemarks as files change.

    Each changed file has its codemarks replaced; other files are untouched.
    """
    container = get_container(ctx)
    service = container.watch_service

    try:
        session, updater = service.prepare(directory, ignore or [], debounce)
    except (CodemarksError, OSError) as e:
        exit_with_error(e, "Error starting watch")

    print_session(session)

    try:
        processed = service.watch(session, updater, on_update=print_update)
    except OSError as e:
        exit_with_error(e, "Watch failed")

    logger.info("Watch stopped after %d updates", processed)
    console.print("\nStopped watching.")
