"""
CLI formatters for codemark listings, scan summaries and clean reports.

This module separates display logic from command logic.
"""

import logging

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from codemarks.application.clean_service import CleanReport
from codemarks.application.scan_service import ScanResult
from codemarks.domain.models import Codemark, ProjectsDatabase

logger = logging.getLogger(__name__)

RESOLVED_MARK = "✅ "
OPEN_MARK = "   "


def format_codemark(codemark: Codemark) -> str:
    """Plain one-line rendering: ``<mark>file:line description``."""
    mark = RESOLVED_MARK if codemark.resolved else OPEN_MARK
    return f"{mark}{codemark.file}:{codemark.line_number} {codemark.description}"


class CodemarkListFormatter:
    """Displays the projects database grouped by project."""

    def __init__(self, console: Console):
        self.console = console

    def display(self, database: ProjectsDatabase, project: str | None = None) -> int:
        """
        Print codemarks grouped by project.

        Args:
            database: Database to show
            project: Only show this project

        Returns:
            Number of codemarks printed
        """
        names = sorted(n for n, c in database.projects.items() if c and (project is None or n == project))
        printed = 0

        for index, name in enumerate(names):
            if index:
                self.console.print()
            self.console.print(f"[bold cyan]{escape(name)}[/bold cyan]")
            for codemark in database.projects[name]:
                line = escape(format_codemark(codemark))
                self.console.print(f"[dim]{line}[/dim]" if codemark.resolved else line)
                printed += 1

        return printed

    def display_summary(self, database: ProjectsDatabase) -> None:
        """Print a per-project count table."""
        table = Table(title="Codemarks by Project")
        table.add_column("Project", style="cyan", no_wrap=True)
        table.add_column("Unresolved", style="yellow", justify="right")
        table.add_column("Resolved", style="green", justify="right")

        for name in sorted(database.projects):
            codemarks = database.projects[name]
            resolved = sum(1 for c in codemarks if c.resolved)
            table.add_row(escape(name), str(len(codemarks) - resolved), str(resolved))

        self.console.print(table)


class ScanResultFormatter:
    """Displays the outcome of a scan."""

    def __init__(self, console: Console):
        self.console = console

    def display(self, result: ScanResult, ephemeral: bool = False) -> None:
        reconcile = result.reconcile
        self.console.print(
            f"[blue]📊 Project '{escape(result.project)}':[/blue] "
            f"{len(reconcile.new)} new, {len(reconcile.resolved)} resolved, "
            f"{len(reconcile.reopened)} reopened, {result.project_unresolved} unresolved "
            f"({result.files_scanned} files scanned)"
        )
        if ephemeral:
            self.console.print(
                f"Found {result.total_unresolved} code annotations (ephemeral mode, nothing saved)"
            )
        else:
            self.console.print(
                f"Found {result.total_unresolved} code annotations and saved to global projects database"
            )


class CleanReportFormatter:
    """Displays what a clean removed or would remove."""

    def __init__(self, console: Console):
        self.console = console

    def display(self, report: CleanReport) -> None:
        if report.total_removed == 0:
            self.console.print("No resolved annotations found to clean")
            return

        if report.dry_run:
            for name, count in sorted(report.removed_by_project.items()):
                self.console.print(f"Would remove {count} resolved annotations from project '{escape(name)}'")
            for name in report.projects_removed:
                self.console.print(f"Would remove project '{escape(name)}' (all annotations are resolved)")
            self.console.print("\n[bold]Dry run summary:[/bold]")
            self.console.print(
                f"Would remove {report.total_removed} resolved annotations "
                f"from {report.projects_affected} projects"
            )
            if report.project_filter:
                self.console.print(f"Filter applied: only project '{escape(report.project_filter)}'")
            self.console.print("Use 'codemarks clean' (without --dry-run) to perform the actual cleanup")
            return

        for name in report.projects_removed:
            self.console.print(
                f"Removed project '{escape(name)}' "
                f"(all {report.removed_by_project[name]} annotations were resolved)"
            )
        self.console.print(
            f"[green]✅ Successfully removed {report.total_removed} resolved annotations "
            f"from {report.projects_affected} projects[/green]"
        )
        for name, count in sorted(report.removed_by_project.items()):
            self.console.print(f"  - {escape(name)}: {count} resolved annotations removed")
