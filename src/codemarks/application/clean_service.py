"""
Clean Service - Drop resolved codemarks from the store.

This is the only operation that permanently deletes codemarks. Projects
left with no codemarks are removed entirely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from codemarks.domain.models import ProjectsDatabase
from codemarks.infrastructure.store import ProjectStore

logger = logging.getLogger(__name__)


@dataclass
class CleanReport:
    """What a clean removed (or would remove, for a dry run)."""
    dry_run: bool
    project_filter: str | None = None
    removed_by_project: dict[str, int] = field(default_factory=dict)
    projects_removed: list[str] = field(default_factory=list)

    @property
    def total_removed(self) -> int:
        return sum(self.removed_by_project.values())

    @property
    def projects_affected(self) -> int:
        return len(self.removed_by_project)


def clean_database(
    database: ProjectsDatabase,
    project_filter: str | None = None,
    dry_run: bool = False,
) -> tuple[ProjectsDatabase, CleanReport]:
    """
    Compute the database without resolved codemarks.

    Args:
        database: Current database (not modified)
        project_filter: Only clean this project; others are kept as-is
        dry_run: Only recorded on the report

    Returns:
        Tuple of (cleaned database, report)
    """
    report = CleanReport(dry_run=dry_run, project_filter=project_filter)
    cleaned = ProjectsDatabase()

    for name, codemarks in database.projects.items():
        if project_filter is not None and name != project_filter:
            cleaned.projects[name] = codemarks
            continue

        unresolved = [c for c in codemarks if not c.resolved]
        removed = len(codemarks) - len(unresolved)
        if removed:
            report.removed_by_project[name] = removed

        if unresolved:
            cleaned.projects[name] = unresolved
        elif removed:
            report.projects_removed.append(name)

    return cleaned, report


class CleanService:
    """Removes resolved codemarks, optionally for one project only."""

    def __init__(self, store: ProjectStore):
        self.store = store

    def clean(self, dry_run: bool = False, project: str | None = None) -> CleanReport:
        """
        Remove resolved codemarks.

        Nothing is saved on a dry run or when nothing was removed.

        Args:
            dry_run: Report without changing the store
            project: Limit cleaning to this project

        Returns:
            CleanReport
        """
        database = self.store.load()
        cleaned, report = clean_database(database, project, dry_run)

        if dry_run or report.total_removed == 0:
            return report

        self.store.save(cleaned)
        logger.info(
            "Removed %d resolved codemarks from %d projects",
            report.total_removed,
            report.projects_affected,
        )
        return report
