"""
Scan Service - Full-tree scan orchestrator.

Walks a directory, matches every line, reconciles the fresh codemarks
against the stored project and persists the result.

Usage:
    from codemarks.application.container import Container

    result = Container().scan_service.scan(Path("."), ["*.min.js"])
    print(result.total_unresolved)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from codemarks.application.diff import reconcile_codemarks
from codemarks.application.matcher import AnnotationMatcher
from codemarks.domain.change_types import ReconcileResult
from codemarks.domain.errors import ScanError
from codemarks.domain.models import Codemark
from codemarks.infrastructure.config import ConfigProvider
from codemarks.infrastructure.project_detection import detect_project_name
from codemarks.infrastructure.store import ProjectStore
from codemarks.infrastructure.walker import FileWalker

logger = logging.getLogger(__name__)


def read_text_lines(path: Path) -> list[str]:
    """
    Read a file as UTF-8, decoding one line at a time.

    A line that is not valid UTF-8 is replaced by an empty string, so the
    rest of the file is still matched and line numbers stay correct.

    Raises:
        OSError: If the file cannot be opened or read
    """
    lines: list[str] = []
    with open(path, "rb") as f:
        for line_number, raw in enumerate(f, start=1):
            try:
                lines.append(raw.decode("utf-8"))
            except UnicodeDecodeError:
                logger.debug("Skipping undecodable line %s:%d", path, line_number)
                lines.append("")
    return lines


def read_file_codemarks(path: Path, relative: str, matcher: AnnotationMatcher) -> list[Codemark] | None:
    """
    Match every line of one file.

    Args:
        path: File to read as UTF-8 text
        relative: Path to record on the codemarks
        matcher: Annotation matcher

    Returns:
        Codemarks in line order, or None if the file could not be read
        (missing, permission denied)
    """
    try:
        lines = read_text_lines(path)
    except OSError as e:
        logger.debug("Skipping unreadable file %s: %s", path, e)
        return None
    return list(matcher.match_lines(lines, relative))


def resolve_directory(directory: Path) -> Path:
    """
    Canonicalize a scan target.

    Raises:
        ScanError: If the directory does not exist or is not a directory
    """
    try:
        resolved = directory.resolve(strict=True)
    except OSError as e:
        raise ScanError(f"Directory not found: {directory}") from e
    if not resolved.is_dir():
        raise ScanError(f"Not a directory: {directory}")
    return resolved


@dataclass
class ScanResult:
    """Outcome of one full scan."""
    directory: Path
    project: str
    files_scanned: int = 0
    files_skipped: int = 0
    reconcile: ReconcileResult = field(default_factory=ReconcileResult)
    total_unresolved: int = 0

    @property
    def project_unresolved(self) -> int:
        return self.reconcile.open_count


class ScanService:
    """
    Coordinates a full directory scan.

    The stored database is loaded once, the project's entry replaced by
    the reconciled list and the whole database saved once.
    """

    def __init__(self, config_provider: ConfigProvider, store: ProjectStore):
        """
        Initialize the scan service.

        Args:
            config_provider: Source of the annotation pattern
            store: Projects database store
        """
        self.config_provider = config_provider
        self.store = store

    def collect(
        self,
        root: Path,
        matcher: AnnotationMatcher,
        ignore_patterns: Sequence[str] = (),
        project_name: str | None = None,
    ) -> tuple[list[Codemark], int, int]:
        """
        Collect fresh codemarks for a directory without touching the store.

        Args:
            root: Canonical directory to walk
            matcher: Annotation matcher
            ignore_patterns: Extra ignore patterns
            project_name: Project key for the binary heuristic

        Returns:
            Tuple of (codemarks, files scanned, files skipped)
        """
        walker = FileWalker(root, ignore_patterns, project_name=project_name)
        fresh: list[Codemark] = []
        scanned = skipped = 0

        for path in walker.walk():
            codemarks = read_file_codemarks(path, walker.relative_path(path), matcher)
            if codemarks is None:
                skipped += 1
                continue
            scanned += 1
            fresh.extend(codemarks)

        return fresh, scanned, skipped

    def scan(self, directory: Path, ignore_patterns: Sequence[str] = ()) -> ScanResult:
        """
        Scan a directory and update its project in the store.

        Args:
            directory: Directory to scan
            ignore_patterns: Extra gitignore-style patterns to skip

        Returns:
            ScanResult; ``total_unresolved`` counts every project in the store

        Raises:
            ConfigurationError: If the configured pattern is invalid
            ScanError: If the directory cannot be scanned
        """
        # Compile before touching the filesystem so a bad pattern fails fast
        matcher = AnnotationMatcher(self.config_provider.load().compile())

        root = resolve_directory(directory)
        project = detect_project_name(root)
        logger.info("Scanning %s as project '%s'", root, project)

        fresh, scanned, skipped = self.collect(root, matcher, ignore_patterns, project)

        database = self.store.load()
        reconcile = reconcile_codemarks(database.get(project), fresh)
        database.projects[project] = reconcile.codemarks
        self.store.save(database)

        result = ScanResult(
            directory=root,
            project=project,
            files_scanned=scanned,
            files_skipped=skipped,
            reconcile=reconcile,
            total_unresolved=database.count_unresolved(),
        )

        logger.info(
            "Scanned %d files (%d skipped) in '%s': %d new, %d resolved, %d unresolved overall",
            scanned,
            skipped,
            project,
            len(reconcile.new),
            len(reconcile.resolved),
            result.total_unresolved,
        )

        return result
