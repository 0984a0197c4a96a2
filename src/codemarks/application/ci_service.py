"""
CI Service - Stateless annotation check for pipelines.

Uses the given pattern (or the built-in default, never the stored
configuration) and never reads or writes the projects store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from codemarks.application.matcher import AnnotationMatcher
from codemarks.application.scan_service import read_text_lines, resolve_directory
from codemarks.domain.config import DEFAULT_ANNOTATION_PATTERN, compile_pattern
from codemarks.infrastructure.project_detection import detect_project_name
from codemarks.infrastructure.walker import FileWalker

logger = logging.getLogger(__name__)

EXIT_CLEAN = 0
EXIT_MATCHES_FOUND = 1


@dataclass(frozen=True)
class CiMatch:
    path: str
    line_number: int
    line: str


@dataclass
class CiResult:
    """Matches found by a CI check."""
    directory: Path
    matches: list[CiMatch] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.matches)

    @property
    def exit_code(self) -> int:
        """0 when clean, 1 when any annotation was found."""
        return EXIT_MATCHES_FOUND if self.matches else EXIT_CLEAN


class CiService:
    """Counts annotations in a tree for CI gating."""

    def check(
        self,
        directory: Path,
        pattern: str | None = None,
        ignore_patterns: Sequence[str] = (),
    ) -> CiResult:
        """
        Find every annotation under a directory.

        Args:
            directory: Directory to check
            pattern: Regex to use instead of the default
            ignore_patterns: Extra gitignore-style patterns

        Returns:
            CiResult with one entry per matching line

        Raises:
            ConfigurationError: If the pattern is invalid
            ScanError: If the directory cannot be scanned
        """
        matcher = AnnotationMatcher(compile_pattern(pattern or DEFAULT_ANNOTATION_PATTERN))
        root = resolve_directory(directory)
        walker = FileWalker(root, ignore_patterns, project_name=detect_project_name(root))

        result = CiResult(directory=root)
        for path in walker.walk():
            try:
                lines = read_text_lines(path)
            except OSError as e:
                logger.debug("Skipping unreadable file %s: %s", path, e)
                continue
            relative = walker.relative_path(path)
            for line_number, line in enumerate(lines, start=1):
                line = line.rstrip("\r\n")
                if matcher.match_line(line) is not None:
                    result.matches.append(CiMatch(relative, line_number, line.strip()))

        logger.info("CI check found %d annotations under %s", result.count, root)
        return result
