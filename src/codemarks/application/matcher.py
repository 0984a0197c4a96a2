"""
Annotation Matcher - Extract codemarks from lines of text.

Applies the configured pattern to one line at a time and returns a
normalized description, or None when the line is not an annotation.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator

from codemarks.domain.models import Codemark

logger = logging.getLogger(__name__)

# Longer descriptions are almost always minified code or binary noise.
MAX_DESCRIPTION_LENGTH = 200

# Fragments of regex syntax; a description containing one is most likely
# the default pattern quoted in source (e.g. codemarks scanning itself).
REGEX_SELF_MATCH_MARKERS = ("\\s*", "\\s+", "(.*)", "(?:", "(?i)")


def looks_like_false_positive(description: str) -> bool:
    """Check whether a captured description is a self-match or noise."""
    if len(description) > MAX_DESCRIPTION_LENGTH:
        return True
    return any(marker in description for marker in REGEX_SELF_MATCH_MARKERS)


class AnnotationMatcher:
    """
    Matches annotation lines with a compiled pattern.

    The description is the pattern's first capture group, stripped. For
    custom patterns without a group the whole stripped line is used.
    """

    def __init__(self, pattern: re.Pattern):
        """
        Initialize the matcher.

        Args:
            pattern: Compiled annotation pattern
        """
        self.pattern = pattern

    def match_line(self, line: str) -> str | None:
        """
        Match a single line.

        Args:
            line: Line content without the trailing newline

        Returns:
            Description text, or None if the line is not an annotation
        """
        match = self.pattern.search(line)
        if match is None:
            return None

        if self.pattern.groups >= 1:
            description = (match.group(1) or "").strip()
        else:
            description = line.strip()

        if looks_like_false_positive(description):
            logger.debug("Discarding likely false positive: %.60s", description)
            return None

        return description

    def match_lines(self, lines: Iterable[str], file: str) -> Iterator[Codemark]:
        """
        Yield a codemark for every annotation line.

        Args:
            lines: Lines of one file, in order
            file: Relative path to record on each codemark
        """
        for line_number, line in enumerate(lines, start=1):
            description = self.match_line(line.rstrip("\r\n"))
            if description is not None:
                yield Codemark(file=file, line_number=line_number, description=description)
