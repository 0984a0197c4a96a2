"""
Codemarks configuration domain model.

This module defines the persisted configuration: the annotation
detection pattern.
"""

import re

from pydantic import BaseModel, ConfigDict, Field

from codemarks.domain.errors import ConfigurationError

DEFAULT_ANNOTATION_PATTERN = r"(?i)(?://|#|<!--|\*)\s*(?:TODO|FIXME|HACK)\s*:?\s*(.*)$"


def compile_pattern(pattern: str) -> re.Pattern:
    """
    Compile an annotation pattern.

    Args:
        pattern: Regular expression source

    Returns:
        Compiled pattern

    Raises:
        ConfigurationError: If the pattern is not a valid regular expression
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"Invalid regex pattern '{pattern}': {e}") from e


class CodemarksConfig(BaseModel):
    """
    Domain model for the global codemarks configuration.

    Unknown fields are ignored and a missing pattern falls back to the
    default, so older or hand-edited files still load.
    """

    model_config = ConfigDict(extra="ignore")

    annotation_pattern: str = Field(
        default=DEFAULT_ANNOTATION_PATTERN,
        description="Regular expression used to detect code annotations",
    )

    @property
    def is_default(self) -> bool:
        return self.annotation_pattern == DEFAULT_ANNOTATION_PATTERN

    def compile(self) -> re.Pattern:
        """Compile the configured pattern, raising ConfigurationError if invalid."""
        return compile_pattern(self.annotation_pattern)
