"""
Change Types for the Reconciliation Engine.

This module defines the enums and dataclasses describing what happened
to each codemark when a fresh scan is reconciled against stored state.

Architecture Note:
    This is a pure domain module with NO external dependencies.
    It should only contain enums, dataclasses, and type definitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from codemarks.domain.models import Codemark


class CodemarkChange(str, Enum):
    """
    Outcome of reconciling one codemark.

    Derived from the stored resolved flag before the scan and whether the
    fresh scan contained a matching (file, description) occurrence.
    """

    NEW = "New"  # (none) -> open
    STILL_OPEN = "Still Open"  # open -> open
    REOPENED = "Reopened"  # resolved -> open
    RESOLVED = "Resolved"  # open -> resolved
    STILL_RESOLVED = "Still Resolved"  # resolved -> resolved

    @property
    def is_open(self) -> bool:
        """Whether the codemark is unresolved after this change."""
        return self in (CodemarkChange.NEW, CodemarkChange.STILL_OPEN, CodemarkChange.REOPENED)


def classify_codemark_transition(was_resolved: bool | None, found: bool) -> CodemarkChange:
    """
    Classify a single codemark transition.

    Args:
        was_resolved: Stored resolved flag, or None if the codemark is new
        found: Whether the fresh scan contained it

    Returns:
        The CodemarkChange for this transition
    """
    if was_resolved is None:
        return CodemarkChange.NEW
    if found:
        return CodemarkChange.REOPENED if was_resolved else CodemarkChange.STILL_OPEN
    return CodemarkChange.STILL_RESOLVED if was_resolved else CodemarkChange.RESOLVED


@dataclass
class ReconcileResult:
    """
    Result of reconciling a fresh scan against stored codemarks.

    ``codemarks`` is the next stored state for the project. The change
    lists are kept for logging and CLI summaries.
    """
    codemarks: list[Codemark] = field(default_factory=list)

    new: list[Codemark] = field(default_factory=list)
    resolved: list[Codemark] = field(default_factory=list)
    reopened: list[Codemark] = field(default_factory=list)
    still_open_count: int = 0
    still_resolved_count: int = 0

    def record(self, change: CodemarkChange, codemark: Codemark) -> None:
        """Track a classified codemark in the matching bucket."""
        if change is CodemarkChange.NEW:
            self.new.append(codemark)
        elif change is CodemarkChange.RESOLVED:
            self.resolved.append(codemark)
        elif change is CodemarkChange.REOPENED:
            self.reopened.append(codemark)
        elif change is CodemarkChange.STILL_OPEN:
            self.still_open_count += 1
        else:
            self.still_resolved_count += 1

    @property
    def open_count(self) -> int:
        """Unresolved codemarks in this project after reconciliation."""
        return self.still_open_count + len(self.new) + len(self.reopened)

    @property
    def has_changes(self) -> bool:
        return bool(self.new or self.resolved or self.reopened)
