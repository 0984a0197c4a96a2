"""
Codemarks Diff - Reconcile a fresh scan against stored codemarks.

This is the annotation lifecycle engine. Resolution is inferred: a
codemark becomes resolved purely by disappearing from source, and is
remembered until an explicit clean.

Architecture Note:
    - Pure functions with no side effects beyond the passed lists
    - No database or file I/O
    - Uses domain types for transition classification
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque

from codemarks.domain.change_types import (
    CodemarkChange,
    ReconcileResult,
    classify_codemark_transition,
)
from codemarks.domain.models import Codemark

logger = logging.getLogger(__name__)


# =============================================================================
# Helper Functions
# =============================================================================

def build_identity_index(codemarks: list[Codemark]) -> dict[tuple[str, str], deque[int]]:
    """
    Index codemarks by (file, description).

    Each identity maps to the positions of every codemark carrying it, in
    list order, so duplicate comment lines can be claimed one by one.

    Args:
        codemarks: Codemarks to index

    Returns:
        Dict of identity -> queue of list positions
    """
    index: dict[tuple[str, str], deque[int]] = defaultdict(deque)
    for position, codemark in enumerate(codemarks):
        index[codemark.identity].append(position)
    return index


# =============================================================================
# Main Reconcile Function
# =============================================================================

def reconcile_codemarks(
    existing: list[Codemark],
    fresh: list[Codemark],
) -> ReconcileResult:
    """
    Merge a fresh scan into a project's stored codemarks.

    1. Every existing codemark is assumed resolved.
    2. Each fresh codemark claims one unclaimed existing codemark with the
       same (file, description): it is reopened and its line updated.
    3. Fresh codemarks with nothing left to claim are appended as new.
    4. Unclaimed existing codemarks stay resolved with their last line.

    Existing codemark objects are updated in place and returned in their
    original order, followed by new ones.

    Args:
        existing: Stored codemarks for the project
        fresh: Codemarks found by the latest scan of the project

    Returns:
        ReconcileResult with the next stored state and change details
    """
    result = ReconcileResult()

    previous_state = [c.resolved for c in existing]
    found = [False] * len(existing)

    for codemark in existing:
        codemark.resolved = True

    index = build_identity_index(existing)
    appended: list[Codemark] = []

    for candidate in fresh:
        positions = index.get(candidate.identity)
        if positions:
            position = positions.popleft()
            match = existing[position]
            match.resolved = False
            match.line_number = candidate.line_number
            found[position] = True
        else:
            appended.append(
                Codemark(
                    file=candidate.file,
                    line_number=candidate.line_number,
                    description=candidate.description,
                    resolved=False,
                )
            )

    for position, codemark in enumerate(existing):
        change = classify_codemark_transition(previous_state[position], found[position])
        result.record(change, codemark)

    for codemark in appended:
        result.record(CodemarkChange.NEW, codemark)

    result.codemarks = list(existing) + appended

    logger.debug(
        "Reconcile: %d new, %d resolved, %d reopened, %d still open",
        len(result.new),
        len(result.resolved),
        len(result.reopened),
        result.still_open_count,
    )

    return result


def replace_file_codemarks(
    existing: list[Codemark],
    file: str,
    fresh: list[Codemark],
) -> list[Codemark]:
    """
    Replace every codemark of one file with a fresh set.

    Used by watch mode: history for the file is discarded and rebuilt,
    codemarks of other files are left untouched.

    Args:
        existing: Stored codemarks for the project
        file: Relative path of the changed file
        fresh: Codemarks currently in that file

    Returns:
        New codemark list for the project
    """
    kept = [c for c in existing if c.file != file]
    return kept + list(fresh)
