"""
Diff Package - Reconciliation of scans against stored codemarks.

Provides the pure reconcile functions used by the scan and watch services.
"""

from codemarks.application.diff.codemarks_diff import (
    build_identity_index,
    reconcile_codemarks,
    replace_file_codemarks,
)

__all__ = [
    "build_identity_index",
    "reconcile_codemarks",
    "replace_file_codemarks",
]
