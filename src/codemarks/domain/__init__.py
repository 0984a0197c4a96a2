"""
Domain layer package.

Contains pure data models with no I/O dependencies.
Models are serialized to/from JSON via the infrastructure layer.
"""

from codemarks.domain.models import (
    Codemark,
    ProjectsDatabase,
)

from codemarks.domain.change_types import (
    CodemarkChange,
    ReconcileResult,
    classify_codemark_transition,
)

from codemarks.domain.errors import (
    CodemarksError,
    ConfigurationError,
    ScanError,
)

__all__ = [
    # Core Models
    "Codemark",
    "ProjectsDatabase",
    # Reconciliation Types
    "CodemarkChange",
    "ReconcileResult",
    "classify_codemark_transition",
    # Errors
    "CodemarksError",
    "ConfigurationError",
    "ScanError",
]
