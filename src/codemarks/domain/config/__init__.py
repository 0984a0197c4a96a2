"""
Configuration domain package.

This package contains the domain layer for configuration management.
"""

from .settings import DEFAULT_ANNOTATION_PATTERN, CodemarksConfig, compile_pattern

__all__ = [
    "DEFAULT_ANNOTATION_PATTERN",
    "CodemarksConfig",
    "compile_pattern",
]
