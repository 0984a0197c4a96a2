"""Rich output formatters for CLI commands."""

from .codemark_formatters import (
    CleanReportFormatter,
    CodemarkListFormatter,
    ScanResultFormatter,
    format_codemark,
)

__all__ = [
    "CleanReportFormatter",
    "CodemarkListFormatter",
    "ScanResultFormatter",
    "format_codemark",
]
