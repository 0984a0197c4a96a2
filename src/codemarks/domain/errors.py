"""
Codemarks error types.

Configuration and scan failures are fatal for the requested command.
Per-file read errors and corrupt persisted files are recovered locally
and never surface as exceptions.
"""


class CodemarksError(Exception):
    """Base exception for all codemarks errors."""


class ConfigurationError(CodemarksError):
    """
    Invalid or unusable configuration.

    Raised for a missing HOME variable or an annotation pattern that
    does not compile.
    """


class ScanError(CodemarksError):
    """The requested scan target cannot be scanned."""
