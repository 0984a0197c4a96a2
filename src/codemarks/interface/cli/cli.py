"""
CLI main entry point.

This module provides the main entry point for the codemarks CLI,
delegating to the command orchestrator.
"""


def main() -> int:
    """
    Main entry point for the codemarks CLI.

    Returns:
        int: Exit code (0 success, 1 ci matches found, 2 error)
    """
    # Import here to avoid circular imports
    from .orchestrator import app

    try:
        app()
    except SystemExit as e:
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1
    return 0
