"""
Command-line interface for codemarks.
"""

from .cli import main

__all__ = ["main"]
