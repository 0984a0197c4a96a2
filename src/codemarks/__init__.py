"""
Codemarks - Track TODO/FIXME/HACK annotations across source trees.

Scans a directory for inline code annotations, stores them in a per-user
projects database and infers which ones were resolved between scans.

Usage:
    # CLI (recommended)
    codemarks scan --directory .
    codemarks list

    # Programmatic
    from codemarks.application.container import Container

    container = Container()
    result = container.scan_service.scan(Path("."))
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
