"""
Application layer package.

Use cases and service orchestration: scanning, watching, cleaning and
CI checks, wired together by the Container.
"""
