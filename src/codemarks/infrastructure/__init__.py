"""
Infrastructure layer package.

Filesystem-facing components: JSON persistence, directory walking,
change notification, project detection and logging setup.
"""
