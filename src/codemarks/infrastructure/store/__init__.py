"""Projects database persistence (file-backed and in-memory)."""

from .projects_store import InMemoryProjectStore, JsonProjectStore, ProjectStore

__all__ = ["InMemoryProjectStore", "JsonProjectStore", "ProjectStore"]
