"""Configuration persistence (file-backed and in-memory)."""

from .repository import ConfigProvider, ConfigRepository, InMemoryConfigRepository

__all__ = ["ConfigProvider", "ConfigRepository", "InMemoryConfigRepository"]
