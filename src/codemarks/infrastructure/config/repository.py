"""
Configuration repository for loading and saving the codemarks config.

This module provides the infrastructure layer for configuration persistence.
Two implementations share one interface:
- ConfigRepository: JSON file under the per-user directory
- InMemoryConfigRepository: ephemeral mode and tests
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from codemarks.domain.config import CodemarksConfig, compile_pattern
from codemarks.infrastructure.json_file import read_json, write_json_atomic

logger = logging.getLogger(__name__)


class ConfigProvider(ABC):
    """Loads and saves a CodemarksConfig; pattern operations are shared."""

    @abstractmethod
    def load(self) -> CodemarksConfig:
        """Load the current configuration."""

    @abstractmethod
    def save(self, config: CodemarksConfig) -> None:
        """Persist the configuration."""

    def set_pattern(self, pattern: str) -> CodemarksConfig:
        """
        Validate and store a new annotation pattern.

        The pattern is compiled first; nothing is saved if it is invalid,
        so the previously stored pattern stays in effect.

        Args:
            pattern: Regular expression source

        Returns:
            The saved configuration

        Raises:
            ConfigurationError: If the pattern does not compile
        """
        compile_pattern(pattern)
        config = self.load().model_copy(update={"annotation_pattern": pattern})
        self.save(config)
        logger.info("Annotation pattern updated to: %s", pattern)
        return config

    def reset(self) -> CodemarksConfig:
        """Restore and save the default configuration."""
        config = CodemarksConfig()
        self.save(config)
        logger.info("Annotation pattern reset to default")
        return config


class ConfigRepository(ConfigProvider):
    """
    File-backed configuration repository.

    A missing or corrupt file yields the default configuration.
    """

    def __init__(self, path: Path):
        """
        Initialize the config repository.

        Args:
            path: Location of config.json
        """
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> CodemarksConfig:
        """
        Load the configuration.

        Returns:
            Parsed CodemarksConfig, or defaults if unavailable
        """
        data = read_json(self.path)
        if data is None:
            return CodemarksConfig()

        if not isinstance(data, dict):
            logger.warning("Config file %s is not a JSON object, using defaults", self.path)
            return CodemarksConfig()

        try:
            return CodemarksConfig(**data)
        except ValidationError as e:
            logger.warning("Invalid config file %s, using defaults: %s", self.path, e)
            return CodemarksConfig()

    def save(self, config: CodemarksConfig) -> None:
        write_json_atomic(self.path, config.model_dump())
        logger.debug("Saved config file: %s", self.path)


class InMemoryConfigRepository(ConfigProvider):
    """Config provider that never touches the filesystem."""

    def __init__(self, config: CodemarksConfig | None = None):
        self._config = config or CodemarksConfig()

    def load(self) -> CodemarksConfig:
        return self._config.model_copy()

    def save(self, config: CodemarksConfig) -> None:
        self._config = config.model_copy()
