"""
Dependency injection container for the application.

This module provides a centralized way to create and manage application
dependencies. The ephemeral decision is made here, once, by choosing the
in-memory providers; services never check the mode themselves.
"""

import logging
from pathlib import Path
from typing import Optional

from ..infrastructure import paths
from ..infrastructure.config import ConfigProvider, ConfigRepository, InMemoryConfigRepository
from ..infrastructure.store import InMemoryProjectStore, JsonProjectStore, ProjectStore
from .ci_service import CiService
from .clean_service import CleanService
from .scan_service import ScanService
from .watch_service import WatchService

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    Manages the creation and lifecycle of application services and
    infrastructure components.
    """

    def __init__(
        self,
        ephemeral: bool = False,
        home: Optional[Path] = None,
        config_provider: Optional[ConfigProvider] = None,
        store: Optional[ProjectStore] = None,
    ):
        """
        Initialize the container.

        Args:
            ephemeral: Never read or write persisted files
            home: Per-user codemarks directory (defaults to $HOME/.codemarks,
                resolved lazily so ephemeral mode works without HOME)
            config_provider: Override the config provider (tests)
            store: Override the projects store (tests)
        """
        self.ephemeral = ephemeral
        self._home = home
        self._config_provider = config_provider
        self._store = store

        self._scan_service: Optional[ScanService] = None
        self._watch_service: Optional[WatchService] = None
        self._clean_service: Optional[CleanService] = None
        self._ci_service: Optional[CiService] = None

    @property
    def home(self) -> Path:
        """
        Per-user codemarks directory.

        Raises:
            ConfigurationError: If HOME is not set and no home was given
        """
        if self._home is None:
            self._home = paths.codemarks_home()
        return self._home

    @property
    def config_path(self) -> Path:
        return self.home / paths.CONFIG_FILENAME

    @property
    def projects_path(self) -> Path:
        return self.home / paths.PROJECTS_FILENAME

    @property
    def config_provider(self) -> ConfigProvider:
        """Get the configuration provider."""
        if self._config_provider is None:
            if self.ephemeral:
                self._config_provider = InMemoryConfigRepository()
            else:
                self._config_provider = ConfigRepository(self.config_path)
        return self._config_provider

    @property
    def store(self) -> ProjectStore:
        """Get the projects store."""
        if self._store is None:
            if self.ephemeral:
                self._store = InMemoryProjectStore(ephemeral=True)
            else:
                self._store = JsonProjectStore(self.projects_path)
        return self._store

    @property
    def scan_service(self) -> ScanService:
        if self._scan_service is None:
            self._scan_service = ScanService(self.config_provider, self.store)
        return self._scan_service

    @property
    def watch_service(self) -> WatchService:
        if self._watch_service is None:
            self._watch_service = WatchService(self.config_provider, self.store)
        return self._watch_service

    @property
    def clean_service(self) -> CleanService:
        if self._clean_service is None:
            self._clean_service = CleanService(self.store)
        return self._clean_service

    @property
    def ci_service(self) -> CiService:
        if self._ci_service is None:
            self._ci_service = CiService()
        return self._ci_service

    def initialize(self) -> list[Path]:
        """
        Create the per-user directory and default files on first run.

        Does nothing in ephemeral mode.

        Returns:
            Paths of files that were created

        Raises:
            ConfigurationError: If HOME is not set
            OSError: If the files cannot be written
        """
        if self.ephemeral:
            return []

        created: list[Path] = []
        config_provider = self.config_provider
        if isinstance(config_provider, ConfigRepository) and not config_provider.exists():
            config_provider.save(config_provider.load())
            created.append(config_provider.path)

        store = self.store
        if isinstance(store, JsonProjectStore) and not store.exists():
            store.save(store.load())
            created.append(store.path)

        for path in created:
            logger.info("Created default file at %s", path)
        return created
