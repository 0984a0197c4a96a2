"""
Projects Store - persistence for the codemarks database.

The whole database is loaded, mutated in memory and written back as one
document. Two implementations share one interface:
- JsonProjectStore: projects.json under the per-user directory
- InMemoryProjectStore: tests and ephemeral mode
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from codemarks.domain.models import ProjectsDatabase
from codemarks.infrastructure.json_file import read_json, write_json_atomic

logger = logging.getLogger(__name__)


class ProjectStore(ABC):
    """Whole-document load/save of the projects database."""

    @abstractmethod
    def load(self) -> ProjectsDatabase:
        """Load the database; never fails on missing or corrupt data."""

    @abstractmethod
    def save(self, database: ProjectsDatabase) -> None:
        """Persist the entire database."""

    @property
    def is_persistent(self) -> bool:
        return True


class JsonProjectStore(ProjectStore):
    """
    File-backed store.

    A missing or corrupt projects file loads as an empty database so a
    damaged file never blocks scanning. Saves are atomic replaces.
    """

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: Location of projects.json
        """
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> ProjectsDatabase:
        data = read_json(self.path)
        if data is None:
            return ProjectsDatabase()

        try:
            database = ProjectsDatabase.from_dict(data)
        except ValueError as e:
            logger.warning("Ignoring invalid projects file %s: %s", self.path, e)
            return ProjectsDatabase()

        logger.debug(
            "Loaded %d projects (%d codemarks) from %s",
            len(database.projects),
            sum(len(c) for c in database.projects.values()),
            self.path,
        )
        return database

    def save(self, database: ProjectsDatabase) -> None:
        write_json_atomic(self.path, database.to_dict())


class InMemoryProjectStore(ProjectStore):
    """
    Store kept in process memory.

    With ``ephemeral=True`` it behaves as the no-storage mode: load always
    returns an empty database and save discards its argument.
    """

    def __init__(self, database: ProjectsDatabase | None = None, ephemeral: bool = False):
        self.ephemeral = ephemeral
        self._database = database or ProjectsDatabase()

    @property
    def is_persistent(self) -> bool:
        return not self.ephemeral

    def load(self) -> ProjectsDatabase:
        if self.ephemeral:
            return ProjectsDatabase()
        return copy.deepcopy(self._database)

    def save(self, database: ProjectsDatabase) -> None:
        if self.ephemeral:
            logger.debug("Ephemeral mode: discarding %d projects", len(database.projects))
            return
        self._database = copy.deepcopy(database)
