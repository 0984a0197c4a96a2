"""
Watch Service - Change-driven incremental updates.

Each debounced change event re-reads one file and replaces that file's
codemarks in its project. Other files of the project are not touched and
no resolution history is kept for the changed file.

Events are consumed by a single loop, in arrival order, so only one
thread ever reads or writes the store.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from codemarks.application.diff import replace_file_codemarks
from codemarks.application.matcher import AnnotationMatcher
from codemarks.application.scan_service import read_file_codemarks, resolve_directory
from codemarks.domain.models import Codemark
from codemarks.infrastructure.config import ConfigProvider
from codemarks.infrastructure.project_detection import detect_project_name
from codemarks.infrastructure.store import ProjectStore
from codemarks.infrastructure.walker import FileWalker
from codemarks.infrastructure.watcher import ChangeEvent, DirectoryWatcher

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 500


class Debouncer:
    """
    Per-path trailing-edge debounce.

    Every event restarts its path's quiet interval. A path becomes due once
    no event has arrived for it for a whole window, and is then dropped
    from the last-seen map, so a burst of writes is processed once with
    the final content.
    """

    def __init__(self, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the debouncer.

        Args:
            window_seconds: Minimum quiet interval per path
            clock: Monotonic time source (injectable for tests)
        """
        self.window = window_seconds
        self._clock = clock
        self._last_seen: dict[Path, float] = {}

    def record(self, path: Path) -> None:
        """Note an event for path, restarting its quiet interval."""
        # Re-insert so due paths come out in order of their last event
        self._last_seen.pop(path, None)
        self._last_seen[path] = self._clock()

    def due(self) -> list[Path]:
        """Remove and return the paths that have been quiet for a whole window."""
        now = self._clock()
        ready = [p for p, t in self._last_seen.items() if now - t >= self.window]
        for path in ready:
            del self._last_seen[path]
        return ready

    def drain(self) -> list[Path]:
        """Remove and return every pending path, quiet or not."""
        pending = list(self._last_seen)
        self._last_seen.clear()
        return pending

    def __len__(self) -> int:
        return len(self._last_seen)


@dataclass
class FileUpdate:
    """Outcome of processing one changed file."""
    path: Path
    relative: str | None
    codemarks: list[Codemark] = field(default_factory=list)
    removed: int = 0
    skipped_reason: str | None = None

    @property
    def matched_count(self) -> int:
        return len(self.codemarks)


class IncrementalUpdateService:
    """
    Replace-by-file updates for one watched directory.

    The walker decides which paths are ignored, exactly as a full scan would.
    """

    def __init__(
        self,
        store: ProjectStore,
        walker: FileWalker,
        matcher: AnnotationMatcher,
    ):
        """
        Initialize the service.

        Args:
            store: Projects database store
            walker: Walker rooted at the watched directory
            matcher: Annotation matcher
        """
        self.store = store
        self.walker = walker
        self.matcher = matcher

    def _replace(self, project_key: str, relative: str, fresh: list[Codemark]) -> int:
        """Swap one file's codemarks; returns how many stored entries were dropped."""
        database = self.store.load()
        existing = database.get(project_key)
        updated = replace_file_codemarks(existing, relative, fresh)
        removed = len(existing) - (len(updated) - len(fresh))

        if removed == 0 and not fresh:
            return 0

        database.projects[project_key] = updated
        self.store.save(database)
        return removed

    def process(self, path: Path, project_key: str) -> FileUpdate:
        """
        Re-read one file and replace its codemarks.

        Args:
            path: Changed file (absolute, or relative to the working directory)
            project_key: Project to update

        Returns:
            FileUpdate describing what happened
        """
        if path.is_dir():
            return FileUpdate(path, None, skipped_reason="directory")

        if self.walker.is_ignored(path):
            return FileUpdate(path, None, skipped_reason="ignored")

        relative = self.walker.relative_path(path)

        # Deleted and unreadable files keep their entries until the next full scan
        if not path.exists():
            logger.info("Skipping deleted file: %s", relative)
            return FileUpdate(path, relative, skipped_reason="deleted")

        fresh = read_file_codemarks(path, relative, self.matcher)
        if fresh is None:
            return FileUpdate(path, relative, skipped_reason="unreadable")

        removed = self._replace(project_key, relative, fresh)
        logger.debug("Updated %s: %d codemarks (%d replaced)", relative, len(fresh), removed)
        return FileUpdate(path, relative, codemarks=fresh, removed=removed)

    def update_file(self, path: Path, project_key: str) -> int:
        """
        Re-read one file and replace its codemarks.

        Returns:
            Number of codemarks matched in the file (0 if skipped)
        """
        return self.process(path, project_key).matched_count


@dataclass
class WatchSession:
    """Everything the CLI needs to report about a running watch."""
    directory: Path
    project: str
    pattern: str
    ignore_patterns: list[str]
    debounce_ms: int


class WatchService:
    """
    Runs the single-consumer watch loop for one directory.
    """

    def __init__(self, config_provider: ConfigProvider, store: ProjectStore):
        self.config_provider = config_provider
        self.store = store

    def prepare(
        self,
        directory: Path,
        ignore_patterns: Sequence[str] = (),
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> tuple[WatchSession, IncrementalUpdateService]:
        """
        Validate inputs and build the updater for a watch session.

        Raises:
            ConfigurationError: If the configured pattern is invalid
            ScanError: If the directory cannot be watched
        """
        config = self.config_provider.load()
        matcher = AnnotationMatcher(config.compile())
        root = resolve_directory(directory)
        project = detect_project_name(root)

        walker = FileWalker(root, ignore_patterns, project_name=project)
        updater = IncrementalUpdateService(self.store, walker, matcher)
        session = WatchSession(
            directory=root,
            project=project,
            pattern=config.annotation_pattern,
            ignore_patterns=list(ignore_patterns),
            debounce_ms=debounce_ms,
        )
        return session, updater

    def consume(
        self,
        events: "queue.Queue[ChangeEvent]",
        updater: IncrementalUpdateService,
        project: str,
        debouncer: Debouncer,
        stop: threading.Event,
        on_update: Callable[[FileUpdate], None] | None = None,
        poll_interval: float = 0.5,
    ) -> int:
        """
        Process change events until ``stop`` is set.

        A path is processed once it has been quiet for the debounce window.
        Paths still pending when the loop stops are processed before
        returning.

        Args:
            events: Queue filled by the watcher
            updater: Incremental updater for the watched directory
            project: Project key to update
            debouncer: Per-path debounce filter
            stop: Set to end the loop
            on_update: Called for every processed (non-ignored) file
            poll_interval: Seconds to wait for an event before re-checking stop

        Returns:
            Number of paths processed
        """
        processed = 0

        def handle(path: Path) -> None:
            nonlocal processed
            try:
                update = updater.process(path, project)
            except OSError as e:
                logger.error("Error processing %s: %s", path, e)
                return
            processed += 1
            if on_update is not None and update.skipped_reason not in ("ignored", "directory"):
                on_update(update)

        while not stop.is_set():
            # Wake up in time for the earliest pending path
            timeout = min(poll_interval, debouncer.window) if len(debouncer) else poll_interval
            try:
                event = events.get(timeout=timeout)
            except queue.Empty:
                pass
            else:
                debouncer.record(event.path)

            for path in debouncer.due():
                handle(path)

        for path in debouncer.drain():
            handle(path)

        return processed

    def watch(
        self,
        session: WatchSession,
        updater: IncrementalUpdateService,
        on_update: Callable[[FileUpdate], None] | None = None,
        stop: threading.Event | None = None,
    ) -> int:
        """
        Watch a directory until interrupted.

        KeyboardInterrupt ends the loop cleanly; the store is never left
        half-written because every save is an atomic replace.

        Returns:
            Number of events processed
        """
        stop = stop or threading.Event()
        watcher = DirectoryWatcher(session.directory)
        debouncer = Debouncer(session.debounce_ms / 1000.0)

        watcher.start()
        try:
            return self.consume(watcher.events, updater, session.project, debouncer, stop, on_update)
        except KeyboardInterrupt:
            logger.info("Watch interrupted")
            return 0
        finally:
            watcher.stop()
