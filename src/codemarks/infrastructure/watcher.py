"""
Filesystem change notification.

Bridges watchdog's observer thread to a plain queue of changed paths so a
single consumer loop can process them in arrival order.
"""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """A file that was created, modified, moved or deleted."""
    path: Path
    kind: str


class _QueueingHandler(FileSystemEventHandler):
    """
    Watchdog handler that pushes file events onto a queue.

    Directory events and access-only events (opened/closed without
    writing) are dropped.
    """

    def __init__(self, events: "queue.Queue[ChangeEvent]"):
        super().__init__()
        self._events = events

    def _put(self, path: str | bytes, kind: str) -> None:
        if isinstance(path, bytes):
            path = path.decode(errors="replace")
        try:
            self._events.put_nowait(ChangeEvent(Path(path), kind))
        except queue.Full:
            logger.warning("Change queue full, dropping event for %s", path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._put(event.src_path, "created")

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._put(event.src_path, "modified")

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._put(event.src_path, "deleted")

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._put(event.src_path, "deleted")
        self._put(event.dest_path, "created")


class DirectoryWatcher:
    """
    Recursive watcher for one directory.

    Usage:
        watcher = DirectoryWatcher(root)
        watcher.start()
        event = watcher.events.get(timeout=1.0)
        watcher.stop()
    """

    def __init__(self, root: Path, max_queue_size: int = 10000):
        """
        Initialize the watcher.

        Args:
            root: Directory to watch recursively
            max_queue_size: Bound on pending events
        """
        self.root = root
        self.events: "queue.Queue[ChangeEvent]" = queue.Queue(maxsize=max_queue_size)
        self._observer: Observer | None = None

    def start(self) -> None:
        """
        Start the observer thread.

        Raises:
            OSError: If the directory cannot be watched
        """
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(_QueueingHandler(self.events), str(self.root), recursive=True)
        observer.start()
        self._observer = observer
        logger.info("Started watching %s", self.root)

    def stop(self) -> None:
        """Stop the observer thread and wait briefly for it to exit."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=2.0)
        self._observer = None
        logger.info("Stopped watching %s", self.root)
