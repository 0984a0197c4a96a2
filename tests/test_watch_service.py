"""
Watch mode tests.

Covers the debouncer, replace-by-file updates, the single-consumer loop
and one end-to-end run against a real watchdog observer.
"""

import queue
import threading
import time

import pytest

from codemarks.application.matcher import AnnotationMatcher
from codemarks.application.watch_service import (
    Debouncer,
    IncrementalUpdateService,
    WatchService,
)
from codemarks.domain.config import CodemarksConfig
from codemarks.domain.errors import ScanError
from codemarks.domain.models import Codemark, ProjectsDatabase
from codemarks.infrastructure.config import InMemoryConfigRepository
from codemarks.infrastructure.store import InMemoryProjectStore
from codemarks.infrastructure.walker import FileWalker
from codemarks.infrastructure.watcher import ChangeEvent

from conftest import write_lines


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class StopWhenDrained:
    """Stop signal that fires once the event queue is empty."""

    def __init__(self, events):
        self.events = events

    def is_set(self):
        return self.events.empty()


@pytest.fixture
def tree(make_tree):
    return make_tree(
        {
            "a.rs": "// TODO: in a\n",
            "b.rs": "// TODO: in b\n// FIXME: also b\n",
            "node_modules/x.js": "// TODO: vendored\n",
        }
    )


@pytest.fixture
def store():
    return InMemoryProjectStore(
        ProjectsDatabase(
            projects={
                "project": [
                    Codemark("a.rs", 1, "in a"),
                    Codemark("b.rs", 1, "in b"),
                    Codemark("b.rs", 2, "old b", resolved=True),
                ]
            }
        )
    )


@pytest.fixture
def updater(tree, store):
    walker = FileWalker(tree, project_name="project")
    return IncrementalUpdateService(store, walker, AnnotationMatcher(CodemarksConfig().compile()))


def project_state(store):
    return [(c.file, c.line_number, c.description, c.resolved) for c in store.load().get("project")]


class ScriptedEvents:
    """
    Event queue stand-in that runs one step per ``get``.

    A step returns a ChangeEvent, or None to report an empty queue.
    """

    def __init__(self, steps):
        self.steps = list(steps)

    def get(self, timeout=None):
        event = self.steps.pop(0)()
        if event is None:
            raise queue.Empty
        return event


class TestDebouncer:

    def test_path_is_due_after_quiet_window(self, tmp_path):
        clock = FakeClock()
        debouncer = Debouncer(0.5, clock=clock)
        a = tmp_path / "a"

        debouncer.record(a)
        assert debouncer.due() == []

        clock.now += 0.5
        assert debouncer.due() == [a]
        assert len(debouncer) == 0

    def test_new_event_restarts_window(self, tmp_path):
        clock = FakeClock()
        debouncer = Debouncer(0.5, clock=clock)
        a, b = tmp_path / "a", tmp_path / "b"

        debouncer.record(a)
        debouncer.record(b)
        clock.now += 0.4
        debouncer.record(a)

        clock.now += 0.2
        assert debouncer.due() == [b]

        clock.now += 0.3
        assert debouncer.due() == [a]

    def test_zero_window_is_due_immediately(self, tmp_path):
        debouncer = Debouncer(0.0, clock=FakeClock())
        debouncer.record(tmp_path / "a")
        assert debouncer.due() == [tmp_path / "a"]

    def test_drain_returns_everything_pending(self, tmp_path):
        debouncer = Debouncer(10.0, clock=FakeClock())
        debouncer.record(tmp_path / "a")
        debouncer.record(tmp_path / "b")

        assert debouncer.drain() == [tmp_path / "a", tmp_path / "b"]
        assert len(debouncer) == 0


class TestIncrementalUpdate:
    """Replace-by-file semantics."""

    def test_modified_file_replaces_only_its_codemarks(self, tree, store, updater):
        write_lines(tree / "b.rs", "fn b() {}", "// TODO: new in b")

        update = updater.process(tree / "b.rs", "project")

        assert update.relative == "b.rs"
        assert update.matched_count == 1
        assert update.removed == 2
        assert project_state(store) == [
            ("a.rs", 1, "in a", False),
            ("b.rs", 2, "new in b", False),
        ]

    def test_new_file_is_added(self, tree, store, updater):
        write_lines(tree / "c.rs", "// HACK: in c")
        assert updater.update_file(tree / "c.rs", "project") == 1
        assert ("c.rs", 1, "in c", False) in project_state(store)

    def test_deleted_file_is_skipped(self, tree, store, updater):
        before = project_state(store)
        (tree / "b.rs").unlink()

        update = updater.process(tree / "b.rs", "project")

        assert update.skipped_reason == "deleted"
        assert update.matched_count == 0
        assert project_state(store) == before

    def test_undecodable_line_is_skipped(self, tree, store, updater):
        (tree / "b.rs").write_bytes(b"// TODO: caf\xe9\n// TODO: still b\n")

        assert updater.update_file(tree / "b.rs", "project") == 1
        assert project_state(store) == [
            ("a.rs", 1, "in a", False),
            ("b.rs", 2, "still b", False),
        ]

    def test_ignored_file_is_skipped(self, tree, store, updater):
        before = project_state(store)
        update = updater.process(tree / "node_modules" / "x.js", "project")

        assert update.skipped_reason == "ignored"
        assert project_state(store) == before

    def test_directory_is_skipped(self, tree, updater):
        assert updater.process(tree, "project").skipped_reason == "directory"

    def test_file_without_codemarks_and_no_history_is_not_saved(self, tree, store, updater, monkeypatch):
        write_lines(tree / "plain.rs", "fn plain() {}")
        saves = []
        monkeypatch.setattr(store, "save", saves.append)

        assert updater.update_file(tree / "plain.rs", "project") == 0
        assert saves == []


class TestConsume:
    """The single-consumer event loop."""

    def test_burst_is_processed_once_on_stop(self, tree, store, updater):
        write_lines(tree / "a.rs", "// TODO: changed a")
        events = queue.Queue()
        for path in (tree / "a.rs", tree / "a.rs", tree / "node_modules" / "x.js"):
            events.put(ChangeEvent(path, "modified"))

        seen = []
        service = WatchService(InMemoryConfigRepository(), store)
        processed = service.consume(
            events,
            updater,
            "project",
            Debouncer(10.0, clock=FakeClock()),
            StopWhenDrained(events),
            on_update=seen.append,
            poll_interval=0.01,
        )

        # Both a.rs events collapse into one; node_modules is processed but not reported
        assert processed == 2
        assert [u.relative for u in seen] == ["a.rs"]
        assert ("a.rs", 1, "changed a", False) in project_state(store)

    def test_rapid_writes_store_final_content(self, tree, store, updater):
        clock = FakeClock()
        stop = threading.Event()
        a = tree / "a.rs"
        write_lines(a, "// TODO: first")

        def second_write():
            write_lines(a, "// TODO: final")
            clock.now += 0.1
            return ChangeEvent(a, "modified")

        def quiet():
            clock.now += 0.6
            return None

        def finish():
            stop.set()
            return None

        events = ScriptedEvents([lambda: ChangeEvent(a, "modified"), second_write, quiet, finish])
        service = WatchService(InMemoryConfigRepository(), store)

        processed = service.consume(events, updater, "project", Debouncer(0.5, clock=clock), stop)

        assert processed == 1
        assert [c.description for c in store.load().get("project") if c.file == "a.rs"] == ["final"]


class TestWatchService:

    def test_prepare(self, tree, store):
        service = WatchService(InMemoryConfigRepository(), store)
        session, updater = service.prepare(tree, ["*.tmp"], 250)

        assert session.directory == tree.resolve()
        assert session.project == "project"
        assert session.ignore_patterns == ["*.tmp"]
        assert session.debounce_ms == 250
        assert session.pattern == CodemarksConfig().annotation_pattern
        assert updater.walker.root == tree.resolve()

    def test_prepare_missing_directory(self, tmp_path, store):
        with pytest.raises(ScanError):
            WatchService(InMemoryConfigRepository(), store).prepare(tmp_path / "missing")

    def test_watch_end_to_end(self, tree, store):
        service = WatchService(InMemoryConfigRepository(), store)
        session, updater = service.prepare(tree, debounce_ms=0)

        stop = threading.Event()
        updated = threading.Event()

        def on_update(update):
            if update.relative == "c.rs" and update.matched_count:
                updated.set()

        thread = threading.Thread(
            target=service.watch, args=(session, updater), kwargs={"on_update": on_update, "stop": stop}
        )
        thread.start()
        try:
            deadline = time.monotonic() + 10
            while not updated.is_set() and time.monotonic() < deadline:
                write_lines(tree / "c.rs", "// TODO: watched")
                updated.wait(0.5)
        finally:
            stop.set()
            thread.join(timeout=5)

        assert updated.is_set()
        assert ("c.rs", 1, "watched", False) in project_state(store)
        assert not thread.is_alive()
