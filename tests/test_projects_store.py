"""
Projects store tests.

Covers the JSON file format, corrupt-file fallback, atomic saves and the
in-memory/ephemeral store.
"""

import json
import os

import pytest

from codemarks.domain.models import Codemark, ProjectsDatabase
from codemarks.infrastructure.store import InMemoryProjectStore, JsonProjectStore


@pytest.fixture
def database() -> ProjectsDatabase:
    return ProjectsDatabase(
        projects={
            "alpha": [
                Codemark("src/a.rs", 2, "fix X"),
                Codemark("src/b.rs", 9, "old", resolved=True),
            ],
            "beta": [Codemark("main.go", 1, "café ünïcode")],
        }
    )


class TestJsonProjectStore:
    """File-backed store."""

    def test_missing_file_loads_empty(self, tmp_path):
        store = JsonProjectStore(tmp_path / "projects.json")
        assert store.load().is_empty
        assert not store.exists()

    def test_save_then_load(self, tmp_path, database):
        store = JsonProjectStore(tmp_path / "nested" / "projects.json")
        store.save(database)

        loaded = store.load()
        assert loaded == database
        assert loaded.count_unresolved() == 2
        assert loaded.count_resolved() == 1

    def test_file_format(self, tmp_path, database):
        path = tmp_path / "projects.json"
        JsonProjectStore(path).save(database)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["projects"]["alpha"][0] == {
            "file": "src/a.rs",
            "line_number": 2,
            "description": "fix X",
            "resolved": False,
        }
        # Non-ASCII is written as-is
        assert "café" in path.read_text(encoding="utf-8")

    def test_bare_mapping_is_accepted(self, tmp_path):
        path = tmp_path / "projects.json"
        path.write_text(
            json.dumps({"legacy": [{"file": "x.py", "line_number": 3, "description": "d"}]}),
            encoding="utf-8",
        )

        loaded = JsonProjectStore(path).load()
        assert loaded.get("legacy") == [Codemark("x.py", 3, "d", resolved=False)]

    def test_bare_mapping_with_project_named_projects(self, tmp_path):
        path = tmp_path / "projects.json"
        entry = {"file": "x.py", "line_number": 1, "description": "d"}
        path.write_text(json.dumps({"projects": [entry], "other": [entry]}), encoding="utf-8")

        loaded = JsonProjectStore(path).load()

        assert sorted(loaded.projects) == ["other", "projects"]
        assert loaded.get("projects") == [Codemark("x.py", 1, "d")]

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            "[1, 2, 3]",
            '{"projects": {"p": "not a list"}}',
            '{"projects": {"p": [{"line_number": 1}]}}',
        ],
    )
    def test_corrupt_file_falls_back_to_empty(self, tmp_path, content):
        path = tmp_path / "projects.json"
        path.write_text(content, encoding="utf-8")

        assert JsonProjectStore(path).load().is_empty

    def test_save_leaves_no_temp_files(self, tmp_path, database):
        path = tmp_path / "projects.json"
        store = JsonProjectStore(path)
        store.save(database)
        store.save(ProjectsDatabase())

        assert sorted(os.listdir(tmp_path)) == ["projects.json"]
        assert store.load().is_empty

    def test_failed_write_keeps_previous_content(self, tmp_path, database, monkeypatch):
        path = tmp_path / "projects.json"
        store = JsonProjectStore(path)
        store.save(database)
        before = path.read_text(encoding="utf-8")

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)
        with pytest.raises(OSError):
            store.save(ProjectsDatabase())

        assert path.read_text(encoding="utf-8") == before
        assert sorted(os.listdir(tmp_path)) == ["projects.json"]


class TestInMemoryProjectStore:

    def test_round_trip_is_isolated(self, database):
        store = InMemoryProjectStore()
        store.save(database)

        loaded = store.load()
        loaded.projects["alpha"][0].resolved = True

        assert not store.load().projects["alpha"][0].resolved
        assert store.is_persistent

    def test_ephemeral_discards_saves(self, database):
        store = InMemoryProjectStore(ephemeral=True)
        store.save(database)

        assert store.load().is_empty
        assert not store.is_persistent
