"""
Clean service tests.
"""

import pytest

from codemarks.application.clean_service import CleanService, clean_database
from codemarks.domain.models import Codemark, ProjectsDatabase
from codemarks.infrastructure.store import InMemoryProjectStore


@pytest.fixture
def database() -> ProjectsDatabase:
    return ProjectsDatabase(
        projects={
            "alpha": [
                Codemark("a.rs", 1, "open"),
                Codemark("a.rs", 5, "done", resolved=True),
            ],
            "beta": [
                Codemark("b.go", 2, "done 1", resolved=True),
                Codemark("b.go", 3, "done 2", resolved=True),
            ],
            "gamma": [Codemark("c.py", 1, "open")],
        }
    )


def descriptions(database: ProjectsDatabase) -> dict[str, list[str]]:
    return {name: [c.description for c in marks] for name, marks in database.projects.items()}


class TestCleanDatabase:

    def test_removes_only_resolved(self, database):
        cleaned, report = clean_database(database)

        assert descriptions(cleaned) == {"alpha": ["open"], "gamma": ["open"]}
        assert report.removed_by_project == {"alpha": 1, "beta": 2}
        assert report.projects_removed == ["beta"]
        assert report.total_removed == 3
        assert report.projects_affected == 2

    def test_project_filter_leaves_others_untouched(self, database):
        cleaned, report = clean_database(database, project_filter="alpha")

        assert descriptions(cleaned) == {
            "alpha": ["open"],
            "beta": ["done 1", "done 2"],
            "gamma": ["open"],
        }
        assert report.total_removed == 1
        assert report.projects_removed == []

    def test_input_is_not_modified(self, database):
        clean_database(database)
        assert len(database.projects["beta"]) == 2


class TestCleanService:

    def test_clean_saves(self, database):
        store = InMemoryProjectStore(database)
        report = CleanService(store).clean()

        assert report.total_removed == 3
        assert store.load().count_resolved() == 0
        assert sorted(store.load().projects) == ["alpha", "gamma"]

    def test_dry_run_changes_nothing(self, database, monkeypatch):
        store = InMemoryProjectStore(database)
        saves = []
        monkeypatch.setattr(store, "save", saves.append)

        report = CleanService(store).clean(dry_run=True)

        assert report.dry_run
        assert report.total_removed == 3
        assert saves == []
        assert store.load().count_resolved() == 3

    def test_nothing_to_clean_does_not_save(self, monkeypatch):
        store = InMemoryProjectStore(ProjectsDatabase(projects={"p": [Codemark("a", 1, "x")]}))
        saves = []
        monkeypatch.setattr(store, "save", saves.append)

        report = CleanService(store).clean()

        assert report.total_removed == 0
        assert saves == []

    def test_unknown_project_filter(self, database):
        store = InMemoryProjectStore(database)
        report = CleanService(store).clean(project="nope")

        assert report.total_removed == 0
        assert store.load().count_resolved() == 3
