"""
Domain models for Codemarks.

This module contains the core entities:
- Codemark: one matched annotation line
- ProjectsDatabase: project key -> list of codemarks

These models are pure data structures with no I/O dependencies.
They are serialized to/from JSON by the infrastructure layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class Codemark:
    """
    A single code annotation found in a source file.

    Attributes:
        file: Path relative to the scanned root, '/'-separated
        line_number: 1-based line where the annotation was last seen
        description: Captured text after the marker
        resolved: True once a later scan no longer finds the annotation
    """
    file: str
    line_number: int
    description: str
    resolved: bool = False

    @property
    def identity(self) -> tuple[str, str]:
        """Reconciliation identity. Line numbers are deliberately excluded."""
        return (self.file, self.description)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line_number": self.line_number,
            "description": self.description,
            "resolved": self.resolved,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Codemark:
        """
        Build a codemark from its persisted form.

        Raises:
            KeyError: If a required field is missing
            ValueError: If line_number is not an integer
        """
        return cls(
            file=str(data["file"]),
            line_number=int(data["line_number"]),
            description=str(data.get("description", "")),
            resolved=bool(data.get("resolved", False)),
        )


@dataclass
class ProjectsDatabase:
    """
    The whole persisted store: project key -> codemarks.

    Always loaded and saved as a unit.
    """
    projects: dict[str, list[Codemark]] = field(default_factory=dict)

    def get(self, project: str) -> list[Codemark]:
        """Codemarks for a project (empty list if unknown)."""
        return self.projects.get(project, [])

    def iter_codemarks(self) -> Iterator[Codemark]:
        for codemarks in self.projects.values():
            yield from codemarks

    def count_unresolved(self) -> int:
        """Unresolved codemarks across every project."""
        return sum(1 for c in self.iter_codemarks() if not c.resolved)

    def count_resolved(self) -> int:
        return sum(1 for c in self.iter_codemarks() if c.resolved)

    @property
    def is_empty(self) -> bool:
        return not any(self.projects.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "projects": {
                name: [c.to_dict() for c in codemarks]
                for name, codemarks in self.projects.items()
            }
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectsDatabase:
        """
        Build the database from parsed JSON.

        Accepts both the wrapped form {"projects": {...}} and a bare
        {project: [...]} mapping. A bare mapping may contain a project
        literally named "projects"; its value is a list, not an object.

        Raises:
            ValueError: If the structure is not a mapping of lists
        """
        if not isinstance(data, dict):
            raise ValueError("projects database must be a JSON object")

        wrapped = data.get("projects")
        raw_projects = wrapped if isinstance(wrapped, dict) else data

        projects: dict[str, list[Codemark]] = {}
        for name, entries in raw_projects.items():
            if not isinstance(entries, list):
                raise ValueError(f"Project '{name}' must contain a list of codemarks")
            try:
                projects[str(name)] = [Codemark.from_dict(e) for e in entries]
            except (KeyError, TypeError) as e:
                raise ValueError(f"Invalid codemark in project '{name}': {e}") from e

        return cls(projects=projects)
