"""
Shared fixtures for codemarks tests.

Every test runs with HOME pointed at a temporary directory so the real
~/.codemarks is never touched.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

from codemarks.infrastructure.logging_config import ColoredFormatter, PlainFormatter


@pytest.fixture(autouse=True)
def home(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated HOME directory."""
    home_dir = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.delenv("CODEMARKS_EPHEMERAL", raising=False)
    return home_dir


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging during CLI tests."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, (ColoredFormatter, PlainFormatter)):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def codemarks_dir(home: Path) -> Path:
    return home / ".codemarks"


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory writing a source tree.

    Usage:
        root = make_tree({"src/a.rs": "// TODO: fix X\\n"})
        root = make_tree({"a.py": "# TODO: x\\n"}, name="other")
    """

    def _make(files: dict[str, str | bytes], name: str = "project") -> Path:
        root = tmp_path / name
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make


def write_lines(path: Path, *lines: str) -> None:
    """Overwrite a file with the given lines."""
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
