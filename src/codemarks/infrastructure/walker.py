"""
Filesystem walker for codemarks scans.

Recursively enumerates text files under a root, honoring:
- built-in ignored directories (VCS metadata, build output, caches)
- hidden files and directories
- ``.gitignore`` / ``.ignore`` in every walked directory, each anchored
  at its own directory
- caller-supplied gitignore-style patterns
- a binary-file heuristic (known extensions, extensionless build artifacts)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, Sequence

import pathspec

logger = logging.getLogger(__name__)

DEFAULT_IGNORED_DIRS = frozenset({
    ".git", ".hg", ".svn",
    "target", "build", "dist",
    "node_modules", "__pycache__", ".venv", "venv",
})

IGNORE_FILENAMES = (".gitignore", ".ignore")

BINARY_EXTENSIONS = frozenset({
    # executables and objects
    "exe", "bin", "dll", "so", "dylib", "o", "a", "lib", "obj", "class", "jar", "pyc", "wasm",
    # images
    "img", "png", "jpg", "jpeg", "gif", "bmp", "ico", "svg", "webp", "tiff",
    # archives
    "zip", "tar", "gz", "tgz", "bz2", "xz", "rar", "7z",
    # media
    "mp3", "wav", "ogg", "mp4", "avi", "mov", "mkv",
    # documents
    "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx",
    # generated text that is never worth scanning
    "lock", "log",
})


def _build_spec(patterns: Sequence[str], source: str) -> pathspec.PathSpec | None:
    """
    Compile gitignore-style patterns one by one.

    Invalid patterns are logged and dropped so the remaining rules still apply.
    """
    valid: list[str] = []
    for pattern in patterns:
        try:
            pathspec.PathSpec.from_lines("gitwildmatch", [pattern])
        except ValueError as e:
            logger.warning("Invalid ignore pattern '%s' in %s: %s", pattern, source, e)
            continue
        valid.append(pattern)

    if not valid:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", valid)


def _read_ignore_file(path: Path) -> list[str]:
    try:
        lines = path.read_text(encoding="utf-8", errors="ignore").splitlines()
    except OSError as e:
        logger.warning("Could not read ignore file %s: %s", path, e)
        return []
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def is_binary_name(path: Path, project_name: str | None = None) -> bool:
    """
    Guess whether a file is binary from its name alone.

    Args:
        path: File path
        project_name: Project key; an extensionless file named after it
            (``app``, ``app-cli``, ``app_debug``) is treated as the
            project's own build artifact

    Returns:
        True if the file should not be read as text
    """
    suffix = path.suffix.lower().lstrip(".")
    if suffix:
        return suffix in BINARY_EXTENSIONS
    if not project_name:
        return False
    name = path.name
    return name == project_name or name.startswith((f"{project_name}-", f"{project_name}_"))


class FileWalker:
    """
    Enumerates scannable files under a root directory.

    Files are yielded in deterministic (sorted) order. Symlinks are not
    followed.
    """

    def __init__(
        self,
        root: Path,
        ignore_patterns: Sequence[str] = (),
        project_name: str | None = None,
        use_ignore_files: bool = True,
    ):
        """
        Initialize the walker.

        Args:
            root: Directory to walk
            ignore_patterns: Extra gitignore-style patterns from the caller
            project_name: Project key used by the binary heuristic
            use_ignore_files: Honor .gitignore/.ignore files in the tree
        """
        self.root = root.resolve()
        self.project_name = project_name
        self.ignore_patterns = list(ignore_patterns)
        self.use_ignore_files = use_ignore_files

        self._user_spec = _build_spec(self.ignore_patterns, "--ignore")
        # Relative directory ("" for the root) -> rules of its ignore files
        self._dir_specs: dict[str, pathspec.PathSpec | None] = {}

    # =========================================================================
    # Rule checks
    # =========================================================================

    def relative_path(self, path: Path) -> str:
        """
        Path relative to the root, '/'-separated.

        Raises:
            ValueError: If path is outside the root
        """
        return path.resolve().relative_to(self.root).as_posix()

    def _ignore_file_spec(self, rel_dir: str) -> pathspec.PathSpec | None:
        """Rules from the ignore files of one directory, loaded once."""
        if rel_dir not in self._dir_specs:
            directory = self.root / rel_dir if rel_dir else self.root
            patterns: list[str] = []
            for filename in IGNORE_FILENAMES:
                ignore_file = directory / filename
                if ignore_file.is_file():
                    patterns.extend(_read_ignore_file(ignore_file))
            self._dir_specs[rel_dir] = _build_spec(patterns, str(directory))
        return self._dir_specs[rel_dir]

    def _matches_spec(self, rel: str, is_dir: bool) -> bool:
        trailing = "/" if is_dir else ""
        if self._user_spec is not None and self._user_spec.match_file(rel + trailing):
            return True
        if not self.use_ignore_files:
            return False

        # Each ancestor's ignore files match paths relative to that ancestor
        parts = rel.split("/")
        for depth in range(len(parts)):
            spec = self._ignore_file_spec("/".join(parts[:depth]))
            if spec is not None and spec.match_file("/".join(parts[depth:]) + trailing):
                return True
        return False

    def _is_ignored_dir(self, name: str, rel: str) -> bool:
        if name in DEFAULT_IGNORED_DIRS or name.startswith("."):
            return True
        return self._matches_spec(rel, is_dir=True)

    def _is_ignored_file(self, name: str, rel: str) -> bool:
        if name.startswith("."):
            return True
        if is_binary_name(Path(name), self.project_name):
            return True
        return self._matches_spec(rel, is_dir=False)

    def is_ignored(self, path: Path) -> bool:
        """
        Check a single file against every rule the walk would apply.

        Paths outside the root are always ignored.
        """
        try:
            rel = self.relative_path(path)
        except ValueError:
            return True

        parts = rel.split("/")
        for depth in range(1, len(parts)):
            if self._is_ignored_dir(parts[depth - 1], "/".join(parts[:depth])):
                return True
        return self._is_ignored_file(parts[-1], rel)

    # =========================================================================
    # Walk
    # =========================================================================

    def walk(self) -> Iterator[Path]:
        """
        Yield every scannable file under the root.

        Unreadable directories are logged and skipped.
        """
        def on_error(error: OSError) -> None:
            logger.warning("Cannot access %s: %s", error.filename, error.strerror)

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=on_error):
            current = Path(dirpath)
            rel_dir = current.relative_to(self.root).as_posix()
            prefix = "" if rel_dir == "." else f"{rel_dir}/"

            dirnames[:] = sorted(
                d for d in dirnames
                if not self._is_ignored_dir(d, f"{prefix}{d}")
                and not (current / d).is_symlink()
            )

            for filename in sorted(filenames):
                if self._is_ignored_file(filename, f"{prefix}{filename}"):
                    continue
                file_path = current / filename
                if file_path.is_symlink() or not file_path.is_file():
                    continue
                yield file_path
