"""
Project name detection.

Infers a project key from the build manifest found in a directory,
falling back to the directory name.
"""

from __future__ import annotations

import json
import logging
import re
import tomllib
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "unknown"


def _read_text(path: Path) -> str | None:
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Could not read manifest %s: %s", path, e)
        return None


def _read_toml(path: Path) -> dict | None:
    content = _read_text(path)
    if content is None:
        return None
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        logger.debug("Could not parse %s: %s", path, e)
        return None


def _strip_quotes(value: str) -> str:
    return value.strip().strip(",").strip().strip("\"'")


# =============================================================================
# Manifest readers (each returns None when the manifest gives no name)
# =============================================================================

def _from_cargo(directory: Path) -> str | None:
    data = _read_toml(directory / "Cargo.toml")
    if data is None:
        return None
    name = data.get("package", {}).get("name") or data.get("workspace", {}).get("package", {}).get("name")
    return name if isinstance(name, str) else None


def _from_package_json(directory: Path) -> str | None:
    content = _read_text(directory / "package.json")
    if content is None:
        return None
    try:
        name = json.loads(content).get("name")
    except (json.JSONDecodeError, AttributeError):
        return None
    return name if isinstance(name, str) else None


def _from_go_mod(directory: Path) -> str | None:
    content = _read_text(directory / "go.mod")
    if not content:
        return None
    first_line = content.splitlines()[0].strip()
    if not first_line.startswith("module "):
        return None
    module = first_line[len("module "):].strip()
    return module.rsplit("/", 1)[-1] or module


def _from_build_sbt(directory: Path) -> str | None:
    content = _read_text(directory / "build.sbt")
    if content is None:
        return None
    for line in content.splitlines():
        line = line.strip()
        if line.startswith("name :="):
            return _strip_quotes(line.split(":=", 1)[1])
    return None


def _from_pom(directory: Path) -> str | None:
    content = _read_text(directory / "pom.xml")
    if content is None:
        return None
    # Skip the <parent> block so its artifactId is not mistaken for ours
    content = re.sub(r"<parent>.*?</parent>", "", content, flags=re.DOTALL)
    match = re.search(r"<artifactId>\s*([^<]+?)\s*</artifactId>", content)
    return match.group(1) if match else None


def _from_gradle(directory: Path) -> str | None:
    for filename in ("build.gradle", "build.gradle.kts", "settings.gradle", "settings.gradle.kts"):
        content = _read_text(directory / filename)
        if content is None:
            continue
        for line in content.splitlines():
            line = line.strip()
            if line.startswith("rootProject.name") and "=" in line:
                return _strip_quotes(line.split("=", 1)[1])
    return None


def _from_mix(directory: Path) -> str | None:
    content = _read_text(directory / "mix.exs")
    if content is None:
        return None
    match = re.search(r"\bapp:\s*:(\w+)", content)
    return match.group(1) if match else None


def _from_pyproject(directory: Path) -> str | None:
    data = _read_toml(directory / "pyproject.toml")
    if data is None:
        return None
    name = data.get("project", {}).get("name") or data.get("tool", {}).get("poetry", {}).get("name")
    return name if isinstance(name, str) else None


def _from_setup_py(directory: Path) -> str | None:
    content = _read_text(directory / "setup.py")
    if content is None:
        return None
    match = re.search(r"""\bname\s*=\s*["']([^"']+)["']""", content)
    return match.group(1) if match else None


MANIFEST_READERS: list[tuple[str, Callable[[Path], str | None]]] = [
    ("Cargo.toml", _from_cargo),
    ("package.json", _from_package_json),
    ("go.mod", _from_go_mod),
    ("build.sbt", _from_build_sbt),
    ("pom.xml", _from_pom),
    ("build.gradle", _from_gradle),
    ("mix.exs", _from_mix),
    ("pyproject.toml", _from_pyproject),
    ("setup.py", _from_setup_py),
]


def detect_project_name(directory: Path) -> str:
    """
    Determine the project key for a directory.

    Manifests are checked in a fixed order of preference; the first one
    yielding a non-empty name wins.

    Args:
        directory: Scanned directory (need not exist)

    Returns:
        Project name, directory name, or "unknown"
    """
    try:
        resolved = directory.resolve(strict=True)
    except OSError:
        resolved = directory.absolute()

    if resolved.is_dir():
        for manifest, reader in MANIFEST_READERS:
            name = reader(resolved)
            if name and name.strip():
                logger.debug("Project name '%s' detected from %s", name.strip(), manifest)
                return name.strip()

    return resolved.name or UNKNOWN_PROJECT
