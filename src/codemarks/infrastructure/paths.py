"""
Per-user file locations.

Everything lives under ``$HOME/.codemarks``. Resolving any of these paths
without a HOME variable is a configuration error.
"""

import os
from pathlib import Path

from codemarks.domain.errors import ConfigurationError

CODEMARKS_DIR_NAME = ".codemarks"
CONFIG_FILENAME = "config.json"
PROJECTS_FILENAME = "projects.json"


def codemarks_home() -> Path:
    """
    Get the per-user codemarks directory (not created).

    Raises:
        ConfigurationError: If HOME is not set
    """
    home = os.environ.get("HOME")
    if not home:
        raise ConfigurationError("Could not find HOME environment variable")
    return Path(home) / CODEMARKS_DIR_NAME


def config_path() -> Path:
    return codemarks_home() / CONFIG_FILENAME


def projects_path() -> Path:
    return codemarks_home() / PROJECTS_FILENAME
