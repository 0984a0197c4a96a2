"""
JSON file helpers shared by the config repository and the projects store.

Writes are whole-document and atomic: content goes to a temporary file in
the target directory which then replaces the target.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Any | None:
    """
    Read a JSON file, tolerating absence and corruption.

    Args:
        path: File to read

    Returns:
        Parsed data, or None if the file is missing, unreadable or invalid
    """
    if not path.exists():
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Ignoring corrupt JSON file %s: %s", path, e)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
    return None


def write_json_atomic(path: Path, data: Any) -> None:
    """
    Serialize data and atomically replace the target file.

    Args:
        path: Destination file; its directory is created if needed
        data: JSON-serializable data

    Raises:
        OSError: If the file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2, ensure_ascii=False)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug("Saved %s", path)
