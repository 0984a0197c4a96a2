"""
Logging configuration module.

Diagnostics go to stderr so they never mix with command output (``ci``
results are meant to be piped). The default console format is a compact
``codemarks: warning: ...`` line; ``--verbose`` switches to a timestamped
format that includes the emitting module.
"""

import logging
import sys
from pathlib import Path

PACKAGE_PREFIX = "codemarks."

COMPACT_FORMAT = "codemarks: %(levelname)s: %(message)s"
VERBOSE_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
FILE_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s"

# Libraries whose INFO/DEBUG output drowns ours
NOISY_LOGGERS = ("watchdog", "watchdog.observers", "watchdog.observers.inotify_buffer")


class Colors:
    """ANSI escape sequences for terminal colors."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


def short_name(name: str) -> str:
    """``codemarks.application.scan_service`` -> ``application.scan_service``."""
    return name[len(PACKAGE_PREFIX):] if name.startswith(PACKAGE_PREFIX) else name


class ColoredFormatter(logging.Formatter):
    """
    Console formatter with lowercase, optionally colored level names.

    Colors:
        DEBUG    - Dim
        INFO     - Cyan
        WARNING  - Yellow
        ERROR    - Red
        CRITICAL - Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.CYAN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def __init__(self, fmt: str, datefmt: str | None = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        saved = (record.levelname, record.name)

        level = record.levelname.lower()
        name = short_name(record.name)
        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            level = f"{color}{level}{Colors.RESET}"
            name = f"{Colors.DIM}{name}{Colors.RESET}"
        record.levelname, record.name = level, name

        try:
            return super().format(record)
        finally:
            # Other handlers (the log file) must see the untouched record
            record.levelname, record.name = saved


class PlainFormatter(logging.Formatter):
    """Non-colored formatter for file output."""


def setup_logging(level: int = logging.WARNING, log_file: str | Path | None = None) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Console logging level (logging.DEBUG with --verbose)
        log_file: Optional path to a log file that always records DEBUG
    """
    console_formatter = ColoredFormatter(
        fmt=VERBOSE_FORMAT if level <= logging.DEBUG else COMPACT_FORMAT,
        datefmt="%H:%M:%S",
        use_colors=sys.stderr.isatty(),
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(level)

    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(PlainFormatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug("Logging initialized (console level: %s)", logging.getLevelName(level))
    if log_file:
        logger.debug("Log file: %s", log_file)
