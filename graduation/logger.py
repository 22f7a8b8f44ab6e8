"""
Logging setup for the command line.

Library modules only call logging.getLogger(__name__). The CLI calls
configure_logging once: pipeline warnings (skipped rows, unresolved fields,
conflicts) go to stderr, and with --log-dir every run is also kept in
rotating files.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import LOG_BACKUP_COUNT, LOG_MAX_BYTES
from .ui import TerminalDisplay

# (file name, level, written only with --verbose)
LOG_FILES = [
    ("app.log", logging.INFO, False),
    ("error.log", logging.ERROR, False),
    ("debug.log", logging.DEBUG, True),
]

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


class ConsoleFormatter(logging.Formatter):
    """
    One short line per record: "warning: line 4: Column 'StudentID' is empty".

    Verbose runs prefix the time and the logger name. The level is colored
    with the TerminalDisplay palette when stderr is a terminal.
    """

    LEVEL_COLORS = {
        "DEBUG": TerminalDisplay.DIM,
        "INFO": TerminalDisplay.CYAN,
        "WARNING": TerminalDisplay.YELLOW,
        "ERROR": TerminalDisplay.RED,
        "CRITICAL": TerminalDisplay.BOLD + TerminalDisplay.RED,
    }

    def __init__(self, verbose: bool = False, color: bool = False):
        super().__init__(datefmt="%H:%M:%S")
        self.verbose = verbose
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname.lower()
        if self.color:
            level = f"{self.LEVEL_COLORS.get(record.levelname, '')}{level}{TerminalDisplay.RESET}"

        line = f"{level}: {record.getMessage()}"
        if self.verbose:
            line = f"{self.formatTime(record, self.datefmt)} {record.name} {line}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _stream_supports_color(stream) -> bool:
    if "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def _file_handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


# Handlers installed by configure_logging, replaced on the next call
_installed_handlers = []


def configure_logging(debug_enabled: bool = False, log_dir: Optional[Path] = None) -> None:
    """
    Install the console handler (and, with log_dir, the rotating files) on the root logger.

    The console shows warnings and errors; debug_enabled lowers it to
    DEBUG and adds debug.log. Calling it again replaces only the handlers
    installed by the previous call.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug_enabled else logging.INFO)
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if debug_enabled else logging.WARNING)
    console.setFormatter(ConsoleFormatter(
        verbose=debug_enabled, color=_stream_supports_color(sys.stderr),
    ))
    _installed_handlers.append(console)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        for filename, level, verbose_only in LOG_FILES:
            if verbose_only and not debug_enabled:
                continue
            _installed_handlers.append(_file_handler(log_dir / filename, level))

    for handler in _installed_handlers:
        root_logger.addHandler(handler)
