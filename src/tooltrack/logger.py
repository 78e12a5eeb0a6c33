"""Loguru configuration for ToolTrack.

The TUI owns the terminal, so records go to ``tooltrack.log`` in the
project root by default; ``tooltrack seed`` and other non-interactive
commands also echo to stderr.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from tooltrack.utils import get_project_root

DEFAULT_LOG_NAME = "tooltrack.log"

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} - {message}"
CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan> - <level>{message}</level>"

# Last file sink path, reused when setup_logger() is called again without one
_current_log_file: Optional[Path] = None


def _resolve_log_file(log_file: Optional[str]) -> Path:
    global _current_log_file
    if log_file is not None:
        path = Path(log_file)
        _current_log_file = path if path.is_absolute() else Path(get_project_root()) / path
    elif _current_log_file is None:
        _current_log_file = Path(get_project_root()) / DEFAULT_LOG_NAME
    return _current_log_file


def setup_logger(
    log_file: Optional[str] = None,
    log_level: str = "INFO",
    rotation: str = "5 MB",
    retention: str = "14 days",
    compression: str = "zip",
    console_output: bool = False,
) -> None:
    """
    (Re)configure the loguru sinks.

    Args:
        log_file: Log file path, relative paths resolve against the project
            root. Defaults to the previous path, or ``tooltrack.log``.
        log_level: Minimum level for every sink
        rotation: Size at which the log file rotates
        retention: How long rotated files are kept
        compression: Format for rotated files
        console_output: Also write colourised records to stderr
    """
    path = _resolve_log_file(log_file)

    logger.remove()
    if console_output:
        logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=True)
    logger.add(
        str(path),
        level=log_level,
        format=FILE_FORMAT,
        rotation=rotation,
        retention=retention,
        compression=compression,
        encoding="utf-8",
    )


def get_logger(name: Optional[str] = None):
    """Logger whose records carry ``name`` (shown in every line)."""
    return logger.bind(name=name or "tooltrack")


# Records logged before setup_logger() runs still need the "name" extra
logger.configure(extra={"name": "tooltrack"})
setup_logger()
