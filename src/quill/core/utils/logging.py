"""
Logging setup for quill, on loguru.

Library modules just ``from loguru import logger``. The CLI calls
:func:`configure_logging` once with the loaded config; the ``logging``
section picks the level, an optional log file (relative names land in
``paths.log_dir``) and its rotation.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from quill.core.config import Config

CONSOLE_FORMAT = "<level>[{level.name}]</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    *,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace all sinks with stderr at *level* and, if given, a rotated *log_file*."""
    level = level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)
    if log_file:
        logger.add(log_file, level=level, format=FILE_FORMAT, rotation=rotation, retention=retention)


def log_file_path(config: Config) -> str | None:
    """The configured log file, resolved under ``paths.log_dir`` when relative."""
    name = config.get("logging.file") or ""
    if not name:
        return None
    name = os.path.expanduser(str(name))
    if os.path.isabs(name):
        return name
    log_dir = os.path.expanduser(config.get("paths.log_dir") or config.get_data_dir())
    return os.path.join(log_dir, name)


def configure_logging(config: Config, verbose: bool = False) -> None:
    """Apply the ``logging`` config section. *verbose* forces DEBUG."""
    level = "DEBUG" if verbose else str(config.get("logging.level", "WARNING"))
    setup_logging(
        level,
        log_file_path(config),
        rotation=str(config.get("logging.rotation", "10 MB")),
        retention=str(config.get("logging.retention", "7 days")),
    )
    logger.debug(f"quill logging at {level.upper()}")
