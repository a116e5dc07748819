"""Console and file logging for a devbox run."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .paths import log_file_path

LOGGER_NAME = "devbox"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class _BelowLevel(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def resolve_level(verbose: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    name = os.getenv("DEVBOX_LOG_LEVEL", "INFO")
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(
    log_dir: Path,
    verbose: bool = False,
    stdout: Optional[Console] = None,
    stderr: Optional[Console] = None,
) -> Path:
    """Attach console and file handlers to the devbox logger.

    INFO and WARNING go to stdout, ERROR and above to stderr, both colorized
    by rich. Everything is also written to a timestamped file under log_dir,
    whose path is returned. Calling it again replaces the previous handlers.
    """
    level = resolve_level(verbose)
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_file_path(log_dir)

    out_handler = RichHandler(console=stdout or Console(), show_time=False, show_path=False, markup=False)
    out_handler.addFilter(_BelowLevel(logging.ERROR))
    err_handler = RichHandler(console=stderr or Console(stderr=True), show_time=False, show_path=False, markup=False)
    err_handler.setLevel(logging.ERROR)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    handlers: List[logging.Handler] = [out_handler, err_handler, file_handler]
    for h in handlers:
        logger.addHandler(h)
    logger.setLevel(level)
    logger.propagate = False
    return log_path
