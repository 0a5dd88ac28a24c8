"""Logging setup shared by the CLI and the HTTP service."""
from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
QUIET_LOGGERS = ("urllib3", "httpx")


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Attach console and optional file handlers to the root logger once.

    ``level`` and ``log_file`` override ``NOTETHREAD_LOG_LEVEL`` and
    ``NOTETHREAD_LOG_FILE``. An empty log file name disables the file handler.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level_name = (level or os.getenv("NOTETHREAD_LOG_LEVEL", "INFO")).upper()
    if log_file is None:
        log_file = os.getenv("NOTETHREAD_LOG_FILE", "notethread.log")

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    root_logger.setLevel(getattr(logging, level_name, logging.INFO))
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
