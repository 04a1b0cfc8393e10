"""Process-wide logging configuration for the console front end."""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_CONFIGURED = False
_MAX_BYTES = 1024 * 1024
_BACKUP_COUNT = 3


def configure_logging() -> None:
    """Install a stderr handler, plus a rotating file when CYOA_LOG_PATH is set."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    level_name = os.environ.get("CYOA_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
    level = getattr(logging, level_name, logging.WARNING)
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    log_path = os.environ.get("CYOA_LOG_PATH", "").strip()
    if log_path:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=path,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _CONFIGURED = True
