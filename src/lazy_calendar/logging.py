from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import LoggingSettings, get_settings
from .core import ensure_data_dir

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# stdout carries month grids and agendas, so the console only gets problems.
CONSOLE_LEVEL = logging.WARNING

_INITIALIZED = False


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Send records to the rotating calendar log and warnings to stderr.

    Only the first call has an effect.
    """

    global _INITIALIZED
    if _INITIALIZED:
        return

    settings = settings or get_settings().logging
    level = _level(settings.level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    ensure_data_dir(settings.log_file.parent)
    file_handler = RotatingFileHandler(str(settings.log_file), maxBytes=1_000_000, backupCount=5, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(max(level, CONSOLE_LEVEL))
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(file_handler)
    root.addHandler(console_handler)

    _INITIALIZED = True
    logging.getLogger(__name__).debug("Calendar log at %s (level %s)", settings.log_file, settings.level)


__all__ = ["configure_logging"]
