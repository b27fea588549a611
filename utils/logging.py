"""Centralized logging setup for the project."""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union


_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)


def configure_logging(level: Union[int, str] = logging.INFO, logfile: Optional[str] = None) -> None:
    """Configure root logger with console (and optional file) handlers."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if logfile:
        handlers.append(logging.FileHandler(logfile))

    logging.basicConfig(level=level, format=_LOG_FORMAT, handlers=handlers, force=True)


logger = logging.getLogger("pagediff")
