"""
Logging utilities for yoda_scan.

Library modules only ever call ``get_logger(__name__)``. The command-line
entry point (or any script driving a scan) calls ``configure_logging()`` once
to attach a console handler to the ``yoda_scan`` logger; the root logger is
never touched.

Example
-------
    from yoda_scan.utils.logging import configure_logging, get_logger
    configure_logging(level="DEBUG")
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"
LOG_LEVEL_ENV = "YODA_SCAN_LOG_LEVEL"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Configure the ``yoda_scan`` logger (never root).

    Parameters
    ----------
    level:
        Logging level (e.g. "DEBUG", "INFO"). Defaults to the
        YODA_SCAN_LOG_LEVEL env var, or "INFO" if unset.
    fmt, datefmt:
        Formatter strings; sensible defaults if omitted.
    force:
        If True, remove existing handlers first. If False, an already
        attached stderr handler is reused and only the level is updated.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("yoda_scan")
    logger.setLevel(level)

    formatter = logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                h.setLevel(level)
                return logger

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``logging.getLogger(name)``, or the package logger if name is None."""
    return logging.getLogger(name or "yoda_scan")
