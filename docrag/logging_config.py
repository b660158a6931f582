"""
Logging setup shared by the CLI and the pipeline.

All loggers live under the "docrag" namespace so one call configures them.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_ROOT = "docrag"
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int | str = logging.INFO, format_string: Optional[str] = None) -> logging.Logger:
    """
    Configure the "docrag" logger.

    Logs go to stderr so that JSON printed by the CLI on stdout stays clean.
    Calling this again replaces the handler instead of stacking a new one.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(format_string or _FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Third-party clients are chatty at INFO
    for noisy in ("httpx", "urllib3", "chromadb", "sentence_transformers"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the "docrag" logger, e.g. get_logger("chunking")."""
    if name == _ROOT or name.startswith(_ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")
