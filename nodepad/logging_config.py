"""Logging configuration for NodePad."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def configure_logging(level: str = "INFO", log_directory: Optional[Path] = None) -> None:
    """Log to stderr and, when a directory is given, to a daily rolling file."""
    handlers: list[dict] = [{"sink": sys.stderr, "level": level}]
    if log_directory is not None:
        handlers.append(
            {
                "sink": Path(log_directory) / "nodepad-{time:YYYYMMDD}.log",
                "level": level,
                "rotation": "00:00",
                "encoding": "utf-8",
                "enqueue": True,
            }
        )
    logger.configure(handlers=handlers)
