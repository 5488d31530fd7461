"""Structured JSON logging configuration."""

import logging
import sys
from typing import TextIO

from pythonjsonlogger import jsonlogger


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> None:
    """Configure structured JSON logging for the application (stdout by default)."""
    handler = logging.StreamHandler(stream or sys.stdout)
    formatter = jsonlogger.JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"asctime": "timestamp", "levelname": "level"},
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Suppress noisy loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
