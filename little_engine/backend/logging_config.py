"""
Logging configuration.

Readable output for local play, JSON lines (python-json-logger) when
LOG_FORMAT_JSON is enabled.
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

READABLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(log_level: str = "INFO", use_json: bool = False) -> None:
    """Configure the root logger; safe to call more than once."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if use_json:
        handler.setFormatter(JsonFormatter(
            JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
        ))
    else:
        handler.setFormatter(logging.Formatter(READABLE_FORMAT))

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # 第三方库太吵
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
