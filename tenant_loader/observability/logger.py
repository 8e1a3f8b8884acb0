"""Logging setup.

All loggers live under the `tenant_loader` namespace. The namespace root owns
the single stderr handler; module loggers propagate to it, so one call to
`configure_logging` adjusts the whole package.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "tenant_loader"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_NAME = "tenant_loader.stderr"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _root_logger() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.propagate = False

    if logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(fmt=_TEXT_FORMAT))
        logger.addHandler(handler)

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME, level: Optional[str] = None) -> logging.Logger:
    """Create (or return) a configured logger.

    Args:
        name: Logger name. Names outside the package namespace are nested
            under it.
        level: Optional log level string (e.g. "INFO"). If omitted, keeps existing.

    Returns:
        Logger whose records end up on stderr.
    """

    root = _root_logger()
    if name == ROOT_LOGGER_NAME:
        logger = root
    elif name.startswith(ROOT_LOGGER_NAME + "."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    if level is not None:
        logger.setLevel(level.upper())

    return logger


def configure_logging(level: str = "INFO", structured: bool = False) -> logging.Logger:
    """Apply level and output format to the package root logger."""

    root = _root_logger()
    root.setLevel(level.upper())
    formatter: logging.Formatter = (
        JsonFormatter() if structured else logging.Formatter(fmt=_TEXT_FORMAT)
    )
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setFormatter(formatter)
    return root
