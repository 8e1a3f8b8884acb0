"""Unit tests for logging setup."""

from __future__ import annotations

import json
import logging

from tenant_loader.observability.logger import JsonFormatter, configure_logging, get_logger


def _package_handlers(root: logging.Logger) -> list[logging.Handler]:
    return [h for h in root.handlers if h.get_name() == "tenant_loader.stderr"]


def test_module_loggers_share_package_root() -> None:
    logger = get_logger("tenant_loader.loading.uploader")
    root = logging.getLogger("tenant_loader")

    assert logger.name == "tenant_loader.loading.uploader"
    assert logger.propagate is True
    assert root.propagate is False
    assert len(_package_handlers(root)) == 1


def test_package_handler_is_reused() -> None:
    before = _package_handlers(get_logger())

    get_logger("tenant_loader.a")
    configure_logging("INFO")

    after = _package_handlers(logging.getLogger("tenant_loader"))
    assert after == before
    assert isinstance(after[0], logging.StreamHandler)


def test_foreign_names_are_nested() -> None:
    assert get_logger("cli").name == "tenant_loader.cli"


def test_level_override() -> None:
    logger = get_logger("tenant_loader.test_level", level="debug")
    assert logger.level == logging.DEBUG


def test_configure_logging_sets_root_level() -> None:
    root = configure_logging("WARNING")
    try:
        assert root.level == logging.WARNING
    finally:
        configure_logging("INFO")


def test_json_formatter() -> None:
    record = logging.LogRecord(
        "tenant_loader.x", logging.WARNING, __file__, 1, "PUT %s failed", ("u",), None
    )
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "tenant_loader.x"
    assert payload["message"] == "PUT u failed"
