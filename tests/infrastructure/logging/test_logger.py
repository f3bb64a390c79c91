"""Tests for the ledger-sync logging helpers."""

import logging
from unittest.mock import MagicMock

import pytest

from ledger_sync.infrastructure.logging import logger as logger_module


@pytest.fixture
def fixed_root(tmp_path, monkeypatch):
    """Send log files to a temporary project root with a fixed date."""
    monkeypatch.setattr(logger_module, "get_project_root", lambda: tmp_path)
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "_today_stamp",
        staticmethod(lambda: "20240315"),
    )
    return tmp_path


def _drop_handlers(name: str) -> None:
    target = logging.getLogger(name)
    for handler in list(target.handlers):
        handler.close()
        target.removeHandler(handler)


def test_builder_writes_dated_file_and_console(fixed_root) -> None:
    """A console-enabled logger gets one file and one stream handler."""
    _drop_handlers("ledger_sync.test.sync")

    built = (
        logger_module.LoggerBuilder()
        .name("ledger_sync.test.sync")
        .subdir("sync")
        .prefix("sync")
        .console(True)
        .level(logging.DEBUG)
        .build()
    )

    try:
        file_handlers = [
            h for h in built.handlers if isinstance(h, logging.FileHandler)
        ]
        assert built.level == logging.DEBUG
        assert built.propagate is False
        assert len(built.handlers) == 2
        assert file_handlers[0].baseFilename == str(
            fixed_root / "logs" / "sync" / "20240315_sync.log"
        )
    finally:
        _drop_handlers("ledger_sync.test.sync")


def test_builder_reuses_configured_logger(fixed_root) -> None:
    """Building twice must not stack handlers."""
    _drop_handlers("ledger_sync.test.reuse")
    builder = logger_module.LoggerBuilder().name("ledger_sync.test.reuse")

    try:
        first = builder.build()
        second = builder.build()

        assert first is second
        assert len(second.handlers) == 1
    finally:
        _drop_handlers("ledger_sync.test.reuse")


def test_builder_uses_custom_handler_factories(fixed_root) -> None:
    """Injected factories receive the log path and formatter."""
    _drop_handlers("ledger_sync.test.custom")
    fmt = logging.Formatter("%(message)s")
    handler = logging.NullHandler()
    captured = {}

    def file_factory(path, formatter):
        captured["path"] = path
        captured["formatter"] = formatter
        return handler

    try:
        built = (
            logger_module.LoggerBuilder()
            .name("ledger_sync.test.custom")
            .subdir("usage")
            .prefix("usage")
            .formatter(lambda: fmt)
            .file_handler(file_factory)
            .build()
        )

        assert built.handlers == [handler]
        assert captured["formatter"] is fmt
        assert captured["path"] == (
            fixed_root / "logs" / "usage" / "20240315_usage.log"
        )
    finally:
        _drop_handlers("ledger_sync.test.custom")


def test_logger_wrapper_forwards_every_level(monkeypatch) -> None:
    """Wrapper methods should call the built logger."""
    fake_logger = MagicMock()
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "build",
        lambda self: fake_logger,
    )
    monkeypatch.setattr(logger_module.AppLogger, "_instance", None)

    app_logger = logger_module.get_app_logger()
    app_logger.debug("decoding")
    app_logger.info("stored")
    app_logger.warning("slow")
    app_logger.error("failed")
    app_logger.critical("halted")

    fake_logger.debug.assert_called_with("decoding")
    fake_logger.info.assert_called_with("stored")
    fake_logger.warning.assert_called_with("slow")
    fake_logger.error.assert_called_with("failed")
    fake_logger.critical.assert_called_with("halted")


def test_app_and_usage_loggers_are_separate_singletons(monkeypatch) -> None:
    """Each logger kind is built once and kept apart from the other."""
    built_with = []

    def _fake_build(self):
        built_with.append((self._name, self._subdir, self._console))
        return MagicMock()

    monkeypatch.setattr(logger_module.LoggerBuilder, "build", _fake_build)
    monkeypatch.setattr(logger_module.AppLogger, "_instance", None)
    monkeypatch.setattr(logger_module.UsageLogger, "_instance", None)

    app_logger = logger_module.get_app_logger()
    usage_logger = logger_module.get_usage_logger()

    assert logger_module.get_app_logger() is app_logger
    assert logger_module.get_usage_logger() is usage_logger
    assert app_logger is not usage_logger
    assert built_with == [
        ("ledger_sync.app", "app", True),
        ("ledger_sync.usage", "usage", False),
    ]
