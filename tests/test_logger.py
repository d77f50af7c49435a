"""
Tests for logging setup and version reporting.
"""

import logging

import pytest

from node_feature_discovery import _version
from node_feature_discovery.logger import (
    LOGGER_NAME,
    ConsoleFormatter,
    configure_logging,
    level_from_env,
)


def _record(level, message="Feature label: x"):
    return logging.LogRecord(LOGGER_NAME, level, __file__, 1, message, None, None)


@pytest.fixture
def restore_logging():
    yield
    configure_logging(level=logging.INFO, log_file="")


class TestConsoleFormatter:

    def test_info_is_bare(self):
        assert ConsoleFormatter().format(_record(logging.INFO)) == "Feature label: x"

    def test_warning_is_stamped(self):
        line = ConsoleFormatter().format(_record(logging.WARNING, "source failed"))
        assert "[WARNING] source failed" in line

    def test_debug_names_thread(self):
        record = _record(logging.DEBUG, "probing")
        record.threadName = "nfd-source_0"
        assert "(nfd-source_0) probing" in ConsoleFormatter().format(record)


class TestLevels:

    @pytest.mark.parametrize("value,level", [
        ("debug", logging.DEBUG),
        ("WARN", logging.WARNING),
        ("error", logging.ERROR),
        ("bogus", logging.INFO),
        ("", logging.INFO),
    ])
    def test_level_from_env(self, monkeypatch, value, level):
        monkeypatch.setenv("LOG_LEVEL", value)
        assert level_from_env() == level


def test_file_log_gets_debug(tmp_path, restore_logging):
    log_file = tmp_path / "logs" / "nfd.log"
    log = configure_logging(level=logging.WARNING, log_file=log_file)

    log.debug("hidden on console")
    for handler in log.handlers:
        handler.flush()

    assert "hidden on console" in log_file.read_text()


def test_reconfigure_replaces_handlers(restore_logging):
    configure_logging(level=logging.INFO, log_file="")
    log = configure_logging(level=logging.ERROR, log_file="")
    assert len(log.handlers) == 1
    assert log.handlers[0].level == logging.ERROR


class TestVersion:

    def test_commit_from_env(self, monkeypatch):
        monkeypatch.setenv("GIT_COMMIT", "c6eea1c5d0ffee")
        assert _version.display_version() == f"{_version.__version__}+c6eea1c5"

    def test_no_commit(self, monkeypatch):
        monkeypatch.setattr(_version, "build_commit", lambda: None)
        assert _version.display_version() == _version.__version__
