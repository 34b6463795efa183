# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from grunto.logging_setup import setup_logging


@pytest.fixture()
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)


def test_console_only_by_default(root_logger: logging.Logger) -> None:
    setup_logging()
    assert [type(h) for h in root_logger.handlers] == [logging.StreamHandler]


def test_file_handler_when_log_dir_given(root_logger: logging.Logger, tmp_path: Path) -> None:
    setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)

    logging.getLogger("grunto.test").debug("hello file")
    for h in root_logger.handlers:
        h.flush()

    assert len(root_logger.handlers) == 2
    assert "hello file" in (tmp_path / "logs" / "grunto.log").read_text("utf-8")


def test_console_filter_quiets_third_party(root_logger: logging.Logger) -> None:
    setup_logging()
    (console,) = root_logger.handlers
    (noise_filter,) = console.filters

    def record(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert noise_filter.filter(record("grunto.core.orchestrator", logging.DEBUG))
    assert noise_filter.filter(record("grunto", logging.INFO))
    assert not noise_filter.filter(record("urllib3", logging.INFO))
    assert noise_filter.filter(record("urllib3", logging.WARNING))
    assert not noise_filter.filter(record("py.warnings", logging.WARNING))
