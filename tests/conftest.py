# tests/conftest.py

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from .fakes import FakeRunner


@pytest.fixture()
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    # Relative scan cwds and module paths both resolve against the process cwd.
    monkeypatch.chdir(tmp_path)
    return FakeRunner()


@pytest.fixture()
def write_module(tmp_path: Path) -> Callable[[str, str], Path]:
    """
    Write a task module under tmp_path.

    The body is dedented, so tests can pass indented triple-quoted source.
    """

    def _write(rel_path: str, body: str) -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(body), "utf-8")
        return path

    return _write
