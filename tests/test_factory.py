# tests/test_factory.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

import grunto.runner.plugins as plugins
from grunto import grunto
from grunto.core.factory import PASS_THROUGH_TASK
from grunto.errors import FatalError
from grunto.runner import TaskRunner

from .fakes import FakeRunner

NO_PLUGINS = {"autoload": False, "time_metric": False}


def _entry_points(monkeypatch: pytest.MonkeyPatch, eps: dict[str, list]) -> None:
    monkeypatch.setattr(plugins, "entry_points", lambda *, group: eps.get(group, []))


def test_setup_is_called_with_orchestrator_and_runner(runner: FakeRunner) -> None:
    seen = {}

    def setup(g, host):
        seen["g"], seen["host"] = g, host
        g.context({"env": "dev"})
        return {"clean": ["dist"]}

    g = grunto(setup, NO_PLUGINS)(runner)

    assert seen == {"g": g, "host": runner}
    assert dict(g.options) == {"env": "dev"}
    assert runner.init_config_calls == [{"clean": ["dist"]}]
    assert PASS_THROUGH_TASK in runner.multi_tasks


def test_end_to_end_with_modules(tmp_path: Path, runner: FakeRunner, write_module) -> None:
    write_module(
        "tasks/lint.py",
        """
        def configure(ctx, runner, options):
            ctx.task("lint")
            return {"lint": {"src": ["*.py"]}}
        """,
    )
    write_module(
        "tasks/build.py",
        """
        def configure(ctx, runner, options):
            ctx.alias("default", ["lint", "build"])
            ctx.task("build")
            return {"build": {"out": "dist"}}
        """,
    )

    def setup(g, host):
        g.scan({"src": ["*.py"], "cwd": str(tmp_path / "tasks")})

    g = grunto(setup, NO_PLUGINS)(runner)

    assert g.aliases == {"default": ["lint", "build"], "grunto": []}
    assert runner.registered_names == ["default", "grunto"]
    assert len(runner.init_config_calls) == 1
    assert set(runner.init_config_calls[0]) == {"lint", "build"}
    # Fewer tasks registered through the host (gruntoTask) than configured: nothing listed.
    assert g.statistics is not None
    assert g.statistics.unused == ()


def test_fatal_during_setup_restores_host(runner: FakeRunner) -> None:
    def setup(g, host):
        g.scan(42)

    with pytest.raises(FatalError):
        grunto(setup, NO_PLUGINS)(runner)

    assert "merge_config" not in vars(runner)
    runner.merge_config({"x": 1})
    assert runner.config == {"x": 1}


def test_autoload_loads_entry_point_plugins(runner: FakeRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    def copy_plugin(host):
        host.register_multi_task("copy", lambda inv: None)
        host.merge_config({"copy": {"options": {"mode": True}}})

    def uglify_plugin(host):
        host.register_multi_task("uglify", lambda inv: None)

    _entry_points(
        monkeypatch,
        {
            "grunto.tasks": [
                SimpleNamespace(name="grunto-copy", load=lambda: copy_plugin),
                SimpleNamespace(name="grunto-uglify", load=lambda: uglify_plugin),
            ]
        },
    )

    g = grunto(lambda g, host: None, {"autoload": {"pattern": "grunto-c*"}, "timeMetric": False})(runner)

    assert set(runner.multi_tasks) == {PASS_THROUGH_TASK, "copy"}
    # Config merged by the plugin while intercepted lands in the aggregate.
    assert g.aggregate["copy"] == {"options": {"mode": True}}
    assert runner.init_config_calls == [{"copy": {"options": {"mode": True}}}]
    # gruntoTask was registered but never configured.
    assert g.statistics is not None
    assert g.statistics.unused == (PASS_THROUGH_TASK,)


def test_load_plugins_group_option(monkeypatch: pytest.MonkeyPatch) -> None:
    loaded: list[str] = []
    _entry_points(
        monkeypatch,
        {"my.group": [SimpleNamespace(name="a", load=lambda: lambda host: loaded.append("a"))]},
    )

    assert plugins.load_plugins(FakeRunner(), {"group": "my.group"}) == ["a"]
    assert plugins.load_plugins(FakeRunner(), {}) == []
    assert loaded == ["a"]


def test_pass_through_task_runs_configured_callable(monkeypatch: pytest.MonkeyPatch) -> None:
    _entry_points(monkeypatch, {})
    runner = TaskRunner()
    lines: list[str] = []
    runner.writeln = lines.append  # type: ignore[method-assign]
    calls: list[str] = []

    def hello(invocation):
        calls.append(invocation.name_args)

    def setup(g, host):
        return {PASS_THROUGH_TASK: {"hello": hello}}

    grunto(setup)(runner)
    runner.run_task(f"{PASS_THROUGH_TASK}:hello")

    assert calls == ["gruntoTask:hello"]
    # One statistics report, one time metric report.
    assert len(lines) == 2
    assert "Execution Time" in lines[1]


@pytest.mark.parametrize(
    ("autoload", "expected"),
    [
        (True, [{}]),
        ({}, [{}]),
        ({"pattern": "grunto-*"}, [{"pattern": "grunto-*"}]),
        (False, []),
        (None, []),
    ],
)
def test_autoload_option_values(monkeypatch: pytest.MonkeyPatch, autoload, expected) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(plugins, "load_plugins", lambda host, options: calls.append(dict(options)))

    grunto(lambda g, host: None, {"autoload": autoload, "time_metric": False})(TaskRunner())

    assert calls == expected
