# src/grunto/runner/plugins.py

from __future__ import annotations

"""
Host-side collaborators enabled by the grunto() options:

- load_plugins: register tasks shipped by installed distributions
  (entry points of group "grunto.tasks", each a callable taking the runner)
- install_time_metric: log how long every task took once the run finishes
"""

import logging
import time
from collections.abc import Mapping
from fnmatch import fnmatch
from importlib.metadata import entry_points
from typing import Any

from ..config import get_settings

logger = logging.getLogger(__name__)


def load_plugins(runner: Any, options: Mapping[str, Any] | None = None) -> list[str]:
    """
    Load task plugins from entry points.

    options:
    - group: entry point group (default: settings.plugin_group)
    - pattern: fnmatch pattern or list of patterns on entry point names (default "*")
    """
    options = options or {}
    group = options.get("group") or get_settings().plugin_group
    pattern = options.get("pattern", "*")
    patterns = [pattern] if isinstance(pattern, str) else list(pattern)

    loaded: list[str] = []
    for ep in entry_points(group=group):
        if not any(fnmatch(ep.name, p) for p in patterns):
            continue
        plugin = ep.load()
        plugin(runner)
        loaded.append(ep.name)

    logger.debug("Loaded %d task plugins from %s: %s", len(loaded), group, loaded)
    return loaded


class TimeMetric:
    """Wraps runner.run_task and reports timings when the outermost task returns."""

    def __init__(self, runner: Any) -> None:
        self.runner = runner
        self.timings: list[tuple[str, float]] = []
        self._depth = 0

    def install(self) -> None:
        original = self.runner.run_task

        def run_task(spec: str) -> None:
            self._depth += 1
            started = time.perf_counter()
            try:
                original(spec)
            finally:
                self.timings.append((spec, time.perf_counter() - started))
                self._depth -= 1
                if self._depth == 0:
                    self.report()

        self.runner.run_task = run_task

    def report(self) -> None:
        if not self.timings:
            return
        total = self.timings[-1][1]
        lines = ["", "Execution Time"]
        for spec, seconds in self.timings:
            lines.append(f"\t{spec:<32} {seconds:.3f}s")
        lines.append(f"\t{'Total':<32} {total:.3f}s")
        self.timings = []
        self.runner.writeln("\n".join(lines))


def install_time_metric(runner: Any) -> TimeMetric | None:
    if getattr(runner, "run_task", None) is None:
        logger.debug("Runner %r cannot run tasks; time metric skipped", runner)
        return None
    if getattr(runner, "_grunto_time_metric", None) is not None:
        return runner._grunto_time_metric

    metric = TimeMetric(runner)
    metric.install()
    runner._grunto_time_metric = metric
    return metric
