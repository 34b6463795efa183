# src/grunto/core/factory.py

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from ..config import get_settings
from .orchestrator import Orchestrator
from .ports import HostRunner, SetupFunc

logger = logging.getLogger(__name__)

PASS_THROUGH_TASK = "gruntoTask"


def _pass_through(invocation: Any) -> Any:
    """Run whatever callable the gruntoTask target was configured with."""
    return invocation.data(invocation)


def _default_options() -> dict[str, Any]:
    settings = get_settings()
    return {
        "autoload": settings.autoload,
        "time_metric": settings.time_metric,
    }


def grunto(func: SetupFunc, options: Mapping[str, Any] | None = None) -> Callable[[HostRunner], Orchestrator]:
    """
    Build the gruntofile entry point.

    `func(orchestrator, runner)` registers scans/options/config through the
    fluent Orchestrator API; whatever mapping it returns is merged as initial
    configuration. The returned callable takes the host runner and runs the
    whole pipeline once.

    options:
    - autoload: bool | dict of sub-options for grunto.runner.plugins.load_plugins
    - time_metric (or timeMetric): bool, per-task timing through the host log
    """
    opts = _default_options()
    if options:
        opts.update(options)
        if "timeMetric" in options:
            opts["time_metric"] = options["timeMetric"]

    def main(runner: HostRunner) -> Orchestrator:
        # Imported here: the plugin helpers are host collaborators, not core.
        from ..runner.plugins import install_time_metric, load_plugins

        orchestrator = Orchestrator(runner)
        try:
            runner.register_multi_task(PASS_THROUGH_TASK, _pass_through, "Run a configured callable")

            autoload = opts.get("autoload")
            # An empty sub-options mapping still means "load with defaults".
            if autoload is True or isinstance(autoload, Mapping):
                load_plugins(runner, autoload if isinstance(autoload, Mapping) else {})

            if opts.get("time_metric"):
                install_time_metric(runner)

            orchestrator.config(func(orchestrator, runner))

            return orchestrator.run()
        finally:
            orchestrator.override.restore()

    return main
