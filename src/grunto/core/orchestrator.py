# src/grunto/core/orchestrator.py

from __future__ import annotations

"""
The Orchestrator collects scan requests, options and configuration through
fluent setup calls, then run() assembles everything once:

1. merge config buffered by the override shim (plugin loading, setup code),
2. expand scan requests into module descriptors,
3. load each module and merge what its configure() returns,
4. validate that every alias only names declared tasks,
5. register aliases and hand the aggregate config to the host,
6. report statistics.

The host's original merge_config is restored on every exit path.
"""

import importlib.util
import logging
import os
import re
import sys
import time
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from .context import ModuleContext
from .models import ModuleDescriptor, ScanRequest
from .override import HostOverride
from .paths import derive_prefix, join_paths, normalize_cwd
from .ports import HostRunner, ModuleFunc
from .stats import RunStatistics, collect_statistics, report_statistics

logger = logging.getLogger(__name__)

RESERVED_ALIAS = "grunto"
MODULE_ENTRYPOINT = "configure"
MODULE_NAMESPACE = "grunto.modules"


class Orchestrator:
    def __init__(self, runner: HostRunner) -> None:
        self._time = time.perf_counter()
        self.runner = runner
        self._override = HostOverride(runner)

        self._config: dict[str, Any] = {}
        self._options: dict[str, Any] = {}
        self._scans: list[Any] = []
        self._ran = False

        # Filled in by run(), kept for inspection afterwards.
        self.aliases: dict[str, list[str]] = {}
        self.refs: dict[str, bool] = {}
        self.modules: list[ModuleDescriptor] = []
        self.statistics: RunStatistics | None = None

        self._override.override()

    # ---- setup (fluent) ----

    def scan(self, files: Any) -> Orchestrator:
        if isinstance(files, (list, tuple)):
            self._scans.extend(files)
            return self

        if isinstance(files, (Mapping, ScanRequest)):
            self._scans.append(files)
            return self

        if isinstance(files, str):
            self._scans.append(files)
            return self

        self.runner.fatal("Invalid scan type, must be object/array/string")
        return self

    def context(self, params: Any) -> Orchestrator:
        if not isinstance(params, Mapping):
            self.runner.fatal("Invalid options type, must be object")
            return self

        self._options.update(params)
        return self

    def config(self, config: Any) -> Orchestrator:
        if isinstance(config, Mapping):
            self._config.update(config)
        elif config is not None:
            self.runner.fatal("invalid config value, must be object")

        return self

    def get_prefix(self, path: str, cwd: str = "") -> str:
        return derive_prefix(path, cwd)

    @property
    def scans(self) -> list[Any]:
        return list(self._scans)

    @property
    def options(self) -> Mapping[str, Any]:
        return MappingProxyType(self._options)

    @property
    def aggregate(self) -> Mapping[str, Any]:
        return MappingProxyType(self._config)

    @property
    def override(self) -> HostOverride:
        return self._override

    # ---- pipeline ----

    def search_modules(self) -> list[ModuleDescriptor]:
        modules: list[ModuleDescriptor] = []

        for raw in self._scans:
            try:
                scan = ScanRequest.from_input(raw)
            except TypeError:
                self.runner.fatal(f"Invalid scan request {raw!r}, must be object/string")
                continue

            cwd = normalize_cwd(scan.cwd)
            for path in self.runner.expand(list(scan.src), cwd=cwd or None):
                module_path = join_paths(cwd, path)
                if not os.path.isabs(module_path):
                    module_path = os.getcwd() + "/" + module_path

                modules.append(
                    ModuleDescriptor(
                        path=path,
                        module_path=module_path,
                        cwd=cwd,
                        prefix=self._resolve_prefix(scan, path, cwd),
                    )
                )

        return modules

    def _resolve_prefix(self, scan: ScanRequest, path: str, cwd: str) -> str:
        prefix = scan.prefix
        if not prefix:
            return self.get_prefix(path, cwd)
        if isinstance(prefix, re.Pattern):
            return prefix.sub(r"\1", path, count=1)
        if isinstance(prefix, str):
            return prefix
        if callable(prefix):
            return prefix(path, cwd)

        self.runner.fatal("invalid prefix type, must be string/regExp/function")
        return ""

    def _load_module_func(self, module: ModuleDescriptor, index: int) -> ModuleFunc:
        name = f"{MODULE_NAMESPACE}.m{index}_" + re.sub(r"\W", "_", module.prefix or module.path)
        spec = importlib.util.spec_from_file_location(name, module.module_path)
        if spec is None or spec.loader is None:
            self.runner.fatal(f"{module.module_path}: cannot be loaded as a python module")
        mod = importlib.util.module_from_spec(spec)
        sys.modules[name] = mod
        try:
            spec.loader.exec_module(mod)
        finally:
            # Only needed while the body runs (dataclasses look the module up by name).
            sys.modules.pop(name, None)

        func = getattr(mod, MODULE_ENTRYPOINT, None)
        if not callable(func):
            self.runner.fatal(f'{module.module_path}: must define a callable "{MODULE_ENTRYPOINT}"')
        return func

    def run(self) -> Orchestrator:
        if self._ran:
            self.runner.fatal("grunto pipeline already ran")
            return self
        self._ran = True

        try:
            return self._run()
        finally:
            self._override.restore()

    def _run(self) -> Orchestrator:
        refs: dict[str, bool] = {}
        aliases: dict[str, list[str]] = {}
        started = time.perf_counter()
        self.refs, self.aliases = refs, aliases
        prepare_seconds = started - self._time

        self.config(self._override.flush_config())

        modules = self.search_modules()
        self.modules = modules
        logger.debug("Resolved %d task modules", len(modules))

        config_view = MappingProxyType(self._config)
        options_view = MappingProxyType(self._options)
        for index, module in enumerate(modules):
            ctx = ModuleContext(self.runner, aliases, refs, config_view, module.prefix, options_view)
            func = self._load_module_func(module, index)
            logger.debug("Configuring %s (prefix=%r)", module.path, module.prefix)
            self.config(func(ctx, self.runner, options_view))

        # Merges performed by the modules themselves.
        self.config(self._override.flush_config())

        self._override.restore()

        aliases.setdefault(RESERVED_ALIAS, [])

        for name, tasks in aliases.items():
            for task_name in tasks:
                if not refs.get(task_name):
                    self.runner.fatal(f'{name}: undefined task "{task_name}"')

            self.runner.register_task(name, list(tasks))

        self.runner.init_config(self._config)

        stats = collect_statistics(
            config=self._config,
            registered=self._override.registered(),
            aliases=aliases,
            refs=refs,
            modules=modules,
            prepare_seconds=prepare_seconds,
            generation_seconds=time.perf_counter() - started,
        )
        report_statistics(self.runner, stats)

        self.statistics = stats
        return self
