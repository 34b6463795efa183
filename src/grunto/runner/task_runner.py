# src/grunto/runner/task_runner.py

from __future__ import annotations

"""
A small in-process task runner implementing the HostRunner port.

Tasks come in three kinds:
- basic: a callable, invoked with a TaskInvocation (data=None)
- alias: an ordered list of other task names
- multi: a callable run once per configured target, data=config[name][target]
"""

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ..errors import FatalError

logger = logging.getLogger(__name__)


class TaskKind(str, Enum):
    BASIC = "basic"
    ALIAS = "alias"
    MULTI = "multi"


@dataclass(slots=True)
class Task:
    name: str
    kind: TaskKind
    description: str = ""
    fn: Callable[..., Any] | None = None
    tasks: list[str] = field(default_factory=list)


@dataclass(slots=True)
class TaskInvocation:
    name: str
    target: str | None
    data: Any
    runner: TaskRunner

    @property
    def name_args(self) -> str:
        return f"{self.name}:{self.target}" if self.target else self.name


def _deep_merge(dst: dict[str, Any], src: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in src.items():
        current = dst.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _deep_merge(current, value)
        else:
            dst[key] = value
    return dst


class TaskRunner:
    def __init__(self) -> None:
        self.config: dict[str, Any] = {}
        self.tasks: dict[str, Task] = {}

    # ---- configuration ----

    def init_config(self, config: Mapping[str, Any]) -> None:
        self.config = dict(config)

    def merge_config(self, fragment: Mapping[str, Any]) -> None:
        _deep_merge(self.config, fragment)

    def get_config(self, name: str | None = None, default: Any = None) -> Any:
        if name is None:
            return self.config
        return self.config.get(name, default)

    # ---- registration ----

    def register_task(
            self,
            name: str,
            tasks: list[str] | str | Callable[..., Any],
            description: str = "",
    ) -> None:
        if callable(tasks):
            self.tasks[name] = Task(name=name, kind=TaskKind.BASIC, description=description, fn=tasks)
        else:
            names = [tasks] if isinstance(tasks, str) else list(tasks)
            self.tasks[name] = Task(
                name=name,
                kind=TaskKind.ALIAS,
                description=description or f'Alias for "{", ".join(names)}"',
                tasks=names,
            )
        logger.debug("Registered task %s (%s)", name, self.tasks[name].kind.value)

    def register_multi_task(self, name: str, fn: Callable[..., Any], description: str = "") -> None:
        self.tasks[name] = Task(name=name, kind=TaskKind.MULTI, description=description, fn=fn)
        logger.debug("Registered multi task %s", name)

    def task_exists(self, name: str) -> bool:
        return name in self.tasks

    # ---- files ----

    def _base(self, cwd: str | None) -> Path:
        # Same base the orchestrator joins relative module paths with.
        root = Path.cwd()
        if not cwd:
            return root
        return Path(cwd) if os.path.isabs(cwd) else root / cwd

    def expand(self, patterns: str | list[str], cwd: str | None = None) -> list[str]:
        """
        Expand glob patterns relative to cwd into relative posix paths.

        Patterns are applied in order; a leading "!" removes earlier matches.
        Only files are returned.
        """
        if isinstance(patterns, str):
            patterns = [patterns]

        base = self._base(cwd)
        matched: list[str] = []
        for pattern in patterns:
            if not pattern:
                continue
            exclude = pattern.startswith("!")
            pat = pattern[1:] if exclude else pattern
            found = sorted(p.relative_to(base).as_posix() for p in base.glob(pat) if p.is_file())

            if exclude:
                drop = set(found)
                matched = [m for m in matched if m not in drop]
            else:
                matched.extend(m for m in found if m not in matched)

        return matched

    # ---- host services ----

    def fatal(self, message: str) -> None:
        logger.error("Fatal error: %s", message)
        raise FatalError(message)

    def writeln(self, message: str) -> None:
        logger.info("%s", message)

    # ---- execution ----

    def _split_spec(self, spec: str) -> tuple[str, str]:
        """
        Split "name:target" at the longest registered head.

        Task names may contain colons themselves ("app:build"), so "app:build:dist"
        resolves to task "app:build" with target "dist" when that task exists.
        """
        parts = spec.split(":")
        for cut in range(len(parts), 0, -1):
            head = ":".join(parts[:cut])
            if head in self.tasks:
                return head, ":".join(parts[cut:])
        return spec, ""

    def run_task(self, spec: str) -> None:
        name, target = self._split_spec(spec)
        task = self.tasks.get(name)
        if task is None:
            self.fatal(f'Task "{spec}" not found.')
            return

        logger.info('Running "%s" task', spec)

        if task.kind is TaskKind.ALIAS:
            for sub in task.tasks:
                self.run_task(sub)
            return

        if task.kind is TaskKind.BASIC:
            task.fn(TaskInvocation(name=name, target=target or None, data=None, runner=self))
            return

        targets = self.config.get(name)
        if not isinstance(targets, Mapping):
            self.fatal(f'Task "{name}" has no configuration.')
            return

        if target:
            if target not in targets:
                self.fatal(f'Task "{spec}" has no configuration.')
                return
            names = [target]
        else:
            names = [t for t in targets if t != "options" and not t.startswith("_")]

        for t in names:
            task.fn(TaskInvocation(name=name, target=t, data=targets[t], runner=self))

    def run(self, tasks: list[str]) -> None:
        for spec in tasks:
            self.run_task(spec)
