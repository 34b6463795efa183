# src/grunto/core/stats.py

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .models import ModuleDescriptor
from .ports import HostRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunStatistics:
    modules: int
    tasks: int
    sub_tasks: int
    aliases: int
    prepare_seconds: float
    generation_seconds: float
    unused: tuple[str, ...]

    def render(self) -> str:
        lines = [
            "",
            f"\tModules({self.modules}), Tasks({self.tasks}), "
            f"Sub-tasks({self.sub_tasks}), Aliases({self.aliases})",
            f"\tPrepare Time (plugin loading): {self.prepare_seconds:.3f}s",
            f"\tModule Config Generation Time (grunto work): {self.generation_seconds:.3f}s",
        ]
        if self.unused:
            lines.append('\tUnused Tasks (was loaded, but unused): "' + '", "'.join(self.unused) + '"')
        return "\n".join(lines) + "\n"


def collect_statistics(
        *,
        config: Mapping[str, Any],
        registered: Mapping[str, Any],
        aliases: Mapping[str, list[str]],
        refs: Mapping[str, Any],
        modules: Sequence[ModuleDescriptor],
        prepare_seconds: float,
        generation_seconds: float,
) -> RunStatistics:
    task_keys = list(config)
    reg_keys = list(registered)

    unused: tuple[str, ...] = ()
    if len(reg_keys) > len(task_keys):
        known = set(task_keys)
        unused = tuple(k for k in reg_keys if k not in known)

    return RunStatistics(
        modules=len(modules),
        tasks=len(task_keys),
        sub_tasks=len(refs) - len(aliases),
        aliases=len(aliases),
        prepare_seconds=prepare_seconds,
        generation_seconds=generation_seconds,
        unused=unused,
    )


def report_statistics(runner: HostRunner, stats: RunStatistics) -> None:
    """Write the run report through the host. Reporting never fails the run."""
    try:
        runner.writeln(stats.render())
    except Exception:
        logger.exception("Failed to write run statistics.")
