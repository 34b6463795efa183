# src/grunto/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on a Protocol for the host task runner instead of a concrete
implementation. grunto.runner.TaskRunner is the in-process host shipped with
the package; tests use a recording fake.
"""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .context import ModuleContext
    from .orchestrator import Orchestrator

TaskConfig = dict[str, Any]
# Task name -> task configuration value.


class HostRunner(Protocol):
    """The task runner grunto assembles configuration for."""

    def init_config(self, config: Mapping[str, Any]) -> None: ...

    # Bulk configuration merge. This is the entry point HostOverride intercepts.
    def merge_config(self, fragment: Mapping[str, Any]) -> None: ...

    def register_task(
            self,
            name: str,
            tasks: list[str] | Callable[..., Any],
            description: str = "",
    ) -> None: ...

    def register_multi_task(
            self,
            name: str,
            fn: Callable[..., Any],
            description: str = "",
    ) -> None: ...

    def expand(self, patterns: str | list[str], cwd: str | None = None) -> list[str]: ...

    # Must not return normally.
    def fatal(self, message: str) -> None: ...

    def writeln(self, message: str) -> None: ...


ModuleFunc = Callable[["ModuleContext", HostRunner, Mapping[str, Any]], "Mapping[str, Any] | None"]
SetupFunc = Callable[["Orchestrator", HostRunner], "Mapping[str, Any] | None"]
