# src/grunto/core/context.py

from __future__ import annotations

"""
Per-module execution context.

Every discovered task module gets a fresh ModuleContext. All contexts created
during one run share the same alias and reference tables, so a module loaded
later can append to an alias declared earlier and can rely on tasks declared
by any module.
"""

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from .ports import HostRunner

logger = logging.getLogger(__name__)


class ModuleContext:
    def __init__(
            self,
            runner: HostRunner,
            aliases: dict[str, list[str]],
            refs: dict[str, bool],
            config: Mapping[str, Any],
            prefix: str,
            options: Mapping[str, Any],
    ) -> None:
        self.runner = runner
        self.prefix = prefix
        self.options = options if isinstance(options, MappingProxyType) else MappingProxyType(dict(options))
        # Live view: modules see contributions of the modules loaded before them.
        self.config = config if isinstance(config, MappingProxyType) else MappingProxyType(config)

        self._aliases = aliases
        self._refs = refs

    def name(self, local: str) -> str:
        """Namespace a module-local name: "<prefix>:<local>"."""
        return f"{self.prefix}:{local}" if self.prefix else local

    def task(self, name: str) -> str:
        """Declare `name` as a real task. Returns it unchanged."""
        self._refs[name] = True
        return name

    def local_task(self, local: str) -> str:
        return self.task(self.name(local))

    def ref(self, name: str) -> str:
        """Rely on a task registered elsewhere (a plugin task, another module)."""
        self._refs[name] = True
        return name

    def alias(self, name: str, tasks: str | Iterable[str]) -> str:
        """
        Append `tasks` to alias `name`, creating it if needed.

        Task names are stored exactly as given (fully resolved, no prefixing);
        the run validates every one of them against declared tasks.
        """
        if isinstance(tasks, str):
            tasks = [tasks]
        self._aliases.setdefault(name, []).extend(tasks)
        self._refs[name] = True
        logger.debug("alias %s -> %s (prefix=%r)", name, self._aliases[name], self.prefix)
        return name

    def has_task(self, name: str) -> bool:
        return bool(self._refs.get(name))

    def __repr__(self) -> str:
        return f"ModuleContext(prefix={self.prefix!r})"
