# src/grunto/core/override.py

from __future__ import annotations

"""
Host override shim.

While intercepting:
- runner.merge_config(...) calls are buffered instead of touching the host,
- runner.register_multi_task(...) calls pass through,
and every task name seen through either is recorded for statistics.

The wrappers are installed as instance attributes on the runner, so restore()
only has to put the original bound methods back.
"""

import contextlib
import logging
from collections.abc import Callable, Iterator, Mapping
from enum import Enum
from typing import Any

from ..errors import OverrideError
from .ports import HostRunner

logger = logging.getLogger(__name__)

_MISSING = object()


class OverrideState(str, Enum):
    INACTIVE = "inactive"
    INTERCEPTING = "intercepting"


class HostOverride:
    def __init__(self, runner: HostRunner) -> None:
        self.runner = runner
        self.state = OverrideState.INACTIVE

        self._buffer: dict[str, Any] = {}
        self._registered: dict[str, bool] = {}
        self._saved: dict[str, Any] = {}

    def override(self) -> None:
        if self.state is OverrideState.INTERCEPTING:
            return

        runner = self.runner
        # Remember what was on the instance (if anything) so restore is exact.
        for attr in ("merge_config", "register_multi_task"):
            self._saved[attr] = vars(runner).get(attr, _MISSING)

        original_multi = runner.register_multi_task

        def merge_config(fragment: Mapping[str, Any]) -> None:
            if not fragment:
                return
            for key in fragment:
                self._registered[key] = True
            self._buffer.update(fragment)

        def register_multi_task(name: str, fn: Callable[..., Any], description: str = "") -> None:
            self._registered[name] = True
            original_multi(name, fn, description)

        runner.merge_config = merge_config  # type: ignore[method-assign]
        runner.register_multi_task = register_multi_task  # type: ignore[method-assign]
        self.state = OverrideState.INTERCEPTING
        logger.debug("Intercepting host config merges on %r", runner)

    def flush_config(self) -> dict[str, Any]:
        """Return everything buffered so far and empty the buffer."""
        if self.state is not OverrideState.INTERCEPTING:
            raise OverrideError("flush_config() called while not intercepting")
        out, self._buffer = self._buffer, {}
        return out

    def registered(self) -> dict[str, bool]:
        return dict(self._registered)

    def restore(self) -> None:
        if self.state is OverrideState.INACTIVE:
            return

        runner = self.runner
        for attr, saved in self._saved.items():
            if saved is _MISSING:
                with contextlib.suppress(AttributeError):
                    delattr(runner, attr)
            else:
                setattr(runner, attr, saved)
        self._saved.clear()
        self.state = OverrideState.INACTIVE
        logger.debug("Restored host config merges on %r", runner)

    @contextlib.contextmanager
    def intercepting(self) -> Iterator[HostOverride]:
        self.override()
        try:
            yield self
        finally:
            self.restore()

