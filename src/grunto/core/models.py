# src/grunto/core/models.py

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

PrefixStrategy = Union[str, "re.Pattern[str]", Callable[[str, str], str], None]


@dataclass(frozen=True, slots=True)
class ScanRequest:
    """
    Which files to treat as task modules.

    prefix may be:
    - a string, used verbatim for every matched file
    - a compiled regex with one capture group, applied to the relative path
    - a callable (relative_path, cwd) -> str
    - None, meaning derive_prefix() is used
    """

    src: tuple[str, ...]
    cwd: str = ""
    prefix: PrefixStrategy = None

    @classmethod
    def from_input(cls, raw: str | Mapping[str, Any] | ScanRequest) -> ScanRequest:
        if isinstance(raw, ScanRequest):
            return raw
        if isinstance(raw, str):
            return cls(src=(raw,))
        if isinstance(raw, Mapping):
            src = raw.get("src") or ()
            if isinstance(src, str):
                src = (src,)
            return cls(src=tuple(src), cwd=raw.get("cwd") or "", prefix=raw.get("prefix"))
        raise TypeError(f"unsupported scan request: {raw!r}")


@dataclass(frozen=True, slots=True)
class ModuleDescriptor:
    path: str
    module_path: str
    cwd: str
    prefix: str
