# src/grunto/core/paths.py

from __future__ import annotations

import re

_PREFIX_RE = re.compile(r"^/?(.+?)(?:/default)?(?:\.py|\.js)?$", re.DOTALL)
_BACKSLASHES_RE = re.compile(r"\\+")


def join_paths(cwd: str, path: str) -> str:
    """Join a scan cwd and a path relative to it with exactly one slash."""
    if not cwd:
        return path
    if not path:
        return cwd
    return cwd.rstrip("/\\") + "/" + path.lstrip("/\\")


def normalize_cwd(cwd: str | None) -> str:
    """Strip a leading "./" from a scan cwd."""
    cwd = cwd or ""
    return cwd[2:] if cwd.startswith("./") else cwd


def derive_prefix(path: str, cwd: str = "") -> str:
    """
    Default namespace prefix for a task module.

    "foo/bar/default.py" -> "foo/bar", "a\\b\\c.py" -> "a/b/c", "/x.py" -> "x".
    """
    return _BACKSLASHES_RE.sub("/", _PREFIX_RE.sub(r"\1", path, count=1))
