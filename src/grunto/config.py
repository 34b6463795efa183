# src/grunto/config.py

"""Settings loaded from environment variables (+ optional .env).

One Settings object is shared by the CLI and the factory defaults.
Nothing here is required: every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "GRUNTO"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- CLI ----
    gruntofile: Path
    log_level: str
    log_dir: Path | None

    # ---- Factory defaults ----
    autoload: bool
    time_metric: bool
    plugin_group: str

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            gruntofile=_env_path(_k("FILE"), Path("gruntofile.py")) or Path("gruntofile.py"),
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            # No file log unless asked for: the CLI is usually run from a project root.
            log_dir=_env_path(_k("LOG_DIR"), None),
            autoload=_env_bool(_k("AUTOLOAD"), True),
            time_metric=_env_bool(_k("TIME_METRIC"), True),
            plugin_group=_env(_k("PLUGIN_GROUP"), "grunto.tasks"),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
