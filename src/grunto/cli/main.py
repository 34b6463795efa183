# src/grunto/cli/main.py

"""
CLI entrypoint.

Initializes logging, loads the gruntofile, assembles configuration through its
main(runner), then runs the requested tasks on the in-process TaskRunner.
"""

from __future__ import annotations

import argparse
import importlib.util
import logging
import os
import sys
from pathlib import Path

from ..config import get_settings
from ..errors import FatalError
from ..logging_setup import setup_logging
from ..runner import TaskRunner

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None):
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="grunto", description="Run tasks assembled by a gruntofile.")
    parser.add_argument("tasks", nargs="*", default=["default"], help='tasks to run (default: "default")')
    parser.add_argument("--file", dest="gruntofile", type=Path, default=settings.gruntofile)
    parser.add_argument("--log-level", default=settings.log_level)
    parser.add_argument("--log-dir", type=Path, default=settings.log_dir)
    return parser.parse_args(argv)


def load_gruntofile(path: Path, runner: TaskRunner):
    """Import the gruntofile and return its main(runner) callable."""
    if not path.is_file():
        runner.fatal(f"Unable to find gruntofile: {path}")

    spec = importlib.util.spec_from_file_location("gruntofile", path)
    if spec is None or spec.loader is None:
        runner.fatal(f"Unable to load gruntofile: {path}")
    mod = importlib.util.module_from_spec(spec)
    sys.modules["gruntofile"] = mod
    spec.loader.exec_module(mod)

    main = getattr(mod, "main", None)
    if not callable(main):
        runner.fatal(f'{path}: must define a callable "main"')
    return main


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    console_level = getattr(logging, str(args.log_level).upper(), logging.INFO)
    setup_logging(log_dir=args.log_dir, console_level=console_level)

    gruntofile = args.gruntofile.resolve()
    runner = TaskRunner()

    try:
        entry = load_gruntofile(gruntofile, runner)
        # Task modules and globs are relative to the gruntofile.
        os.chdir(gruntofile.parent)
        entry(runner)
        runner.run(args.tasks)
    except FatalError:
        # Already logged by runner.fatal().
        return 1

    logger.info("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
