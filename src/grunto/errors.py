# src/grunto/errors.py

from __future__ import annotations


class GruntoError(Exception):
    """Base class for grunto errors."""


class FatalError(SystemExit):
    """
    Raised by the host runner when a usage/configuration error halts the run.

    Subclasses SystemExit so an unhandled fatal error ends the process with
    exit status 1 and prints only the message.
    """

    def __init__(self, message: str) -> None:
        super().__init__(1)
        self.message = message

    def __str__(self) -> str:
        return self.message


class OverrideError(GruntoError, RuntimeError):
    """The host override shim was used out of order."""
