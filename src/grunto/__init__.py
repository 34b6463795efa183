"""
grunto: assemble task runner configuration from many small task modules.

A gruntofile builds its entry point with grunto():

    from grunto import grunto

    def setup(g, runner):
        g.scan({"src": ["tasks/**/*.py"], "cwd": "."})
        return {"clean": {"dist": "build/"}}

    main = grunto(setup)
"""

from .core.context import ModuleContext
from .core.factory import grunto
from .core.models import ModuleDescriptor, ScanRequest
from .core.orchestrator import Orchestrator
from .core.paths import derive_prefix
from .errors import FatalError, GruntoError, OverrideError

__all__ = [
    "FatalError",
    "GruntoError",
    "ModuleContext",
    "ModuleDescriptor",
    "OverrideError",
    "Orchestrator",
    "ScanRequest",
    "derive_prefix",
    "grunto",
]
