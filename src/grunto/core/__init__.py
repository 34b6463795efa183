"""
grunto core.

Components:
- paths.py: prefix derivation and path joining
- models.py: scan requests and resolved module descriptors
- context.py: per-module execution context (tasks, aliases, refs)
- override.py: host override shim (buffers config merges during a run)
- stats.py: run statistics
- orchestrator.py: fluent setup + the single-run pipeline
- factory.py: grunto(func, options) entry point builder
"""
