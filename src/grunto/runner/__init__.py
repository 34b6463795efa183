"""
In-process host task runner.

- task_runner.py: config store, task registry, glob expansion, task execution
- plugins.py: entry-point plugin autoload and per-task time metric
"""

from .task_runner import TaskInvocation, TaskRunner

__all__ = ["TaskInvocation", "TaskRunner"]
