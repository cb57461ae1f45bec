"""Task records, the dependency graph engine and its JSON storage."""

from hta.tasks.graph import TaskGraph, format_chain
from hta.tasks.model import Task

__all__ = ["Task", "TaskGraph", "format_chain"]
