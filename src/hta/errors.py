"""Error taxonomy shared by the task graph, storage and the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hta.tasks.model import Task


class HtaError(Exception):
    """Base class for every error the tracker reports to its caller."""


class TaskNotFoundError(HtaError):
    def __init__(self, task_id: int, role: str = "task") -> None:
        self.task_id = task_id
        self.role = role
        super().__init__(f"{role} {task_id} not found")


class SelfReferenceError(HtaError):
    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"task {task_id} cannot depend on itself")


class CycleDetectedError(HtaError):
    """Linking *parent_id* to *dep_id* would close a dependency cycle.

    ``chain`` lists the tasks walked from the traversal root down to the
    conflicting task, ready for :func:`hta.tasks.graph.format_chain`.
    """

    def __init__(self, parent_id: int, dep_id: int, chain: list[Task]) -> None:
        from hta.tasks.graph import format_chain

        self.parent_id = parent_id
        self.dep_id = dep_id
        self.chain = list(chain)
        super().__init__(
            f"can't link {parent_id} with {dep_id}: dep error chain {format_chain(self.chain)}"
        )


class SerializationError(HtaError):
    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")
