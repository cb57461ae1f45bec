"""A task graph bound to its file: every successful mutation is saved."""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from hta import log
from hta.config import Config
from hta.tasks.graph import TaskGraph
from hta.tasks.model import Task
from hta.tasks.storage import load_graph, save_graph


class TaskSession:
    """Caller-side wrapper around :class:`TaskGraph`.

    The engine only mutates memory; the session writes the file right
    after each mutation that succeeded. Failed operations raise before
    anything is saved.

    Usage::

        session = TaskSession.open(Config(filename="tasks.json"))
        task = session.create("buy milk")
        session.link(task.id, other.id)
    """

    def __init__(self, graph: TaskGraph, path: Path, *, autosave: bool = True) -> None:
        self.graph = graph
        self.path = path
        self.autosave = autosave

    @classmethod
    def open(cls, cfg: Config) -> TaskSession:
        """Load ``cfg.path``; a missing file yields an empty graph."""
        path = cfg.path
        try:
            graph = load_graph(path, debug=cfg.debug)
        except FileNotFoundError:
            log.debug(f"{escape(str(path))} not found, starting with an empty task list")
            graph = TaskGraph(debug=cfg.debug)
        return cls(graph, path, autosave=cfg.autosave)

    def save(self) -> None:
        save_graph(self.path, self.graph)

    def _saved(self) -> None:
        if self.autosave:
            self.save()

    # ── mutations ────────────────────────────────────────────────

    def create(self, desc: str) -> Task:
        task = self.graph.create(desc)
        self._saved()
        return task

    def rename(self, task_id: int, desc: str) -> Task:
        task = self.graph.rename(task_id, desc)
        self._saved()
        return task

    def delete(self, task_id: int) -> None:
        self.graph.delete(task_id)
        self._saved()

    def link(self, parent_id: int, dep_id: int) -> None:
        self.graph.link(parent_id, dep_id)
        self._saved()

    def unlink(self, parent_id: int, dep_id: int) -> None:
        self.graph.unlink(parent_id, dep_id)
        self._saved()

    def toggle(self, parent_id: int, dep_id: int) -> bool:
        """Unlink the edge if present, otherwise link it.

        Returns ``True`` when *parent_id* depends on *dep_id* afterwards.
        """
        if self.graph.has_dependency(parent_id, dep_id):
            self.unlink(parent_id, dep_id)
            return False
        self.link(parent_id, dep_id)
        return True

    # ── queries ──────────────────────────────────────────────────

    def list_tasks(self, *, topological: bool = False) -> list[Task]:
        """Tasks in insertion order, or dependencies-first with *topological*."""
        if topological:
            _, tasks = self.graph.topo_sort()
            return tasks
        return self.graph.tasks
