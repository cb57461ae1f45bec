"""Dependency graph engine: cycle-safe linking and topological ordering."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from hta import log
from hta.errors import CycleDetectedError, SelfReferenceError, TaskNotFoundError
from hta.tasks.model import Task


def format_chain(chain: Iterable[Task]) -> str:
    """Render a traversal chain as ``[1]desc->[2]desc->...``."""
    return "->".join(f"[{t.id}]{t.desc}" for t in chain)


class TaskGraph:
    """Owns the task records and their ``depends_on`` edges.

    An edge ``p -> d`` means *p depends on d*. Every mutation keeps three
    invariants: ids are unique, the graph is acyclic (no self-loops
    either), and every dependency id names a task in the graph.

    Usage::

        graph = TaskGraph()
        a = graph.create("write docs")
        b = graph.create("ship release")
        graph.link(b.id, a.id)          # release depends on docs
        order, _ = graph.topo_sort()    # [a.id, b.id]

    The graph adopts the *tasks* it is given rather than copying them:
    repeated ids in their ``depends_on`` lists are collapsed in place.

    *debug* >= 2 prints every step of the cycle-check traversal.
    """

    def __init__(self, tasks: Iterable[Task] = (), *, debug: int = 0) -> None:
        self.debug = debug
        self._tasks: dict[int, Task] = {}
        for task in tasks:
            if task.id in self._tasks:
                raise ValueError(f"Duplicate task id: {task.id}")
            task.depends_on = list(dict.fromkeys(task.depends_on))
            self._tasks[task.id] = task

    # ── lookup ───────────────────────────────────────────────────

    @property
    def tasks(self) -> list[Task]:
        """Tasks in insertion order."""
        return list(self._tasks.values())

    def ids(self) -> list[int]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def exists(self, task_id: int) -> bool:
        return task_id in self._tasks

    def get(self, task_id: int) -> Task | None:
        """Return the live record for *task_id*, or ``None``.

        Edits to the returned task (``desc``, ``depends_on``) land directly
        in the graph. Dependency edits should still go through
        :meth:`link` / :meth:`unlink` so the cycle check runs.
        """
        return self._tasks.get(task_id)

    def require(self, task_id: int, role: str = "task") -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id, role)
        return task

    # ── create / rename / delete ─────────────────────────────────

    def next_id(self) -> int:
        return max(self._tasks, default=0) + 1

    def create(self, desc: str) -> Task:
        task = Task(id=self.next_id(), desc=desc)
        self._tasks[task.id] = task
        return task

    def rename(self, task_id: int, desc: str) -> Task:
        task = self.require(task_id)
        task.desc = desc
        return task

    def delete(self, task_id: int) -> None:
        """Remove *task_id* and scrub it from every ``depends_on``.

        Deleting an unknown id is a no-op.
        """
        self._tasks.pop(task_id, None)
        for task in self._tasks.values():
            task.remove_dep(task_id)

    # ── dependency queries ───────────────────────────────────────

    def has_dependency(self, parent_id: int, dep_id: int) -> bool:
        """``True`` if *parent_id* directly depends on *dep_id*."""
        parent = self._tasks.get(parent_id)
        return parent is not None and dep_id in parent.depends_on

    def dependents_of(self, task_id: int) -> list[int]:
        """Ids of tasks that directly depend on *task_id*, in insertion order."""
        return [t.id for t in self._tasks.values() if task_id in t.depends_on]

    # ── cycle safety ─────────────────────────────────────────────

    def can_become_parent(self, parent_id: int, dep_id: int) -> tuple[bool, list[Task]]:
        """Check whether adding ``parent_id -> dep_id`` keeps the graph acyclic.

        First walks everything *dep_id* already depends on; reaching
        *parent_id* means the new edge would close a cycle. If that walk is
        clean, each of the parent's current dependencies is walked too, which
        only finds something when the graph was already corrupt.

        Returns ``(safe, chain)``; ``chain`` is empty when safe, otherwise
        the tasks from the walk's root down to the conflicting task.
        """
        if self.debug > 1:
            log.trace(f"check {parent_id} {dep_id}")

        if parent_id == dep_id:
            task = self._tasks.get(parent_id)
            return False, [task] if task is not None else []

        chain = self._find_path(dep_id, parent_id)
        if chain:
            return False, chain

        parent = self._tasks.get(parent_id)
        if parent is not None:
            for existing in parent.depends_on:
                chain = self._find_path(existing, parent_id)
                if chain:
                    return False, chain

        return True, []

    def _find_path(self, start_id: int, target_id: int) -> list[Task]:
        """Depth-first walk along ``depends_on`` from *start_id*.

        Returns the path ``start .. target`` or ``[]`` if *target_id* is not
        reachable. Unknown ids are treated as leaves. The stack of
        ``(task, remaining deps)`` frames doubles as the current path.
        """
        start = self._tasks.get(start_id)
        if start is None:
            return []

        stack: list[tuple[Task, Iterator[int]]] = []
        seen: set[int] = set()

        def enter(task: Task) -> bool:
            seen.add(task.id)
            stack.append((task, iter(task.depends_on)))
            if self.debug > 1:
                log.trace(f"on {task.id}: {_format_path([t for t, _ in stack])}")
            return task.id == target_id

        found = enter(start)
        while stack and not found:
            _, deps = stack[-1]
            for dep_id in deps:
                if dep_id in seen:
                    continue
                dep = self._tasks.get(dep_id)
                if dep is None:
                    continue
                found = enter(dep)
                break
            else:
                stack.pop()

        if not found:
            return []
        path = [t for t, _ in stack]
        if self.debug > 1:
            log.trace(f"found: {format_chain(path)}")
        return path

    # ── linking ──────────────────────────────────────────────────

    def link(self, parent_id: int, dep_id: int) -> None:
        """Make *parent_id* depend on *dep_id*.

        Raises :class:`TaskNotFoundError`, :class:`SelfReferenceError` or
        :class:`CycleDetectedError`. Linking an existing edge is a no-op.
        """
        parent = self.require(parent_id, "parent")
        self.require(dep_id, "dependency")

        if parent_id == dep_id:
            raise SelfReferenceError(parent_id)

        if dep_id in parent.depends_on:
            return

        safe, chain = self.can_become_parent(parent_id, dep_id)
        if not safe:
            raise CycleDetectedError(parent_id, dep_id, chain)

        parent.add_dep(dep_id)

    def unlink(self, parent_id: int, dep_id: int) -> None:
        """Remove ``parent_id -> dep_id`` if present."""
        parent = self._tasks.get(parent_id)
        if parent is not None:
            parent.remove_dep(dep_id)

    # ── ordering ─────────────────────────────────────────────────

    def topo_sort(self) -> tuple[list[int], list[Task]]:
        """Order tasks so every dependency precedes its dependents.

        Roots are tried in ascending id order and each task's dependencies
        are emitted, in stored order, before the task itself.
        """
        order: list[int] = []
        seen: set[int] = set()

        for root_id in sorted(self._tasks):
            if root_id in seen:
                continue
            seen.add(root_id)
            stack = [(root_id, iter(self._tasks[root_id].depends_on))]
            while stack:
                task_id, deps = stack[-1]
                for dep_id in deps:
                    if dep_id in seen or dep_id not in self._tasks:
                        continue
                    seen.add(dep_id)
                    stack.append((dep_id, iter(self._tasks[dep_id].depends_on)))
                    break
                else:
                    stack.pop()
                    order.append(task_id)

        return order, [self._tasks[task_id] for task_id in order]

    # ── diagnostics ──────────────────────────────────────────────

    def detect_cycle(self) -> list[Task]:
        """Return one cycle as a chain that starts and ends on the same task."""
        done: set[int] = set()

        for root_id in sorted(self._tasks):
            if root_id in done:
                continue
            root = self._tasks[root_id]
            on_path = {root_id}
            stack: list[tuple[Task, Iterator[int]]] = [(root, iter(root.depends_on))]
            while stack:
                task, deps = stack[-1]
                for dep_id in deps:
                    dep = self._tasks.get(dep_id)
                    if dep is None or dep_id in done:
                        continue
                    if dep_id in on_path:
                        path = [t for t, _ in stack]
                        start = next(i for i, t in enumerate(path) if t.id == dep_id)
                        return path[start:] + [dep]
                    on_path.add(dep_id)
                    stack.append((dep, iter(dep.depends_on)))
                    break
                else:
                    stack.pop()
                    on_path.discard(task.id)
                    done.add(task.id)
        return []

    def validate(self) -> list[str]:
        """Return problems that break the graph invariants (empty when sound)."""
        errors: list[str] = []
        for task in self._tasks.values():
            if task.id <= 0:
                errors.append(f"Task {task.id}: id must be a positive integer")
            for dep_id in task.depends_on:
                if dep_id not in self._tasks:
                    errors.append(f"Task {task.id}: dependency {dep_id} not found")

        cycle = self.detect_cycle()
        if cycle:
            errors.append(f"Cycle detected: {format_chain(cycle)}")
        return errors


def _format_path(path: list[Task]) -> str:
    return "->".join(f"[{t.id}]({','.join(str(d) for d in t.depends_on)})" for t in path)
