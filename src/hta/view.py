"""Console rendering of tasks and link results."""

from __future__ import annotations

from collections.abc import Iterable

from rich.markup import escape

from hta import log
from hta.tasks.model import Task


def task_id(value: int) -> str:
    return f"[bright_blue]{value}[/bright_blue]"


def task_line(task: Task) -> str:
    """``  3: desc [1, 2]`` with the dependency list omitted when empty."""
    line = f"[bright_blue]{task.id:>3}[/bright_blue]: {escape(task.desc)}"
    if task.depends_on:
        deps = ", ".join(task_id(d) for d in task.depends_on)
        line += f" \\[{deps}]"
    return line


def task_label(task: Task) -> str:
    return f"{task_id(task.id)} {escape(task.desc)}"


def print_tasks(tasks: Iterable[Task]) -> int:
    count = 0
    for task in tasks:
        log.console.print(task_line(task))
        count += 1
    if not count:
        log.console.print("[dim]No tasks.[/dim]")
    return count


def link_message(parent: Task, dep: Task, linked: bool) -> str:
    verb = "depends on" if linked else "no longer depends on"
    return f"{task_label(parent)} {verb} {task_label(dep)}"
