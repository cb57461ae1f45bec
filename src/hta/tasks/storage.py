"""JSON persistence for the task graph.

The file is a JSON array of ``{"id", "desc", "depends_on", "closed"}``
records, in insertion order.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.markup import escape

from hta import log
from hta.errors import SerializationError
from hta.io_utils import PathLike, read_text, write_text
from hta.tasks.graph import TaskGraph
from hta.tasks.model import Task


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_record(path: Path, index: int, record: Any) -> None:
    where = f"record #{index}"
    if not isinstance(record, dict):
        raise SerializationError(path, f"{where} is not an object")

    task_id = record.get("id")
    if not _is_int(task_id) or task_id <= 0:
        raise SerializationError(path, f"{where}: 'id' must be a positive integer, got {task_id!r}")
    where = f"task {task_id}"

    if not isinstance(record.get("desc", ""), str):
        raise SerializationError(path, f"{where}: 'desc' must be a string")

    deps = record.get("depends_on")
    if deps is not None:
        if not isinstance(deps, list) or not all(_is_int(d) for d in deps):
            raise SerializationError(path, f"{where}: 'depends_on' must be a list of integers")

    if not isinstance(record.get("closed", False), bool):
        raise SerializationError(path, f"{where}: 'closed' must be a boolean")


def parse_tasks(text: str, path: PathLike = "<memory>") -> list[Task]:
    """Decode and type-check the serialized task list."""
    p = Path(path)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SerializationError(p, f"invalid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise SerializationError(p, "top level must be a JSON array of tasks")

    tasks: list[Task] = []
    for index, record in enumerate(data):
        _check_record(p, index, record)
        tasks.append(Task.from_record(record))
    return tasks


def load_graph(path: PathLike, *, debug: int = 0) -> TaskGraph:
    """Load a graph from *path*.

    ``FileNotFoundError`` propagates so the caller can start empty; other
    read failures propagate as ``OSError``. Malformed content raises
    :class:`SerializationError`.
    """
    p = Path(path)
    tasks = parse_tasks(read_text(p), p)
    try:
        graph = TaskGraph(tasks, debug=debug)
    except ValueError as exc:
        raise SerializationError(p, str(exc)) from exc

    problems = graph.validate()
    if problems:
        raise SerializationError(p, "; ".join(problems))

    log.debug(f"Loaded {len(graph)} task(s) from {escape(str(p))}")
    return graph


def dump_graph(graph: TaskGraph) -> str:
    return json.dumps([t.to_record() for t in graph.tasks], indent=2, ensure_ascii=False) + "\n"


def save_graph(path: PathLike, graph: TaskGraph) -> None:
    """Overwrite *path* with the serialized graph. ``OSError`` propagates."""
    write_text(path, dump_graph(graph), make_parents=True)
    log.debug(f"Saved {len(graph)} task(s) to {escape(str(path))}")
