"""Shared fixtures for hta tests.

File handling in tests:
- Use tmp_path for any task file so tests are isolated and cleaned up.
- Use hta.io_utils read_text/write_text for consistent UTF-8 I/O.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from hta import log
from hta.config import Config
from hta.tasks.graph import TaskGraph
from hta.tasks.model import Task


def _make_task(
    id: int,
    desc: str = "",
    depends_on: list[int] | None = None,
    closed: bool = False,
) -> Task:
    return Task(
        id=id,
        desc=desc or f"Task {id}",
        depends_on=depends_on or [],
        closed=closed,
    )


def _make_graph(count: int = 0, edges: list[tuple[int, int]] | None = None) -> TaskGraph:
    """Graph with tasks ``1..count`` linked through :meth:`TaskGraph.link`."""
    graph = TaskGraph()
    for n in range(1, count + 1):
        graph.create(f"Task {n}")
    for parent_id, dep_id in edges or []:
        graph.link(parent_id, dep_id)
    return graph


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's HTA_* settings out of the tests."""
    monkeypatch.delenv("HTA_FILE", raising=False)
    monkeypatch.delenv("HTA_DEBUG", raising=False)
    log.set_verbose(False)


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def make_graph():
    """Factory fixture that creates TaskGraph instances."""
    return _make_graph


@pytest.fixture
def task_file(tmp_path: Path) -> Path:
    """Path for a task file that does not exist yet."""
    return tmp_path / "hta.json"


@pytest.fixture
def cfg(task_file: Path) -> Config:
    return Config(filename=str(task_file), debug=0)
