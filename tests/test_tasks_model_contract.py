"""Contract tests for the Task record shared by graph, storage and CLI."""

from __future__ import annotations

from dataclasses import fields

from hta.tasks.model import Task


def test_task_fields_match_file_format() -> None:
    names = [f.name for f in fields(Task)]
    assert names == ["id", "desc", "depends_on", "closed"]


def test_task_defaults() -> None:
    task = Task(id=1)
    assert task.desc == ""
    assert task.depends_on == []
    assert task.closed is False


def test_depends_on_is_not_shared() -> None:
    a = Task(id=1)
    b = Task(id=2)
    a.depends_on.append(2)
    assert b.depends_on == []


def test_add_dep_skips_duplicates() -> None:
    task = Task(id=1)
    assert task.add_dep(2) is True
    assert task.add_dep(2) is False
    assert task.depends_on == [2]


def test_remove_dep() -> None:
    task = Task(id=1, depends_on=[2, 3])
    assert task.remove_dep(2) is True
    assert task.remove_dep(2) is False
    assert task.depends_on == [3]


def test_record_round_trip() -> None:
    task = Task(id=4, desc="ship it", depends_on=[1, 3], closed=True)
    record = task.to_record()
    assert record == {"id": 4, "desc": "ship it", "depends_on": [1, 3], "closed": True}
    assert Task.from_record(record) == task


def test_from_record_null_depends_on_and_missing_closed() -> None:
    task = Task.from_record({"id": 2, "desc": "x", "depends_on": None})
    assert task.depends_on == []
    assert task.closed is False
