"""Interactive line-prompt front end."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

import click
from rich.markup import escape

from hta import log, view
from hta.session import TaskSession
from hta.tasks.graph import format_chain

Validator = Callable[[str], None]

QUIT = ("q", "quit", "exit")
BACK = "e"

HELP = """\
  c    create a task
  d    delete tasks
  l    list tasks in creation order
  ls   list tasks dependencies-first
  ln   link or unlink two tasks ("p d")
  rn   rename a task
  q    quit

Inside d, ln and rn: "e" goes back, an empty line lists tasks."""


class Shell:
    """Prompt loop driving a :class:`TaskSession`.

    Input is validated at the prompt: an invalid entry prints the reason
    and asks again, so handlers only ever see well-formed input.
    """

    def __init__(self, session: TaskSession) -> None:
        self.session = session
        self.graph = session.graph
        self._prompt: list[str] = [self._arrow()]
        self._commands: dict[str, Callable[[], None]] = {
            "c": self.create,
            "d": self.delete,
            "l": self.list_tasks,
            "ls": self.list_sorted,
            "ln": self.link,
            "rn": self.rename,
            "?": self.help,
            "h": self.help,
        }

    @staticmethod
    def _arrow() -> str:
        return click.style("❯", fg="bright_green")

    # ── prompt plumbing ──────────────────────────────────────────

    @contextmanager
    def _nested(self, label: str, color: str) -> Iterator[None]:
        self._prompt.append(click.style(label, fg=color) + self._arrow())
        try:
            yield
        finally:
            self._prompt.pop()

    def _read(self, validate: Validator | None = None, default: str = "") -> str:
        def proc(value: str) -> str:
            value = value.strip()
            if validate is not None:
                validate(value)
            return value

        return click.prompt(
            "".join(self._prompt),
            default=default,
            show_default=bool(default),
            prompt_suffix=" ",
            value_proc=proc,
        )

    def _parse_id(self, raw: str, what: str = "task") -> int:
        try:
            value = int(raw)
        except ValueError:
            raise click.UsageError(f"{what} is not a number") from None
        if not self.graph.exists(value):
            raise click.UsageError(f"{what} {value} not found")
        return value

    def _parse_pair(self, raw: str) -> tuple[int, int]:
        parts = raw.split()
        if len(parts) != 2:
            raise click.UsageError("expected two ids: 'p d'")
        return self._parse_id(parts[0], "p"), self._parse_id(parts[1], "d")

    def _validate_id(self, raw: str) -> None:
        if raw in ("", BACK):
            return
        self._parse_id(raw)

    def _validate_link(self, raw: str) -> None:
        if raw in ("", BACK, "l", "ls"):
            return
        parent_id, dep_id = self._parse_pair(raw)
        if parent_id == dep_id:
            raise click.UsageError("a task cannot depend on itself")
        if self.graph.has_dependency(parent_id, dep_id):
            return
        safe, chain = self.graph.can_become_parent(parent_id, dep_id)
        if not safe:
            raise click.UsageError(f"dep error chain {format_chain(chain)}")

    def _list_with_help(self, *hints: str) -> None:
        self.list_tasks()
        for hint in (f"'{BACK}' for exit", *hints):
            log.console.print(f"[dim]  {escape(hint)}[/dim]")

    # ── main loop ────────────────────────────────────────────────

    def run(self) -> None:
        log.console.print(f"Loaded [bright_green]{len(self.graph)}[/bright_green] tasks")
        try:
            while True:
                cmd = self._read()
                log.debug(f"usr: {escape(repr(cmd))}")
                if cmd in QUIT:
                    break
                handler = self._commands.get(cmd)
                if handler is None:
                    if cmd:
                        log.warn(f"Unknown command {escape(repr(cmd))}, '?' for help")
                    continue
                handler()
        except click.Abort:
            pass
        click.echo("exit")

    # ── commands ─────────────────────────────────────────────────

    def help(self) -> None:
        log.console.print(escape(HELP))

    def list_tasks(self) -> None:
        view.print_tasks(self.session.list_tasks())

    def list_sorted(self) -> None:
        view.print_tasks(self.session.list_tasks(topological=True))

    def create(self) -> None:
        with self._nested("new", "bright_yellow"):
            desc = self._read()
        if not desc:
            log.console.print("abort")
            return
        task = self.session.create(desc)
        log.console.print(f"[bright_yellow]add[/bright_yellow] {view.task_label(task)}")

    def delete(self) -> None:
        with self._nested("delete", "red"):
            while True:
                raw = self._read(self._validate_id)
                if raw == BACK:
                    return
                if not raw:
                    self._list_with_help()
                    continue
                self.session.delete(int(raw))
                log.success("ok")

    def link(self) -> None:
        with self._nested("ln", "red"):
            while True:
                raw = self._read(self._validate_link)
                if raw == BACK:
                    return
                if raw == "l":
                    self.list_tasks()
                    continue
                if raw == "ls":
                    self.list_sorted()
                    continue
                if not raw:
                    self._list_with_help("'p d' p depends on d (again to unlink)")
                    continue
                parent_id, dep_id = self._parse_pair(raw)
                linked = self.session.toggle(parent_id, dep_id)
                parent = self.graph.require(parent_id)
                dep = self.graph.require(dep_id)
                log.success(view.link_message(parent, dep, linked))

    def rename(self) -> None:
        with self._nested("rename", "bright_yellow"):
            while True:
                raw = self._read(self._validate_id)
                if raw == BACK:
                    return
                if not raw:
                    self._list_with_help()
                    continue
                task = self.graph.require(int(raw))
                with self._nested(str(task.id), "bright_blue"):
                    desc = self._read(default=task.desc)
                if not desc:
                    log.console.print("abort")
                    return
                self.session.rename(task.id, desc)
                log.success("ok")
                return
