"""HTA CLI: one-shot task commands plus the interactive shell.

Installed as ``hta`` console_script via pipx / pip.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager

import click
from rich.markup import escape

from hta import __version__, log, view
from hta.config import Config
from hta.errors import HtaError, SerializationError
from hta.session import TaskSession
from hta.tasks.graph import format_chain


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@contextmanager
def _reported() -> Iterator[None]:
    """Turn tracker and file errors into ``[ERROR]`` lines and exit code 1."""
    try:
        yield
    except SerializationError as e:
        log.error(f"Failed to load tasks: {escape(str(e))}")
        sys.exit(1)
    except HtaError as e:
        log.error(escape(str(e)))
        sys.exit(1)
    except OSError as e:
        target = e.filename or ""
        log.error(escape(f"{target}: {e.strerror or e}" if target else str(e)))
        sys.exit(1)


def _session(ctx: click.Context) -> TaskSession:
    cfg: Config = ctx.find_object(Config) or Config()
    with _reported():
        return TaskSession.open(cfg)


def _join_desc(words: tuple[str, ...]) -> str:
    desc = " ".join(words).strip()
    if not desc:
        raise click.UsageError("Task description cannot be empty.")
    return desc


@click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.option("-f", "--filename", default="", help="Task file (default: $HTA_FILE or ./hta.json)")
@click.option(
    "--debug",
    type=click.IntRange(min=0),
    default=None,
    help="0 quiet, 1 debug output, 2 also trace dependency checks",
)
@click.version_option(__version__, prog_name="hta")
@click.pass_context
def main(ctx: click.Context, filename: str, debug: int | None) -> None:
    """HTA: tasks that depend on other tasks.

    Without a command, starts the interactive shell.

    \b
    EXAMPLES:
      hta add "write release notes"     # create task 1
      hta add "tag release"             # create task 2
      hta link 2 1                      # 2 depends on 1
      hta ls --sorted                   # dependencies first
      hta -f ~/work.json                # shell on another file
    """
    cfg = Config(filename=filename, debug=-1 if debug is None else debug)
    log.set_verbose(cfg.verbose)
    log.debug(f"Using {escape(str(cfg.path))}")
    ctx.obj = cfg

    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@main.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Interactive prompt (c, d, l, ls, ln, rn, q)."""
    from hta.shell import Shell

    session = _session(ctx)
    with _reported():
        Shell(session).run()


@main.command()
@click.argument("description", nargs=-1, required=True)
@click.pass_context
def add(ctx: click.Context, description: tuple[str, ...]) -> None:
    """Create a task."""
    desc = _join_desc(description)
    session = _session(ctx)
    with _reported():
        task = session.create(desc)
    log.success(f"add {view.task_label(task)}")


@main.command()
@click.argument("task_id", type=int)
@click.pass_context
def rm(ctx: click.Context, task_id: int) -> None:
    """Delete a task and drop it from every dependency list."""
    session = _session(ctx)
    with _reported():
        task = session.graph.require(task_id)
        dependents = session.graph.dependents_of(task_id)
        session.delete(task_id)
    log.success(f"deleted {view.task_label(task)}")
    if dependents:
        ids = ", ".join(view.task_id(d) for d in dependents)
        log.info(f"no longer a dependency of {ids}")


@main.command()
@click.argument("task_id", type=int)
@click.argument("description", nargs=-1, required=True)
@click.pass_context
def rename(ctx: click.Context, task_id: int, description: tuple[str, ...]) -> None:
    """Change a task's description."""
    desc = _join_desc(description)
    session = _session(ctx)
    with _reported():
        task = session.rename(task_id, desc)
    log.success(f"renamed {view.task_label(task)}")


@main.command()
@click.argument("parent_id", type=int)
@click.argument("dep_id", type=int)
@click.pass_context
def link(ctx: click.Context, parent_id: int, dep_id: int) -> None:
    """Make PARENT_ID depend on DEP_ID."""
    session = _session(ctx)
    with _reported():
        session.link(parent_id, dep_id)
        parent = session.graph.require(parent_id)
        dep = session.graph.require(dep_id)
    log.success(view.link_message(parent, dep, linked=True))


@main.command()
@click.argument("parent_id", type=int)
@click.argument("dep_id", type=int)
@click.pass_context
def unlink(ctx: click.Context, parent_id: int, dep_id: int) -> None:
    """Remove the PARENT_ID -> DEP_ID dependency."""
    session = _session(ctx)
    with _reported():
        parent = session.graph.require(parent_id, "parent")
        dep = session.graph.require(dep_id, "dependency")
        if not session.graph.has_dependency(parent_id, dep_id):
            log.warn(f"{view.task_label(parent)} does not depend on {view.task_label(dep)}")
            return
        session.unlink(parent_id, dep_id)
    log.success(view.link_message(parent, dep, linked=False))


@main.command(name="ls")
@click.option("-s", "--sorted", "topological", is_flag=True, help="Dependencies before dependents")
@click.pass_context
def ls_(ctx: click.Context, topological: bool) -> None:
    """List tasks."""
    session = _session(ctx)
    view.print_tasks(session.list_tasks(topological=topological))


@main.command()
@click.argument("task_id", type=int)
@click.pass_context
def dependents(ctx: click.Context, task_id: int) -> None:
    """List tasks that directly depend on TASK_ID."""
    session = _session(ctx)
    with _reported():
        session.graph.require(task_id)
    ids = session.graph.dependents_of(task_id)
    view.print_tasks(session.graph.require(i) for i in ids)


@main.command()
@click.argument("parent_id", type=int)
@click.argument("dep_id", type=int)
@click.pass_context
def check(ctx: click.Context, parent_id: int, dep_id: int) -> None:
    """Tell whether PARENT_ID may depend on DEP_ID. Exit code 1 if not."""
    session = _session(ctx)
    with _reported():
        session.graph.require(parent_id, "parent")
        session.graph.require(dep_id, "dependency")
    safe, chain = session.graph.can_become_parent(parent_id, dep_id)
    if safe:
        log.success(f"{parent_id} can depend on {dep_id}")
        return
    log.error(f"{parent_id} cannot depend on {dep_id}: dep error chain {escape(format_chain(chain))}")
    sys.exit(1)
