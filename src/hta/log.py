"""Logging utilities with colored output via Rich.

Messages are rich markup: escape user text (task descriptions, paths)
with ``rich.markup.escape`` before passing it in.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)
_err_console = Console(highlight=False, stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def _emit(tag: str, style: str, msg: str, *, stderr: bool = False) -> None:
    out = _err_console if stderr else console
    out.print(f"[{style}]\\[{tag}][/{style}] {msg}")


def info(msg: str) -> None:
    _emit("INFO", "blue", msg)


def success(msg: str) -> None:
    _emit("OK", "green", msg)


def warn(msg: str) -> None:
    _emit("WARN", "yellow", msg)


def error(msg: str) -> None:
    _emit("ERROR", "red", msg, stderr=True)


def debug(msg: str) -> None:
    if _verbose:
        console.print(f"[dim]\\[DEBUG] {msg}[/dim]")


def trace(msg: str) -> None:
    """Dependency-walk output; plain text, printed as-is.

    Not gated here: the graph passes its own debug level.
    """
    console.print(f"[dim]\\[TRACE] {escape(msg)}[/dim]")
