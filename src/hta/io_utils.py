"""Wrappers for text file I/O with consistent encoding (UTF-8)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

PathLike = Path | str


def read_text(path: PathLike, errors: str = "strict", **kwargs: Any) -> str:
    """Read path as text with UTF-8 encoding. Forwards extra kwargs to Path.read_text."""
    return Path(path).read_text(encoding="utf-8", errors=errors, **kwargs)


def write_text(path: PathLike, text: str, *, make_parents: bool = False, **kwargs: Any) -> None:
    """Overwrite path with *text* as UTF-8.

    With *make_parents*, missing parent directories are created first.
    """
    p = Path(path)
    if make_parents:
        p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8", **kwargs)
