"""Configuration defaults, env vars, and runtime options for HTA."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


DEFAULT_FILENAME = "./hta.json"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class Config:
    """Runtime configuration. CLI flags win over ``HTA_*`` env vars."""

    # Storage
    filename: str = ""
    autosave: bool = True

    # Diagnostics: 0 quiet, 1 CLI debug lines, 2 also engine traces
    debug: int = -1

    def __post_init__(self) -> None:
        if not self.filename:
            self.filename = os.environ.get("HTA_FILE") or DEFAULT_FILENAME
        if self.debug < 0:
            self.debug = max(_env_int("HTA_DEBUG", 0), 0)

    @property
    def path(self) -> Path:
        return Path(self.filename).expanduser()

    @property
    def verbose(self) -> bool:
        return self.debug > 0
