"""Task record and its JSON-record form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Task:
    id: int
    desc: str = ""
    depends_on: list[int] = field(default_factory=list)
    # Kept for file compatibility; nothing toggles it yet.
    closed: bool = False

    def add_dep(self, dep_id: int) -> bool:
        """Append *dep_id* unless already present. Return ``True`` if added."""
        if dep_id in self.depends_on:
            return False
        self.depends_on.append(dep_id)
        return True

    def remove_dep(self, dep_id: int) -> bool:
        """Drop *dep_id* from ``depends_on``. Return ``True`` if it was there."""
        if dep_id not in self.depends_on:
            return False
        self.depends_on = [d for d in self.depends_on if d != dep_id]
        return True

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "desc": self.desc,
            "depends_on": list(self.depends_on),
            "closed": self.closed,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Task:
        """Build a task from an already type-checked record."""
        return cls(
            id=record["id"],
            desc=record.get("desc", ""),
            depends_on=list(record.get("depends_on") or []),
            closed=record.get("closed", False),
        )
