"""
Per-run change counters.

``Metrics`` is owned by a single reconciliation run and passed explicitly to
the components that update it.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class Metrics:
    """Counts of products added, updated and deleted during one run."""

    added: int = 0
    updated: int = 0
    deleted: int = 0

    def __post_init__(self) -> None:
        for name in ("added", "updated", "deleted"):
            if getattr(self, name) < 0:
                raise ValueError(f"Metrics counter '{name}' cannot be negative")

    @classmethod
    def zero(cls) -> "Metrics":
        return cls()

    @classmethod
    def one_added(cls) -> "Metrics":
        return cls(added=1)

    @classmethod
    def one_updated(cls) -> "Metrics":
        return cls(updated=1)

    @classmethod
    def one_deleted(cls) -> "Metrics":
        return cls(deleted=1)

    def merge(self, other: "Metrics") -> "Metrics":
        """Add ``other`` into this instance and return it."""
        self.added += other.added
        self.updated += other.updated
        self.deleted += other.deleted
        return self

    def __add__(self, other: "Metrics") -> "Metrics":
        if not isinstance(other, Metrics):
            return NotImplemented
        return Metrics(
            added=self.added + other.added,
            updated=self.updated + other.updated,
            deleted=self.deleted + other.deleted,
        )

    @property
    def total(self) -> int:
        return self.added + self.updated + self.deleted

    def to_dict(self) -> dict[str, Any]:
        return {
            "added": self.added,
            "updated": self.updated,
            "deleted": self.deleted,
        }
