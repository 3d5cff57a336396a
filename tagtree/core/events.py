"""Typed file events consumed by the graph maintainer."""

from dataclasses import dataclass
from enum import Enum


class EventKind(str, Enum):
    SAVED = "saved"
    CREATED = "created"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True)
class FileEvent:
    """One change reported by a file event source.

    ``new_path`` is set only for RENAMED events, where ``path`` is the old path.
    """
    kind: EventKind
    path: str
    new_path: str | None = None

    @classmethod
    def saved(cls, path: str) -> "FileEvent":
        return cls(EventKind.SAVED, path)

    @classmethod
    def created(cls, path: str) -> "FileEvent":
        return cls(EventKind.CREATED, path)

    @classmethod
    def deleted(cls, path: str) -> "FileEvent":
        return cls(EventKind.DELETED, path)

    @classmethod
    def renamed(cls, old_path: str, new_path: str) -> "FileEvent":
        return cls(EventKind.RENAMED, old_path, new_path)
