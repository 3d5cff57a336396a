"""Type definitions for the tag graph."""

from dataclasses import dataclass, field
from enum import Enum


class NodeKind(str, Enum):
    """Discriminant for graph nodes."""
    TAG = "tag"
    FILE = "file"


@dataclass
class Node:
    """Node in the tag graph.

    TAG nodes are tags or pure graph nodes named by an edge expression.
    FILE nodes stand for a tracked file and carry its location.
    """
    name: str
    kind: NodeKind = NodeKind.TAG
    location: str | None = None
    is_starred: bool = False
    # 'in' is reserved, so adjacency is stored as inbound/outbound
    inbound: list[str] = field(default_factory=list)
    outbound: list[str] = field(default_factory=list)

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    def to_dict(self) -> dict:
        """Serialize for JSON responses."""
        data = {
            "name": self.name,
            "kind": self.kind.value,
            "isStarred": self.is_starred,
            "in": list(self.inbound),
            "out": list(self.outbound),
        }
        if self.is_file:
            data["location"] = self.location
        return data


class FileState(str, Enum):
    """Lifecycle of a tracked file record."""
    TRACKED = "tracked"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass
class FileRecord:
    """Edges last extracted from one file."""
    name: str
    path: str
    edges: set[str] = field(default_factory=set)
    state: FileState = FileState.TRACKED
    # Sequence numbers of the latest read started and the latest applied
    reads: int = 0
    applied: int = 0
