"""HTTP server components for the tag graph."""

from .websocket import ConnectionManager

__all__ = [
    "ConnectionManager",
]
