"""Utility functions for tag graph operations."""

from pathlib import PurePath

from .constants import EDGE_SEPARATOR, NAME_MODE_BASENAME, NAME_MODE_PATH, NAME_MODES
from .exceptions import InvalidConfigError


def edge_key(from_name: str, to_name: str) -> str:
    """Generate the canonical string key for an edge."""
    return f"{from_name}{EDGE_SEPARATOR}{to_name}"


def split_edge(edge: str) -> tuple[str, str]:
    """Split a canonical edge key into (from, to)."""
    from_name, _, to_name = edge.partition(EDGE_SEPARATOR)
    return from_name, to_name


def get_basename(path: str) -> str:
    """Base name of a path without its extension."""
    return PurePath(path).stem


def node_name_for(path: str, name_mode: str = NAME_MODE_BASENAME) -> str:
    """Node name a file is known by in the graph."""
    if name_mode == NAME_MODE_PATH:
        return PurePath(path).as_posix()
    return get_basename(path)


def validate_choice(value: str, choices: tuple[str, ...], what: str):
    """Validate a configuration choice. Raises InvalidConfigError if invalid."""
    if value not in choices:
        raise InvalidConfigError(f"Invalid {what} '{value}', must be one of {choices}")


def validate_name_mode(name_mode: str):
    validate_choice(name_mode, NAME_MODES, "name mode")
