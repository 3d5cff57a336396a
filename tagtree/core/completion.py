"""Name suggestions for a tag being typed."""

import re

from .constants import COMPLETION_PATTERN
from .index import GraphIndex

_COMPLETION_RE = re.compile(COMPLETION_PATTERN)


def completion_prefix(line: str, character: int) -> str:
    """Line text up to the cursor, plus the auto-inserted closing bracket."""
    return line[: character + 1]


def suggest(index: GraphIndex, line: str, character: int) -> list[str] | None:
    """
    Return node names completing the ``#[...]`` under the cursor.
    Returns None when the cursor is not inside a tag.
    """
    match = _COMPLETION_RE.search(completion_prefix(line, character))
    if not match:
        return None

    typed = match.group(1)
    return sorted(node.name for node in index.get_nodes() if node.name.startswith(typed))
