"""Edge extraction from file contents.

Two grammars are supported, one per deployment:

- arrow: ``[a->b]`` declares ``a->b``; ``[->b]`` declares ``file->b``;
  ``[a->]`` declares ``a->file``; ``[a->mid->c]`` links the file and ``c``
  in both directions (``mid`` is ignored).
- tag: ``#[tag]`` declares ``file->tag``.

Extraction is pure over its input text. Reading a file is the only I/O and
happens in ``extract_from_file``.
"""

import asyncio
import logging
import re
from pathlib import Path

from .constants import ARROW_PATTERN, EDGE_SEPARATOR, GRAMMAR_ARROW, GRAMMAR_TAG, GRAMMARS, TAG_PATTERN
from .exceptions import MalformedEdgeSyntax, ReadFailure
from .utils import edge_key, validate_choice

logger = logging.getLogger(__name__)

_ARROW_RE = re.compile(ARROW_PATTERN)
_TAG_RE = re.compile(TAG_PATTERN)


def parse_arrow_expression(expression: str, file_name: str) -> set[str]:
    """Parse the inside of one ``[...->...]`` match into edges."""
    segments = [s.strip() for s in expression.split(EDGE_SEPARATOR)]

    if len(segments) == 3:
        # two-way case: '->example->'
        other = segments[2]
        if not other:
            raise MalformedEdgeSyntax(expression)
        return {edge_key(file_name, other), edge_key(other, file_name)}

    if len(segments) == 2:
        # one-way cases: '->example', 'example->', 'a->b'
        from_name = segments[0] or file_name
        to_name = segments[1] or file_name
        if not segments[0] and not segments[1]:
            raise MalformedEdgeSyntax(expression)
        return {edge_key(from_name, to_name)}

    raise MalformedEdgeSyntax(expression)


def parse_tag(tag: str) -> str:
    """Validate one ``#[...]`` match and return the tag."""
    tag = tag.strip()
    if not tag or EDGE_SEPARATOR in tag:
        raise MalformedEdgeSyntax(tag)
    return tag


class EdgeExtractor:
    """Extracts declared edges from text using one grammar."""

    def __init__(self, grammar: str = GRAMMAR_TAG):
        validate_choice(grammar, GRAMMARS, "grammar")
        self.grammar = grammar

    def extract(self, file_name: str, text: str) -> set[str]:
        """Return the set of edges declared by ``text`` inside ``file_name``."""
        if self.grammar == GRAMMAR_ARROW:
            return self._extract_arrows(file_name, text)
        return {edge_key(file_name, tag) for tag in self.extract_tags(text)}

    def extract_tags(self, text: str) -> set[str]:
        """Return the unique tags declared with ``#[tag]``."""
        tags = set()
        for match in _TAG_RE.finditer(text):
            try:
                tags.add(parse_tag(match.group(1)))
            except MalformedEdgeSyntax as e:
                logger.debug(f"Skipping {e}")
        return tags

    def _extract_arrows(self, file_name: str, text: str) -> set[str]:
        edges = set()
        for match in _ARROW_RE.finditer(text):
            try:
                edges |= parse_arrow_expression(match.group(1), file_name)
            except MalformedEdgeSyntax as e:
                logger.debug(f"Skipping {e} in {file_name}")
        return edges

    async def extract_from_file(self, path: str, file_name: str) -> set[str]:
        """Read ``path`` and extract its edges. Raises ReadFailure."""
        text = await read_text(path)
        return self.extract(file_name, text)


async def read_text(path: str) -> str:
    """Read a whole file off the event loop. Raises ReadFailure."""
    try:
        data = await asyncio.to_thread(Path(path).read_bytes)
    except OSError as e:
        raise ReadFailure(path, e.strerror or str(e)) from e
    return data.decode("utf-8", errors="replace")
