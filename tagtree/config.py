"""Configuration for a tag graph workspace."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.constants import (
    GRAMMAR_TAG,
    GRAMMARS,
    NAME_MODE_BASENAME,
    NAME_MODES,
    SKIP_DIRS,
    SOURCE_DIR,
    WATCHED_EXTENSIONS,
)
from .core.utils import validate_choice

DEFAULT_HTTP_HOST = "127.0.0.1"
DEFAULT_HTTP_PORT = 8766

_TRUE_VALUES = ("1", "true", "yes", "on")


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class TagTreeConfig:
    """Tag graph configuration."""
    root: Path = field(default_factory=Path.cwd)
    grammar: str = GRAMMAR_TAG
    name_mode: str = NAME_MODE_BASENAME
    extensions: tuple[str, ...] = WATCHED_EXTENSIONS
    source_dir: str = SOURCE_DIR
    skip_dirs: tuple[str, ...] = SKIP_DIRS
    watch: bool = True
    http_host: str = DEFAULT_HTTP_HOST
    http_port: int = DEFAULT_HTTP_PORT

    def __post_init__(self):
        validate_choice(self.grammar, GRAMMARS, "grammar")
        validate_choice(self.name_mode, NAME_MODES, "name mode")

    @classmethod
    def from_env(cls) -> "TagTreeConfig":
        """Create configuration from environment variables."""
        return cls(
            root=Path(os.getenv("TAGTREE_ROOT", str(Path.cwd()))),
            grammar=os.getenv("TAGTREE_GRAMMAR", GRAMMAR_TAG),
            name_mode=os.getenv("TAGTREE_NAME_MODE", NAME_MODE_BASENAME),
            extensions=_split_list(os.getenv("TAGTREE_EXTENSIONS", ",".join(WATCHED_EXTENSIONS))),
            source_dir=os.getenv("TAGTREE_SOURCE_DIR", SOURCE_DIR),
            skip_dirs=_split_list(os.getenv("TAGTREE_SKIP_DIRS", ",".join(SKIP_DIRS))),
            watch=os.getenv("TAGTREE_WATCH", "true").lower() in _TRUE_VALUES,
            http_host=os.getenv("TAGTREE_HTTP_HOST", DEFAULT_HTTP_HOST),
            http_port=int(os.getenv("TAGTREE_HTTP_PORT", str(DEFAULT_HTTP_PORT))),
        )
