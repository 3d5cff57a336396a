"""Path filtering for files that contribute to the graph.

A file is tracked when it has a watched extension, sits somewhere below a
source directory (``src`` by default) and is not under a skipped or hidden
directory. File names containing the edge separator are never tracked.
"""

import os
from pathlib import Path
from typing import Iterable, Iterator

from .constants import EDGE_SEPARATOR, SKIP_DIRS, SOURCE_DIR, WATCHED_EXTENSIONS


def is_hidden_part(part: str) -> bool:
    return part.startswith(".") and part not in (".", "..")


class FileFilter:
    """Decides which paths are part of the graph."""

    def __init__(
        self,
        extensions: Iterable[str] = WATCHED_EXTENSIONS,
        source_dir: str = SOURCE_DIR,
        skip_dirs: Iterable[str] = SKIP_DIRS,
        root: Path | None = None,
    ):
        self.extensions = {ext.lower().lstrip(".") for ext in extensions}
        self.source_dir = source_dir
        self.skip_dirs = set(skip_dirs)
        self.root = Path(root).resolve() if root is not None else None

    def matches_extension(self, path: str) -> bool:
        suffix = Path(path).suffix.lower().lstrip(".")
        return suffix in self.extensions

    def should_skip_dir(self, name: str) -> bool:
        return name in self.skip_dirs or is_hidden_part(name)

    def ignore_file(self, path: str) -> bool:
        """True if ``path`` must not create or touch a file record."""
        directories = Path(path).parts[:-1]
        if self.source_dir not in directories:
            return True
        if any(self.should_skip_dir(part) for part in self._relative_dirs(path)):
            return True
        # The name would be split as an edge key
        if EDGE_SEPARATOR in Path(path).name:
            return True
        return not self.matches_extension(path)

    def _relative_dirs(self, path: str) -> tuple[str, ...]:
        """Directory parts below the root, or all of them outside it."""
        p = Path(path)
        if self.root is not None:
            try:
                p = p.resolve().relative_to(self.root)
            except ValueError:
                pass
        return p.parts[:-1]


def enumerate_files(root: Path, file_filter: FileFilter) -> Iterator[str]:
    """Walk ``root`` once, yielding every file the filter accepts."""
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune skipped directories in place so os.walk does not descend
        dirnames[:] = [d for d in dirnames if not file_filter.should_skip_dir(d)]
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            if not file_filter.ignore_file(path):
                yield path
