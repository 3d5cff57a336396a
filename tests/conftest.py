"""Shared fixtures for tag graph tests."""

from pathlib import Path

import pytest

from tagtree.config import TagTreeConfig
from tagtree.core import (
    ChangeNotifier,
    EdgeExtractor,
    FileFilter,
    GRAMMAR_ARROW,
    GRAMMAR_TAG,
    GraphIndex,
    GraphMaintainer,
)


class SourceTree:
    """Writes files below ``<root>/src`` and hands back their paths."""

    def __init__(self, root: Path):
        self.root = root
        self.src = root / "src"
        self.src.mkdir(parents=True, exist_ok=True)

    def write(self, relative: str, text: str) -> str:
        path = self.src / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return str(path)

    def remove(self, relative: str) -> str:
        path = self.src / relative
        path.unlink()
        return str(path)

    def rename(self, old: str, new: str) -> tuple[str, str]:
        old_path = self.src / old
        new_path = self.src / new
        old_path.rename(new_path)
        return str(old_path), str(new_path)


@pytest.fixture
def tree(tmp_path):
    return SourceTree(tmp_path)


@pytest.fixture
def index():
    return GraphIndex()


@pytest.fixture
def notifier():
    return ChangeNotifier()


def make_maintainer(root: Path, grammar: str, index: GraphIndex, notifier: ChangeNotifier) -> GraphMaintainer:
    return GraphMaintainer(index, notifier, EdgeExtractor(grammar), FileFilter(root=root))


@pytest.fixture
def tag_maintainer(tmp_path, index, notifier):
    return make_maintainer(tmp_path, GRAMMAR_TAG, index, notifier)


@pytest.fixture
def arrow_maintainer(tmp_path, index, notifier):
    return make_maintainer(tmp_path, GRAMMAR_ARROW, index, notifier)


@pytest.fixture
def config(tmp_path):
    return TagTreeConfig(root=tmp_path, watch=False)


def names(nodes) -> list[str]:
    return [node.name for node in nodes]
