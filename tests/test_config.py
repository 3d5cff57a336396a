"""Tests for environment configuration."""

from pathlib import Path

import pytest

from tagtree.config import DEFAULT_HTTP_PORT, TagTreeConfig
from tagtree.core import GRAMMAR_ARROW, GRAMMAR_TAG, InvalidConfigError, WATCHED_EXTENSIONS


def test_defaults(monkeypatch):
    for var in ("TAGTREE_GRAMMAR", "TAGTREE_EXTENSIONS", "TAGTREE_WATCH", "TAGTREE_HTTP_PORT"):
        monkeypatch.delenv(var, raising=False)

    config = TagTreeConfig.from_env()

    assert config.grammar == GRAMMAR_TAG
    assert config.extensions == WATCHED_EXTENSIONS
    assert config.watch is True
    assert config.http_port == DEFAULT_HTTP_PORT


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TAGTREE_ROOT", str(tmp_path))
    monkeypatch.setenv("TAGTREE_GRAMMAR", GRAMMAR_ARROW)
    monkeypatch.setenv("TAGTREE_NAME_MODE", "path")
    monkeypatch.setenv("TAGTREE_EXTENSIONS", "md, txt,")
    monkeypatch.setenv("TAGTREE_SKIP_DIRS", "node_modules,dist")
    monkeypatch.setenv("TAGTREE_WATCH", "0")
    monkeypatch.setenv("TAGTREE_HTTP_PORT", "9000")

    config = TagTreeConfig.from_env()

    assert config.root == Path(tmp_path)
    assert config.grammar == GRAMMAR_ARROW
    assert config.name_mode == "path"
    assert config.extensions == ("md", "txt")
    assert config.skip_dirs == ("node_modules", "dist")
    assert config.watch is False
    assert config.http_port == 9000


@pytest.mark.parametrize("kwargs", [{"grammar": "wiki"}, {"name_mode": "inode"}])
def test_invalid_choices_are_rejected(kwargs):
    with pytest.raises(InvalidConfigError):
        TagTreeConfig(**kwargs)
