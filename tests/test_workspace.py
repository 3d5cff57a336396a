"""Tests for the workspace handle."""

import asyncio

import pytest

from tagtree.config import TagTreeConfig
from tagtree.core import FileEvent
from tagtree.workspace import Workspace


@pytest.mark.asyncio
async def test_lifecycle(tree, config):
    tree.write("foo.ts", "#[alpha]")
    workspace = Workspace(config)
    signals = []
    workspace.notifier.subscribe(lambda: signals.append(1))

    await workspace.start()
    assert workspace.stats() == {"nodes": 2, "edges": 1, "files": 1, "watching": False}
    assert len(signals) == 1

    path = tree.write("bar.md", "#[alpha] #[beta]")
    await workspace.submit(FileEvent.created(path))
    await workspace.drain()
    assert [node.name for node in workspace.children("alpha")] == ["bar", "foo"]

    await workspace.shutdown()
    assert workspace.started is False


@pytest.mark.asyncio
async def test_drop_notifies(tree, config):
    tree.write("foo.ts", "#[alpha] #[beta]")
    workspace = Workspace(config)
    await workspace.start()
    signals = []
    workspace.notifier.subscribe(lambda: signals.append(1))

    try:
        assert workspace.drop(["alpha"], "beta") == ["alpha"]
        assert signals == [1]
        assert workspace.index.get_node("beta").inbound == ["foo", "alpha"]
    finally:
        await workspace.shutdown()


@pytest.mark.asyncio
async def test_path_name_mode_keeps_same_basenames_apart(tree, tmp_path):
    tree.write("a/index.ts", "#[alpha]")
    tree.write("b/index.ts", "#[alpha]")
    workspace = Workspace(TagTreeConfig(root=tmp_path, watch=False, name_mode="path"))

    await workspace.start()
    try:
        assert workspace.stats()["files"] == 2
        assert len(workspace.index.sources_for(str(tree.src / "a" / "index.ts"), "alpha")) == 1
    finally:
        await workspace.shutdown()


@pytest.mark.asyncio
async def test_file_written_during_scan_is_picked_up(tree, tmp_path, monkeypatch):
    tree.write("foo.ts", "#[alpha]")
    workspace = Workspace(TagTreeConfig(root=tmp_path, watch=True))
    scan = workspace.maintainer.scan

    async def scan_then_write(root):
        scanned = await scan(root)
        tree.write("late.md", "#[late]")
        return scanned

    monkeypatch.setattr(workspace.maintainer, "scan", scan_then_write)

    await workspace.start()
    try:
        tags = set()
        for _ in range(50):
            await asyncio.sleep(0.1)
            await workspace.drain()
            tags = {node.name for node in workspace.index.get_tags()}
            if "late" in tags:
                break
        assert tags == {"alpha", "late"}
    finally:
        await workspace.shutdown()
