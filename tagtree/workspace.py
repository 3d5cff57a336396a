"""Workspace handle owning one tag graph and everything that feeds it."""

import asyncio
import logging

from .config import TagTreeConfig
from .core import (
    ChangeNotifier,
    EdgeExtractor,
    FileEvent,
    FileFilter,
    GraphIndex,
    GraphMaintainer,
    Node,
    suggest,
)
from .watcher import FileWatcher

logger = logging.getLogger(__name__)


class Workspace:
    """
    One graph per workspace root.

    Owns the index, the notifier, the maintainer, the event queue the
    maintainer drains, and optionally a file watcher feeding that queue.
    Consumers get the index and notifier from here instead of a global.
    """

    def __init__(self, config: TagTreeConfig):
        self.config = config
        self.index = GraphIndex()
        self.notifier = ChangeNotifier()
        self.file_filter = FileFilter(
            extensions=config.extensions,
            source_dir=config.source_dir,
            skip_dirs=config.skip_dirs,
            root=config.root,
        )
        self.maintainer = GraphMaintainer(
            self.index,
            self.notifier,
            EdgeExtractor(config.grammar),
            self.file_filter,
            name_mode=config.name_mode,
        )
        self.events: asyncio.Queue[FileEvent] = asyncio.Queue()

        self._worker: asyncio.Task | None = None
        self._watcher: FileWatcher | None = None
        self.started = False

    async def start(self):
        """
        Start watching, scan the root, then start consuming events.
        Changes made during the scan queue up and are applied after it.
        """
        if self.started:
            return
        logger.info(f"Starting workspace at {self.config.root} (grammar={self.config.grammar})")

        if self.config.watch:
            self._watcher = FileWatcher(
                self.config.root, self.events, asyncio.get_running_loop(), self.file_filter
            )
            self._watcher.start()

        await self.maintainer.scan(self.config.root)
        self._worker = asyncio.create_task(self.maintainer.run(self.events))

        self.started = True

    async def submit(self, event: FileEvent):
        """Queue an event reported by an external source."""
        await self.events.put(event)

    async def drain(self):
        """Wait until every queued event has been applied."""
        await self.events.join()

    async def rescan(self) -> int:
        await self.drain()
        return await self.maintainer.rescan(self.config.root)

    def drop(self, names: list[str], target: str) -> list[str]:
        """Manually link dropped nodes into ``target`` and notify."""
        linked = self.index.add_manual_links(names, target)
        self.notifier.fire()
        return linked

    def complete(self, line: str, character: int) -> list[str] | None:
        return suggest(self.index, line, character)

    def children(self, name: str | None = None) -> list[Node]:
        return self.index.get_children(name)

    def stats(self) -> dict:
        return {
            "nodes": len(self.index.nodes),
            "edges": len(self.index.edges()),
            "files": len(self.maintainer.records),
            "watching": self._watcher is not None and self._watcher.running,
        }

    async def shutdown(self):
        """Stop the watcher and the event consumer."""
        logger.info("Shutting down workspace...")
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None

        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

        self.started = False
        logger.info("Workspace shutdown complete")
