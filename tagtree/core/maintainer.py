"""Keeps the graph index in step with file contents.

Every file event goes through the same sequence: extract the file's edges,
diff them against the edges cached for that file, apply additions and then
removals to the index, and fire the notifier if anything observable changed.

Mutation only happens after the single await (the file read) of a sequence,
so on one event loop no sequence ever sees a half-applied update. Reads of
the same file are numbered; a read that finishes after a later one has been
applied is discarded, so overlapping reads never roll a file back.
"""

import asyncio
import logging
from pathlib import Path

from .constants import EDGE_SEPARATOR, NAME_MODE_BASENAME
from .events import EventKind, FileEvent
from .exceptions import ReadFailure
from .extractor import EdgeExtractor
from .filters import FileFilter, enumerate_files
from .index import GraphIndex
from .notifier import ChangeNotifier
from .types import FileRecord, FileState, NodeKind
from .utils import node_name_for, split_edge, validate_name_mode

logger = logging.getLogger(__name__)


class GraphMaintainer:
    """Applies file discoveries, saves, renames and deletes to a GraphIndex."""

    def __init__(
        self,
        index: GraphIndex,
        notifier: ChangeNotifier,
        extractor: EdgeExtractor,
        file_filter: FileFilter,
        name_mode: str = NAME_MODE_BASENAME,
    ):
        validate_name_mode(name_mode)
        self.index = index
        self.notifier = notifier
        self.extractor = extractor
        self.file_filter = file_filter
        self.name_mode = name_mode

        # File name -> record holding the edges last extracted from it
        self.records: dict[str, FileRecord] = {}

    def name_for(self, path: str) -> str:
        return node_name_for(path, self.name_mode)

    def tracked_files(self) -> list[str]:
        return sorted(self.records)

    # ========================================================================
    # File events
    # ========================================================================

    async def on_file_changed(self, path: str) -> bool:
        """
        Discover or re-extract a file.
        Returns True if observers were notified.
        """
        if self.file_filter.ignore_file(path):
            return False

        name = self.name_for(path)
        if EDGE_SEPARATOR in name:
            logger.debug(f"Skipping '{path}': name contains '{EDGE_SEPARATOR}'")
            return False

        record = self.records.get(name)
        discovered = record is None
        if discovered:
            record = FileRecord(name=name, path=path)
            self.records[name] = record
            self.index.upsert_node(name, NodeKind.FILE, location=path)
        else:
            record.path = path

        record.reads += 1
        ticket = record.reads

        try:
            new_edges = await self.extractor.extract_from_file(path, name)
        except ReadFailure as e:
            logger.warning(f"{e}; keeping previous state")
            if discovered and self._is_fresh(record):
                del self.records[name]
                self.index.release_file_node(name)
            return False

        if record.state is FileState.DELETED or self.records.get(name) is not record:
            logger.debug(f"'{path}' was deleted while being read, discarding")
            return False

        if ticket < record.applied:
            logger.debug(f"Read of '{path}' finished after a newer one, discarding")
            return False
        record.applied = ticket

        changed = self._apply(record, new_edges)
        if not discovered:
            record.state = FileState.UPDATED

        if discovered or changed:
            self.notifier.fire()
            return True
        return False

    def on_file_deleted(self, path: str) -> bool:
        """
        Withdraw every edge a file declared and drop its record.
        Returns True if observers were notified.
        """
        if self.file_filter.ignore_file(path):
            return False

        name = self.name_for(path)
        record = self.records.pop(name, None)
        if record is None:
            logger.debug(f"Delete of untracked file '{path}', ignoring")
            return False

        record.state = FileState.DELETED
        for edge in record.edges:
            self.index.remove_edge(*split_edge(edge), name)
        record.edges = set()
        self.index.release_file_node(name)

        logger.debug(f"Dropped file '{name}'")
        self.notifier.fire()
        return True

    async def on_file_renamed(self, old_path: str, new_path: str) -> bool:
        """Delete the old path, then discover the new one."""
        deleted = self.on_file_deleted(old_path)
        discovered = await self.on_file_changed(new_path)
        return deleted or discovered

    async def handle(self, event: FileEvent) -> bool:
        """Dispatch one typed file event."""
        if event.kind in (EventKind.SAVED, EventKind.CREATED):
            return await self.on_file_changed(event.path)
        if event.kind is EventKind.DELETED:
            return self.on_file_deleted(event.path)
        if event.kind is EventKind.RENAMED:
            return await self.on_file_renamed(event.path, event.new_path)
        logger.warning(f"Unknown event kind: {event.kind}")
        return False

    async def run(self, queue: asyncio.Queue):
        """Consume events one at a time until cancelled."""
        while True:
            event = await queue.get()
            try:
                await self.handle(event)
            except Exception as e:
                logger.error(f"Error handling {event}: {e}", exc_info=True)
            finally:
                queue.task_done()

    # ========================================================================
    # Scanning
    # ========================================================================

    async def scan(self, root: Path) -> int:
        """Discover every matching file under ``root``. Returns the file count."""
        paths = await self._list_files(root)
        await asyncio.gather(*(self.on_file_changed(path) for path in paths))
        logger.info(
            f"Scanned {len(paths)} files under {root}: "
            f"{len(self.index.nodes)} nodes, {len(self.index.sources)} edges"
        )
        return len(paths)

    async def rescan(self, root: Path) -> int:
        """Rebuild from disk: forget vanished files, re-extract the rest."""
        paths = await self._list_files(root)
        present = {self.name_for(path) for path in paths}
        for name, record in list(self.records.items()):
            if name not in present:
                self.on_file_deleted(record.path)
        await asyncio.gather(*(self.on_file_changed(path) for path in paths))
        logger.info(f"Rescanned {len(paths)} files under {root}")
        return len(paths)

    async def _list_files(self, root: Path) -> list[str]:
        return await asyncio.to_thread(lambda: list(enumerate_files(Path(root), self.file_filter)))

    # ========================================================================
    # Diffing
    # ========================================================================

    def _apply(self, record: FileRecord, new_edges: set[str]) -> bool:
        """Apply the difference between cached and new edges. Returns True if observable."""
        edges_to_add = new_edges - record.edges
        edges_to_remove = record.edges - new_edges

        for edge in edges_to_add:
            self.index.add_edge(*split_edge(edge), record.name)

        removed = False
        for edge in edges_to_remove:
            removed = self.index.remove_edge(*split_edge(edge), record.name) or removed

        record.edges = set(new_edges)
        return bool(edges_to_add) or removed

    def _is_fresh(self, record: FileRecord) -> bool:
        """True if a discovered record was never populated."""
        return (
            self.records.get(record.name) is record
            and record.state is FileState.TRACKED
            and not record.edges
            and record.applied == 0
        )
