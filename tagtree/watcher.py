"""File system watcher feeding typed events into a workspace queue."""

import asyncio
import logging
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .core.events import FileEvent
from .core.filters import FileFilter

logger = logging.getLogger(__name__)


class WorkspaceEventHandler(FileSystemEventHandler):
    """
    Translates watchdog callbacks into FileEvents.

    Callbacks run on the observer thread; events are handed to the event
    loop with call_soon_threadsafe so the queue is only touched from the loop.
    """

    def __init__(self, queue: asyncio.Queue, loop: asyncio.AbstractEventLoop, file_filter: FileFilter):
        super().__init__()
        self.queue = queue
        self.loop = loop
        self.file_filter = file_filter

    def _should_process(self, path: str) -> bool:
        return not self.file_filter.ignore_file(path)

    def _emit(self, event: FileEvent):
        self.loop.call_soon_threadsafe(self.queue.put_nowait, event)

    def on_modified(self, event) -> None:
        """Handle file modification."""
        if not event.is_directory and self._should_process(event.src_path):
            self._emit(FileEvent.saved(event.src_path))

    def on_created(self, event) -> None:
        """Handle file creation."""
        if not event.is_directory and self._should_process(event.src_path):
            self._emit(FileEvent.created(event.src_path))

    def on_deleted(self, event) -> None:
        """Handle file deletion."""
        if not event.is_directory and self._should_process(event.src_path):
            self._emit(FileEvent.deleted(event.src_path))

    def on_moved(self, event) -> None:
        """Handle file rename."""
        if event.is_directory:
            return
        old_tracked = self._should_process(event.src_path)
        new_tracked = self._should_process(event.dest_path)
        if old_tracked or new_tracked:
            # The maintainer ignores whichever side falls outside the filter
            self._emit(FileEvent.renamed(event.src_path, event.dest_path))


class FileWatcher:
    """Runs a watchdog observer over a workspace root."""

    def __init__(self, root: Path, queue: asyncio.Queue, loop: asyncio.AbstractEventLoop, file_filter: FileFilter):
        self.root = root
        self.handler = WorkspaceEventHandler(queue, loop, file_filter)
        self._observer: Observer | None = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self):
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(self.handler, str(self.root), recursive=True)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info(f"Watching {self.root}")

    def stop(self):
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.info(f"Stopped watching {self.root}")
