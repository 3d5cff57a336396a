"""Payload-less change broadcast to graph observers."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

Observer = Callable[[], None]


class ChangeNotifier:
    """
    Tells observers that the graph changed.

    No payload is sent: one edge can create or prune two nodes, so observers
    re-pull whatever state they show from the index.
    """

    def __init__(self):
        self._observers: list[Observer] = []
        self.fired = 0

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer. Returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def fire(self):
        """Invoke every observer synchronously."""
        self.fired += 1
        for observer in list(self._observers):
            try:
                observer()
            except Exception as e:
                logger.error(f"Error in change observer {observer!r}: {e}", exc_info=True)

    def count(self) -> int:
        """Return number of registered observers."""
        return len(self._observers)
