"""Bookkeeping of in-flight requests and their cancel handles."""

import logging
from typing import Callable, Iterator, List, Optional

from psygnal import Signal

logger = logging.getLogger(__name__)


class TrackedRequest:
    """A request whose URL and cancel operation are recorded for the duration of its flight."""

    __slots__ = ("url", "cancel")

    def __init__(self, url: str, cancel: Callable[[], None]) -> None:
        self.url = url
        self.cancel = cancel

    def __repr__(self) -> str:
        return f"TrackedRequest(url={self.url!r})"


class InFlightRegistry:
    """Ordered collection of tracked requests owned by a single client instance.

    A URL may be tracked several times at once; each entry stands for one dispatch.
    URL lookups return the first (oldest) match. The registry never inspects the
    cancel operations it stores beyond invoking them.

    Attributes:
        registered: Signal emitted with the ``TrackedRequest`` after it is appended.
        removed: Signal emitted with the ``TrackedRequest`` after it is removed.
    """

    registered = Signal(TrackedRequest)
    removed = Signal(TrackedRequest)

    def __init__(self) -> None:
        self._entries: List[TrackedRequest] = []

    def register(self, url: str, cancel: Callable[[], None]) -> TrackedRequest:
        """Append a new entry for ``url`` and return it."""
        entry = TrackedRequest(url, cancel)
        self._entries.append(entry)
        self.registered.emit(entry)
        return entry

    def remove(self, entry: TrackedRequest) -> bool:
        """Remove exactly ``entry``. Returns False if it was not present."""
        for index, candidate in enumerate(self._entries):
            if candidate is entry:
                del self._entries[index]
                self.removed.emit(entry)
                return True
        return False

    def find(self, url: str) -> Optional[TrackedRequest]:
        """Return the first entry tracking ``url``, or None."""
        for entry in self._entries:
            if entry.url == url:
                return entry
        return None

    def cancel(self, url: str) -> bool:
        """Invoke the cancel operation of the first entry for ``url``.

        The entry stays registered until the cancelled call settles.
        Returns False (and does nothing) when ``url`` is not tracked.
        """
        entry = self.find(url)
        if entry is None:
            logger.debug(f"No in-flight request for {url}; nothing to cancel")
            return False
        entry.cancel()
        return True

    def cancel_all(self) -> int:
        """Invoke every current entry's cancel operation in registry order.

        Returns:
            The number of entries cancelled. Entries registered afterwards are untouched.
        """
        snapshot = list(self._entries)
        for entry in snapshot:
            entry.cancel()
        return len(snapshot)

    def urls(self) -> List[str]:
        return [entry.url for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TrackedRequest]:
        return iter(list(self._entries))

    def __contains__(self, url: object) -> bool:
        return any(entry.url == url for entry in self._entries)
