"""
Queue state management.

The QueueStore is the only shared mutable state of the pipeline: entry
records and completed graphs. Records are frozen and replaced wholesale on
every change, so readers never see a partially updated entry.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..errors import DuplicateSourceError
from ..schema import MergedGraph
from ..utils.ids import generate_id

logger = logging.getLogger(__name__)


class Status(str, Enum):
    """Entry lifecycle states."""

    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (Status.COMPLETED, Status.FAILED)


@dataclass(frozen=True)
class QueueEntry:
    """One backlog item representing a document to convert."""

    id: str
    source: str  # URL or local path
    status: Status = Status.PENDING
    instructions: Optional[str] = None
    error: Optional[str] = None


Listener = Callable[[list[QueueEntry]], None]


class QueueStore:
    """
    Registry of queue entries and their graphs.

    Every mutation notifies subscribed listeners with a snapshot, after the
    internal lock has been released.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entries: dict[str, QueueEntry] = {}  # insertion ordered
        self._graphs: dict[str, MergedGraph] = {}
        self._listeners: list[Listener] = []

    # ── Observers ───────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        """
        Call ``listener(snapshot)`` after every change.

        A listener that raises is logged and skipped; the change itself and
        the remaining listeners are unaffected. Subscribing twice is a no-op.
        """
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
            snapshot = list(self._entries.values())
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Queue listener %r failed", listener)

    # ── Caller operations ───────────────────────────────────────────────

    def submit(self, source: str, instructions: Optional[str] = None) -> str:
        """
        Add a Pending entry.

        Returns:
            The new entry id

        Raises:
            DuplicateSourceError: If ``source`` is already queued
        """
        with self._lock:
            if self._has_source(source):
                raise DuplicateSourceError(source)
            entry = QueueEntry(id=generate_id("entry"), source=source, instructions=instructions or None)
            self._entries[entry.id] = entry
        logger.info("Queued %s as %s", source, entry.id)
        self._notify()
        return entry.id

    def extend(self, sources: Iterable[str]) -> list[str]:
        """Add Pending entries for sources not already queued; return new ids."""
        added: list[str] = []
        with self._lock:
            for source in sources:
                if self._has_source(source):
                    continue
                entry = QueueEntry(id=generate_id("entry"), source=source)
                self._entries[entry.id] = entry
                added.append(entry.id)
        if added:
            self._notify()
        return added

    def remove(self, entry_id: str) -> None:
        """Delete an entry and its graph. Removing an absent id is a no-op."""
        with self._lock:
            existed = self._entries.pop(entry_id, None) is not None
            self._graphs.pop(entry_id, None)
        if existed:
            logger.info("Removed %s", entry_id)
            self._notify()

    def clear(self) -> None:
        """Remove all entries and graphs."""
        with self._lock:
            self._entries = {}
            self._graphs = {}
        self._notify()

    def snapshot(self) -> list[QueueEntry]:
        """Entries in submission order."""
        with self._lock:
            return list(self._entries.values())

    def get(self, entry_id: str) -> Optional[QueueEntry]:
        with self._lock:
            return self._entries.get(entry_id)

    def graph_for(self, entry_id: str) -> Optional[MergedGraph]:
        with self._lock:
            return self._graphs.get(entry_id)

    def sources(self) -> set[str]:
        with self._lock:
            return {entry.source for entry in self._entries.values()}

    def count(self, status: Status) -> int:
        with self._lock:
            return sum(1 for entry in self._entries.values() if entry.status == status)

    def is_idle(self) -> bool:
        """True when nothing is Pending or Processing."""
        with self._lock:
            return all(entry.status.is_terminal for entry in self._entries.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ── Scheduler / outcome transitions ─────────────────────────────────

    def admit(self, limit: int) -> list[QueueEntry]:
        """
        Move Pending entries to Processing, oldest first.

        At most ``limit`` entries are Processing afterwards. The selection
        and the status flips happen under one lock, so a concurrent call
        cannot admit the same entry twice.

        Returns:
            The admitted entries, in submission order
        """
        with self._lock:
            processing = sum(
                1 for entry in self._entries.values() if entry.status == Status.PROCESSING
            )
            slots = limit - processing
            if slots <= 0:
                return []
            pending = [
                entry for entry in self._entries.values() if entry.status == Status.PENDING
            ]
            admitted = [replace(entry, status=Status.PROCESSING) for entry in pending[:slots]]
            for entry in admitted:
                self._entries[entry.id] = entry
        if admitted:
            self._notify()
        return admitted

    def complete(self, entry_id: str, graph: MergedGraph) -> bool:
        """
        Mark a Processing entry Completed and store its graph.

        Returns:
            False if the entry was removed meanwhile (the graph is dropped)
        """
        return self._finish(entry_id, Status.COMPLETED, graph=graph)

    def fail(self, entry_id: str, message: str) -> bool:
        """
        Mark a Processing entry Failed with a human-readable message.

        Returns:
            False if the entry was removed meanwhile
        """
        return self._finish(entry_id, Status.FAILED, error=message)

    def _finish(
        self,
        entry_id: str,
        status: Status,
        graph: Optional[MergedGraph] = None,
        error: Optional[str] = None,
    ) -> bool:
        with self._lock:
            entry = self._entries.get(entry_id)
            if entry is None or entry.status != Status.PROCESSING:
                return False
            if graph is not None:
                self._graphs[entry_id] = graph
            self._entries[entry_id] = replace(entry, status=status, error=error)
        self._notify()
        return True

    def _has_source(self, source: str) -> bool:
        return any(entry.source == source for entry in self._entries.values())
