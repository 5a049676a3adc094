"""RecordStore: in-memory, thread-safe keyed storage of inventory records.

The store owns the record-id to record mapping and is the only place that
mutates it. ``apply()`` is the single read-modify-write primitive: the
transformation runs while the per-id lock is held, so two concurrent updates
of the same record are serialized instead of one silently overwriting the
other. Different ids use different locks and proceed in parallel.

Records are immutable, so readers only need a reference copy taken under the
short index lock; they never wait on a per-id lock.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog

from inventory.record.record import InventoryRecord

logger = structlog.get_logger(__name__)

Transformation = Callable[[InventoryRecord | None], InventoryRecord]
CommitHook = Callable[[InventoryRecord | None, InventoryRecord], None]


class _KeyedLocks:
    """One lock per key, created on demand and dropped when nobody uses it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, list] = {}  # key -> [lock, holders]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = [threading.Lock(), 0]
            entry[1] += 1

        lock = entry[0]
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


class RecordStore:
    """Authoritative set of inventory records for the lifetime of the process."""

    def __init__(self) -> None:
        self._records: dict[str, InventoryRecord] = {}
        self._index_lock = threading.Lock()
        self._locks = _KeyedLocks()

    def apply(self, record_id: str, fn: Transformation) -> InventoryRecord:
        """Atomically replace the record at ``record_id`` with ``fn(current)``.

        ``fn`` receives the current record, or ``None`` when there is none, and
        is called exactly once. If it raises, the store is left untouched and
        the exception propagates to the caller.
        """
        _, updated = self.transition(record_id, fn)
        return updated

    def transition(
        self,
        record_id: str,
        fn: Transformation,
        on_commit: CommitHook | None = None,
    ) -> tuple[InventoryRecord | None, InventoryRecord]:
        """Same as ``apply()`` but also returns the record ``fn`` was given.

        ``on_commit(previous, updated)`` runs under the per-id lock just before
        the new record is stored, so hooks for one id run in write order. If
        the hook raises, nothing is stored.
        """
        with self._locks.hold(record_id):
            with self._index_lock:
                current = self._records.get(record_id)

            updated = fn(current)

            if not isinstance(updated, InventoryRecord):
                raise TypeError(f"Transformation for {record_id} returned {type(updated).__name__}, not a record")
            if updated.record_id != record_id:
                raise ValueError(f"Transformation for {record_id} returned a record for {updated.record_id}")

            if on_commit is not None:
                on_commit(current, updated)

            with self._index_lock:
                self._records[record_id] = updated

        return current, updated

    def get(self, record_id: str) -> InventoryRecord | None:
        with self._index_lock:
            return self._records.get(record_id)

    def list(self, predicate: Callable[[InventoryRecord], bool] | None = None) -> list[InventoryRecord]:
        """Point-in-time snapshot of all records, optionally filtered."""
        with self._index_lock:
            snapshot = list(self._records.values())

        if predicate is None:
            return snapshot
        return [record for record in snapshot if predicate(record)]

    def delete(self, record_id: str) -> bool:
        """Remove the record; returns whether it existed."""
        with self._locks.hold(record_id):
            with self._index_lock:
                existed = self._records.pop(record_id, None) is not None

        if existed:
            logger.debug("Inventory record removed from store", record_id=record_id)
        return existed

    def clear(self) -> None:
        with self._index_lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._index_lock:
            return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        with self._index_lock:
            return record_id in self._records
