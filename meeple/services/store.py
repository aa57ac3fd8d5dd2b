"""
meeple.services.store — Key-Value Record Stores
================================================

The award engine and the vote ledger own no state.  They are handed a
store that offers ``get`` / ``set`` / ``values`` and, crucially,
``update(key, fn)``: an atomic read-modify-write for one key.

``fn`` receives the current payload (a deep copy, or None when absent) and
returns ``(new_payload, result)``.  A ``new_payload`` of None means "leave
the stored value alone" — this is how spam and daily-limit rejections
avoid a write.

Two implementations:

* :class:`MemoryStore` — process-local dict, for tests and single-process use.
* :class:`SqlStore` — SQLAlchemy-backed, one ``records`` row per key.

Both serialize updates per key with :class:`KeyedLock`; updates to
different keys never wait on each other.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Protocol, TypeVar

from sqlalchemy import Engine, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from meeple.database.engine import get_session
from meeple.database.models import Record

logger = logging.getLogger(__name__)

R = TypeVar("R")

Updater = Callable[[dict | None], tuple[dict | None, R]]

__all__ = ["KeyedLock", "MemoryStore", "RecordStore", "SqlStore"]


class KeyedLock:
    """One mutex per key, created on demand and dropped when unused.

    Thread-safe.  Holding the lock for key A never blocks key B.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # key → [lock, holders-or-waiters]
        self._locks: dict[str, list] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
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
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class RecordStore(Protocol):
    """What the services need from persistence."""

    def get(self, key: str) -> dict | None: ...

    def set(self, key: str, value: dict) -> None: ...

    def update(self, key: str, fn: Updater[R]) -> R: ...

    def values(self) -> list[dict]: ...


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------
class MemoryStore:
    """Dict-backed store.  Payloads are deep-copied in and out so callers
    can never mutate stored state behind the store's back.
    """

    def __init__(self, namespace: str = "default") -> None:
        self.namespace = namespace
        self._data: dict[str, dict] = {}
        self._locks = KeyedLock()
        self.writes = 0

    def get(self, key: str) -> dict | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: dict) -> None:
        with self._locks.hold(key):
            self._write(key, value)

    def update(self, key: str, fn: Updater[R]) -> R:
        with self._locks.hold(key):
            new_value, result = fn(self.get(key))
            if new_value is not None:
                self._write(key, new_value)
            return result

    def values(self) -> list[dict]:
        return [copy.deepcopy(v) for v in list(self._data.values())]

    def _write(self, key: str, value: dict) -> None:
        self._data[key] = copy.deepcopy(value)
        self.writes += 1


# ---------------------------------------------------------------------------
# SQL store
# ---------------------------------------------------------------------------
class SqlStore:
    """Store backed by the ``records`` table, scoped to one *namespace*.

    Each ``update`` runs in its own transaction and locks the row with
    ``SELECT … FOR UPDATE`` where the dialect supports it, so the per-key
    guarantee also holds across processes sharing a PostgreSQL database.
    """

    def __init__(self, engine: Engine, namespace: str) -> None:
        self._engine = engine
        self.namespace = namespace
        self._locks = KeyedLock()

    def get(self, key: str) -> dict | None:
        with get_session(self._engine) as session:
            row = session.get(Record, (self.namespace, key))
            return copy.deepcopy(row.payload) if row is not None else None

    def set(self, key: str, value: dict) -> None:
        self.update(key, lambda _current: (value, None))

    def update(self, key: str, fn: Updater[R]) -> R:
        """Atomic read-modify-write of *key*.

        ``SELECT … FOR UPDATE`` cannot lock a row that does not exist yet, so
        two processes may both try to create the same key.  The loser gets an
        ``IntegrityError`` on insert; it is retried once against the row the
        winner wrote, which means *fn* may run twice and must not have side
        effects outside its return value.
        """
        with self._locks.hold(key):
            try:
                try:
                    return self._update_once(key, fn)
                except IntegrityError:
                    logger.warning(
                        "Concurrent insert for %s:%s, retrying against stored row",
                        self.namespace, key,
                    )
                    return self._update_once(key, fn)
            except SQLAlchemyError:
                logger.exception("Store update failed for %s:%s", self.namespace, key)
                raise

    def _update_once(self, key: str, fn: Updater[R]) -> R:
        with get_session(self._engine) as session:
            row = session.get(Record, (self.namespace, key), with_for_update=True)
            current = copy.deepcopy(row.payload) if row is not None else None
            new_value, result = fn(current)
            if new_value is not None:
                if row is None:
                    session.add(Record(namespace=self.namespace, key=key, payload=new_value))
                else:
                    row.payload = new_value
        return result

    def values(self) -> list[dict]:
        with get_session(self._engine) as session:
            rows = session.scalars(
                select(Record.payload).where(Record.namespace == self.namespace)
            ).all()
            return [copy.deepcopy(p) for p in rows]
