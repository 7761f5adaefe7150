"""Lock-guarded owner of the in-memory ledger state."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from .exceptions import MalformedDataError, PersistenceError
from .models import AppData
from .storage import JSONStorage

logger = logging.getLogger(__name__)


class RecordStore:
    """Holds the single AppData instance and serialises access to it.

    Every read and write runs inside :meth:`session`. The lock is not
    reentrant: opening a session while the same thread already holds one
    deadlocks.
    """

    def __init__(self, storage: JSONStorage) -> None:
        self._storage = storage
        self._lock = threading.Lock()
        self._data = AppData()

    @contextmanager
    def session(self) -> Iterator[AppData]:
        with self._lock:
            yield self._data

    def load(self) -> AppData:
        """Replace the whole state with the persisted snapshot.

        A missing file yields the default state. An unparsable snapshot also
        yields the default state; the problem is logged and never raised.
        """
        try:
            payload = self._storage.load()
        except MalformedDataError as exc:
            logger.warning("Discarding unreadable ledger snapshot: %s", exc)
            payload = None

        data = AppData()
        if payload is not None:
            try:
                data = AppData.from_dict(payload)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Discarding malformed ledger snapshot: %r", exc)
                data = AppData()

        with self._lock:
            self._data = data
            logger.debug(
                "Loaded %d entries and %d trips", len(data.entries), len(data.trips)
            )
            return _copy(data)

    def save(self) -> None:
        with self.session() as data:
            self.persist(data)

    def persist(self, data: AppData) -> None:
        """Write ``data`` through to storage; call only while holding a session."""
        try:
            self._storage.save(data.to_dict())
        except PersistenceError:
            raise
        except Exception as exc:  # pragma: no cover
            raise PersistenceError("Unexpected error while saving ledger data") from exc

    def snapshot(self) -> AppData:
        with self.session() as data:
            return _copy(data)


def _copy(data: AppData) -> AppData:
    # Entries, trips and trip expense tuples are immutable; only the lists need copying.
    return AppData(
        selected_currency=data.selected_currency,
        entries=list(data.entries),
        trips=list(data.trips),
    )
