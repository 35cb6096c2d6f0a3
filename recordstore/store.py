"""
Shared in-memory record table.

RecordStore owns every Record and the handle allocator. It is the only mutable
state shared between connection handler threads, so every public operation
takes the table lock for its whole duration; callers never lock.

Usage:
    from recordstore.store import RecordStore

    store = RecordStore(dump_secret="s3cr3t")
    handle = store.create()
    store.update(handle, "Alice", "Paris", "France")
    store.read_field(handle, "city")  # -> "Paris"
"""

from __future__ import annotations

import hmac
import itertools
import threading
from typing import Dict, List, Optional

from recordstore.domain.models import RECORD_FIELDS, Record
from recordstore.utils.logging import get_logger

log = get_logger(__name__)


class RecordStore:
    """
    Thread-safe mapping of handle -> Record plus a monotonic handle counter.

    Handles start at 1, increase by one per `create` call and are never reused,
    even after the record they named has been deleted.
    """

    def __init__(self, dump_secret: str) -> None:
        if not dump_secret:
            raise ValueError("dump_secret must be a non-empty string")
        self._dump_secret = dump_secret.encode("utf-8")
        self._records: Dict[int, Record] = {}
        self._lock = threading.Lock()
        self._handles = itertools.count(1)
        self._handle_lock = threading.Lock()

    def _next_handle(self) -> int:
        with self._handle_lock:
            return next(self._handles)

    def create(self) -> int:
        """
        Allocate a new handle and store an empty record under it.

        Returns
        -------
        int
            The freshly minted handle.
        """
        handle = self._next_handle()
        with self._lock:
            self._records[handle] = Record()
        log.debug("Record created", extra={"handle": handle})
        return handle

    def update(self, handle: int, name: str, city: str, country: str) -> bool:
        """
        Overwrite all three fields of an existing record.

        Returns False, without writing anything, when `handle` is not live.
        """
        replacement = Record(name=name, city=city, country=country)
        with self._lock:
            if handle not in self._records:
                return False
            self._records[handle] = replacement
        return True

    def read_field(self, handle: int, field: str) -> Optional[str]:
        """
        Return one field of a record, or None.

        `field` is matched case-insensitively against name/city/country. A
        missing handle and an unrecognized field both yield None.
        """
        field = field.lower()
        if field not in RECORD_FIELDS:
            return None
        with self._lock:
            record = self._records.get(handle)
            if record is None:
                return None
            return getattr(record, field)

    def delete(self, handle: int) -> bool:
        """Remove a record; returns whether one was actually removed."""
        with self._lock:
            removed = self._records.pop(handle, None)
        return removed is not None

    def dump_all(self, secret: str) -> Optional[List[str]]:
        """
        Summaries of every live record, or None when `secret` is wrong.

        An authorized call against an empty store returns an empty list. The
        order of the summaries is not part of the contract.
        """
        if not hmac.compare_digest(secret.encode("utf-8"), self._dump_secret):
            log.warning("Bulk dump rejected: bad secret")
            return None
        with self._lock:
            snapshot = list(self._records.items())
        return [record.summary_line(handle) for handle, record in snapshot]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            return handle in self._records


__all__ = ["RecordStore"]
