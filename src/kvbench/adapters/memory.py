"""In-memory StoreClient backend.

Keeps every table in RAM as a `SortedDict` of key → field bytes, so scans
walk keys in plain string order without sorting on each call. Intended for
tests, examples, and as the reference adapter for the conformance suite;
nothing persists across process restarts.

Key behaviors
-------------
- Values are materialized on insert/update (the caller's sequences are
  consumed) and handed back as fresh `ByteArraySequence` cursors on every
  read, so callers never share state with the store.
- Inserting an existing key returns `Status.ERROR`.
- All mutations and lookups happen under an `RLock`.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Collection

from sortedcontainers import SortedDict

from kvbench.interfaces.byte_sequence import ByteArraySequence, materialize
from kvbench.interfaces.store_client import (
    ReadResult,
    Record,
    ScanResult,
    Status,
    StoreClient,
    project,
    validate_count,
    validate_table,
)

__all__ = ["InMemoryStoreClient"]

logger = logging.getLogger(__name__)


def _to_record(stored: dict[str, bytes], fields: Collection[str] | None) -> Record:
    return {name: ByteArraySequence(stored[name]) for name in project(fields, stored)}


class InMemoryStoreClient(StoreClient):
    """StoreClient backed by per-table sorted dictionaries."""

    name = "memory"

    def __init__(self) -> None:
        self._tables: dict[str, SortedDict] = {}
        self._lock = threading.RLock()

    def _table(self, table: str) -> SortedDict:
        return self._tables.setdefault(table, SortedDict())

    # ---- StoreClient ----

    def insert(self, table: str, key: str, values: Record) -> Status:
        validate_table(table)
        data = materialize(values)
        with self._lock:
            rows = self._table(table)
            if key in rows:
                logger.debug("insert %s/%s rejected: key exists", table, key)
                return Status.ERROR
            rows[key] = data
        return Status.OK

    def read(
        self, table: str, key: str, fields: Collection[str] | None = None
    ) -> ReadResult:
        validate_table(table)
        with self._lock:
            stored = self._tables.get(table, {}).get(key)
            if stored is None:
                return ReadResult(Status.NOT_FOUND)
            return ReadResult(Status.OK, _to_record(stored, fields))

    def update(self, table: str, key: str, values: Record) -> Status:
        validate_table(table)
        data = materialize(values)
        with self._lock:
            stored = self._tables.get(table, {}).get(key)
            if stored is None:
                return Status.NOT_FOUND
            stored.update(data)
        return Status.OK

    def delete(self, table: str, key: str) -> Status:
        validate_table(table)
        with self._lock:
            rows = self._tables.get(table)
            if rows is None or key not in rows:
                return Status.NOT_FOUND
            del rows[key]
        return Status.OK

    def scan(
        self,
        table: str,
        start_key: str,
        count: int,
        fields: Collection[str] | None = None,
    ) -> ScanResult:
        validate_table(table)
        validate_count(count)
        records: list[tuple[str, Record]] = []
        if count == 0:
            return ScanResult(Status.OK, records)
        with self._lock:
            rows = self._tables.get(table)
            if rows is None:
                return ScanResult(Status.OK, records)
            for key in rows.irange(minimum=start_key):
                records.append((key, _to_record(rows[key], fields)))
                if len(records) == count:
                    break
        return ScanResult(Status.OK, records)

    def close(self) -> None:
        # Nothing to release; the data lives as long as the instance.
        pass
