"""Canonical conformance scenarios.

Each scenario drives a `StoreClient` through a fixed sequence of operations
with literal keys and values, and raises `ConformanceFailure` on the first
mismatch. Scenarios remove the keys they write (before and after running),
so they can be repeated against a persistent backend.

Scenarios
---------
- ``insert_read_delete``: insert → projected read → delete → read is
  not-found with an empty record → second delete is not-found.
- ``insert_read_update``: insert → projected read → update → unfiltered read
  returns the updated bytes.
- ``scan``: insert 100 zero-padded keys holding their little-endian index,
  scan 5 from ``"00050"``, expect indices 50..54 in order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from kvbench.interfaces.byte_sequence import as_record
from kvbench.interfaces.store_client import Status, StoreClient

from .checks import (
    ConformanceFailure,
    check_scan_limit,
    expect_empty,
    expect_record,
    expect_status,
)
from .keys import encode_index, padded

__all__ = [
    "SCENARIOS",
    "check_insert_read_delete",
    "check_insert_read_update",
    "check_scan",
]

logger = logging.getLogger(__name__)

FIELD = "a"
INSERTED = bytes([1, 2, 3, 4])
UPDATED = bytes([5, 6, 7, 8])

SCAN_RECORDS = 100
SCAN_START = 50
SCAN_COUNT = 5


def _discard(client: StoreClient, table: str, keys: Iterable[str]) -> None:
    for key in keys:
        status = client.delete(table, key)
        if status not in (Status.OK, Status.NOT_FOUND):
            logger.debug("cleanup delete %s/%s returned %s", table, key, status)


def check_insert_read_delete(client: StoreClient, table: str = "test") -> None:
    """Insert, read, and delete one record; deletion must be final."""
    key = "delete"
    _discard(client, table, [key])
    try:
        status = client.insert(table, key, as_record({FIELD: INSERTED}))
        expect_status(status, Status.OK, "Insert")

        result = client.read(table, key, {FIELD})
        expect_status(result.status, Status.OK, "Read")
        expect_record(result.record, {FIELD: INSERTED})

        expect_status(client.delete(table, key), Status.OK, "Delete")

        result = client.read(table, key)
        expect_status(result.status, Status.NOT_FOUND, "Read, after delete,")
        expect_empty(result.record, "Read, after delete,")

        expect_status(client.delete(table, key), Status.NOT_FOUND, "Delete")
    finally:
        _discard(client, table, [key])


def check_insert_read_update(client: StoreClient, table: str = "test") -> None:
    """Insert, read, and update one record; the update must overwrite."""
    key = "update"
    _discard(client, table, [key])
    try:
        status = client.insert(table, key, as_record({FIELD: INSERTED}))
        expect_status(status, Status.OK, "Insert")

        result = client.read(table, key, {FIELD})
        expect_status(result.status, Status.OK, "Read")
        expect_record(result.record, {FIELD: INSERTED})

        status = client.update(table, key, as_record({FIELD: UPDATED}))
        expect_status(status, Status.OK, "Update")

        result = client.read(table, key)
        expect_status(result.status, Status.OK, "Read, after update,")
        expect_record(result.record, {FIELD: UPDATED})
    finally:
        _discard(client, table, [key])


def check_scan(client: StoreClient, table: str = "test") -> None:
    """Insert 100 records and scan a window of 5 from the middle."""
    keys = [padded(i) for i in range(SCAN_RECORDS)]
    _discard(client, table, keys)
    try:
        for i, key in enumerate(keys):
            status = client.insert(table, key, as_record({FIELD: encode_index(i)}))
            expect_status(status, Status.OK, "Insert")

        result = client.scan(table, padded(SCAN_START), SCAN_COUNT)
        expect_status(result.status, Status.OK, "Scan")
        check_scan_limit(result, SCAN_COUNT)
        if len(result.records) != SCAN_COUNT:
            raise ConformanceFailure(
                f"Scan returned {len(result.records)} record(s); expected {SCAN_COUNT}."
            )

        for offset, (key, record) in enumerate(result.records):
            index = SCAN_START + offset
            if key != padded(index):
                raise ConformanceFailure(
                    f"Scan result {offset} has key {key!r}; expected {padded(index)!r}."
                )
            expect_record(record, {FIELD: encode_index(index)})
    finally:
        _discard(client, table, keys)


#: Scenario name → check function, in run order.
SCENARIOS: dict[str, Callable[[StoreClient, str], None]] = {
    "insert_read_delete": check_insert_read_delete,
    "insert_read_update": check_insert_read_update,
    "scan": check_scan,
}
