"""Store client contract shared by every backend adapter.

Defines the `StoreClient` abstraction that benchmark drivers and the
conformance suite program against, the closed `Status` set returned by every
operation, and the result types returned by reads and scans.

Outcomes
--------
Expected data-level outcomes are status codes, never exceptions:

| Operation | OK | NOT_FOUND | ERROR |
|-----------|----|-----------|-------|
| insert    | stored | n/a | failure (incl. duplicate key) |
| read      | found  | key absent, record empty | engine failure |
| update    | fields overwritten | key absent | engine failure |
| delete    | removed | key absent | engine failure |
| scan      | 0..count records | n/a | engine failure |

Any integer status outside {0, 1} is an opaque engine error; see `is_error()`.
Contract violations (an empty table identifier, a negative scan count) are
caller bugs and raise `ContractViolation` subclasses instead.
"""

from __future__ import annotations

import abc
from collections.abc import Collection
from dataclasses import dataclass, field
from enum import IntEnum
from types import TracebackType
from typing import TypeAlias

from .byte_sequence import ByteSequence
from .errors import InvalidScanCount, InvalidTableName

__all__ = [
    "Record",
    "Status",
    "ReadResult",
    "ScanResult",
    "StoreClient",
    "is_error",
    "validate_table",
    "validate_count",
    "project",
]

Record: TypeAlias = dict[str, ByteSequence]


class Status(IntEnum):
    """Closed set of operation outcomes."""

    OK = 0
    NOT_FOUND = 1
    ERROR = 2


def is_error(status: int) -> bool:
    """Return True if `status` signals an engine error (anything but 0 or 1)."""
    return status not in (Status.OK, Status.NOT_FOUND)


@dataclass(frozen=True)
class ReadResult:
    """Outcome of a single-key read.

    Attributes:
        status: `OK`, `NOT_FOUND`, or `ERROR`.
        record: Fields read back. Always empty unless `status` is `OK`.
    """

    status: Status
    record: Record = field(default_factory=dict)

    @property
    def found(self) -> bool:
        """Return True if the key was found."""
        return self.status == Status.OK


@dataclass(frozen=True)
class ScanResult:
    """Outcome of a range read.

    Attributes:
        status: `OK` or `ERROR`.
        records: `(key, record)` pairs in ascending key order.
    """

    status: Status
    records: list[tuple[str, Record]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def keys(self) -> list[str]:
        """Return the scanned keys in order."""
        return [key for key, _ in self.records]


def validate_table(table: str) -> None:
    """Raise `InvalidTableName` unless `table` is a non-empty string."""
    if not isinstance(table, str) or not table:
        raise InvalidTableName(table)


def validate_count(count: int) -> None:
    """Raise `InvalidScanCount` if `count` is negative."""
    if count < 0:
        raise InvalidScanCount(count)


def project(fields: Collection[str] | None, available: Collection[str]) -> list[str]:
    """Return the field names a read should return.

    `None` or an empty collection selects every available field; otherwise
    only requested fields that exist are selected.
    """
    if not fields:
        return list(available)
    return [name for name in fields if name in available]


class StoreClient(abc.ABC):
    """Abstract key-value store client; one concrete subclass per backend.

    A single instance must be reusable across any number of sequential
    operations. Records returned by `read()` and `scan()` are built fresh
    for each call and owned by the caller.

    Clients are context managers; leaving the block calls `close()`.
    """

    #: Short backend identifier used in logs and reports.
    name: str = "abstract"

    @abc.abstractmethod
    def insert(self, table: str, key: str, values: Record) -> Status:
        """Store a new record under `key`.

        The value sequences in `values` are consumed.

        Args:
            table: Table identifier (non-empty).
            key: Record key.
            values: Fields to store.

        Returns:
            Status: `OK` on success; `ERROR` on failure, including when
            `key` already exists.

        Raises:
            InvalidTableName: If `table` is empty.
        """

    @abc.abstractmethod
    def read(
        self, table: str, key: str, fields: Collection[str] | None = None
    ) -> ReadResult:
        """Read the record stored under `key`.

        Args:
            table: Table identifier (non-empty).
            key: Record key.
            fields: Field names to project. `None` or empty means all fields.

        Returns:
            ReadResult: `OK` with the projected fields, `NOT_FOUND` with an
            empty record, or `ERROR`.

        Raises:
            InvalidTableName: If `table` is empty.
        """

    @abc.abstractmethod
    def update(self, table: str, key: str, values: Record) -> Status:
        """Overwrite the given fields of an existing record.

        Fields not named in `values` are left unchanged.

        Returns:
            Status: `OK`, `NOT_FOUND` if `key` is absent, or `ERROR`.

        Raises:
            InvalidTableName: If `table` is empty.
        """

    @abc.abstractmethod
    def delete(self, table: str, key: str) -> Status:
        """Remove the record stored under `key`.

        Returns:
            Status: `OK`, `NOT_FOUND` if `key` is absent, or `ERROR`.

        Raises:
            InvalidTableName: If `table` is empty.
        """

    @abc.abstractmethod
    def scan(
        self,
        table: str,
        start_key: str,
        count: int,
        fields: Collection[str] | None = None,
    ) -> ScanResult:
        """Read up to `count` records whose keys are >= `start_key`.

        Records come back in ascending key order (plain string comparison),
        stopping early at the end of the table. The field filter only
        projects fields; it never changes which records are returned or
        their order.

        Args:
            table: Table identifier (non-empty).
            start_key: Inclusive lower bound.
            count: Maximum number of records. Zero yields an empty result.
            fields: Field names to project. `None` or empty means all fields.

        Returns:
            ScanResult: `OK` with at most `count` records, or `ERROR`.

        Raises:
            InvalidTableName: If `table` is empty.
            InvalidScanCount: If `count` is negative.
        """

    def close(self) -> None:
        """Release backend resources. Safe to call more than once."""

    def __enter__(self) -> StoreClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
