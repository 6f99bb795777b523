"""Assertion helpers shared by the conformance scenarios.

Every helper raises `ConformanceFailure` (an `AssertionError`) with a message
naming the mismatch, so scenarios read the same whether they run inside the
suite runner or directly under pytest.
"""

from __future__ import annotations

from collections.abc import Mapping

from kvbench.interfaces.byte_sequence import ByteSequence
from kvbench.interfaces.errors import ScanLimitExceeded
from kvbench.interfaces.store_client import Record, ScanResult, Status

_STATUS_LABELS = {Status.OK: "success", Status.NOT_FOUND: "not found"}


class ConformanceFailure(AssertionError):
    """A store client returned something other than the contract requires."""


def expect_status(actual: int, expected: Status, what: str) -> None:
    """Fail unless `actual` equals `expected`.

    Example:
        ``Delete did not return not found (1); got 0.``
    """
    if actual != expected:
        label = _STATUS_LABELS.get(expected, expected.name.lower())
        raise ConformanceFailure(
            f"{what} did not return {label} ({int(expected)}); got {int(actual)}."
        )


def expect_bytes(seq: ByteSequence | None, expected: bytes, field: str) -> None:
    """Consume `seq` byte by byte and fail on any difference from `expected`.

    Checks `has_next()` before every `next_byte()` and that the sequence is
    exhausted afterwards, so both short and long values are caught.
    """
    if seq is None:
        raise ConformanceFailure(f"Did not read the inserted field: {field}")
    for position, want in enumerate(expected):
        if not seq.has_next():
            raise ConformanceFailure(
                f"Field {field!r} ended after {position} byte(s); expected {len(expected)}."
            )
        got = seq.next_byte()
        if got != want:
            raise ConformanceFailure(
                f"Field {field!r} byte {position} is {got:#04x}; expected {want:#04x}."
            )
    if seq.has_next():
        raise ConformanceFailure(
            f"Field {field!r} has more than the expected {len(expected)} byte(s)."
        )


def expect_record(record: Record, expected: Mapping[str, bytes]) -> None:
    """Fail unless every expected field is present with exactly those bytes."""
    for field, data in expected.items():
        expect_bytes(record.get(field), data, field)


def expect_empty(record: Record, what: str) -> None:
    """Fail if `record` carries any field."""
    if record:
        raise ConformanceFailure(f"{what} returned fields {sorted(record)!r}.")


def check_scan_limit(result: ScanResult, count: int) -> None:
    """Raise `ScanLimitExceeded` if a scan returned more than `count` records."""
    if len(result.records) > count:
        raise ScanLimitExceeded(count, len(result.records))
