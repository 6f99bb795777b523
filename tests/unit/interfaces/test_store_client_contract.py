"""Unit tests for the store client contract types and helpers."""

from __future__ import annotations

from collections.abc import Collection

import pytest

from kvbench.interfaces import (
    BackendUnavailable,
    ContractViolation,
    InvalidScanCount,
    InvalidTableName,
    KVBenchError,
    ReadResult,
    Record,
    ScanLimitExceeded,
    ScanResult,
    Status,
    StoreClient,
    as_record,
    is_error,
)
from kvbench.interfaces.store_client import project, validate_count, validate_table

# pylint: disable=too-few-public-methods


def test_status_codes():
    """OK and NOT_FOUND keep their fixed integer values."""
    assert int(Status.OK) == 0
    assert int(Status.NOT_FOUND) == 1
    assert Status(0) is Status.OK


@pytest.mark.parametrize(
    ("status", "expected"),
    [(0, False), (1, False), (Status.ERROR, True), (2, True), (-1, True), (99, True)],
)
def test_is_error(status: int, expected: bool):
    """Any status outside {OK, NOT_FOUND} is an engine error."""
    assert is_error(status) is expected


class TestResults:
    """ReadResult / ScanResult conveniences."""

    @staticmethod
    def test_read_result_defaults_to_empty_record():
        """A non-OK read carries an empty record."""
        result = ReadResult(Status.NOT_FOUND)

        assert result.record == {}
        assert not result.found

    @staticmethod
    def test_read_result_found():
        """found is True only for OK."""
        assert ReadResult(Status.OK, as_record({"a": b"x"})).found
        assert not ReadResult(Status.ERROR).found

    @staticmethod
    def test_results_are_immutable():
        """Result objects are frozen."""
        result = ReadResult(Status.OK)
        with pytest.raises(AttributeError):
            result.status = Status.ERROR  # type: ignore[misc]

    @staticmethod
    def test_scan_result_keys_and_len():
        """keys lists the scanned keys in order; len counts records."""
        result = ScanResult(Status.OK, [("a", {}), ("b", {})])

        assert result.keys == ["a", "b"]
        assert len(result) == 2
        assert len(ScanResult(Status.OK)) == 0


class TestValidation:
    """Contract checks shared by adapters."""

    @staticmethod
    @pytest.mark.parametrize("table", ["", None, 3])
    def test_invalid_table(table):
        """Empty or non-string table identifiers are rejected."""
        with pytest.raises(InvalidTableName) as exc:
            validate_table(table)  # type: ignore[arg-type]
        assert exc.value.table == table

    @staticmethod
    def test_valid_table():
        """Any non-empty string is accepted."""
        validate_table("usertable")

    @staticmethod
    def test_negative_count():
        """Negative counts are rejected; zero is fine."""
        validate_count(0)
        with pytest.raises(InvalidScanCount) as exc:
            validate_count(-3)
        assert exc.value.count == -3


@pytest.mark.parametrize(
    ("fields", "expected"),
    [
        (None, ["a", "b"]),
        (set(), ["a", "b"]),
        (["b"], ["b"]),
        (["b", "zzz"], ["b"]),
        (["zzz"], []),
    ],
)
def test_project(fields, expected):
    """Projection selects all, or only requested fields that exist."""
    assert sorted(project(fields, {"a": 1, "b": 2})) == expected


def test_error_hierarchy():
    """Contract violations and unavailability share the package base error."""
    assert issubclass(ContractViolation, KVBenchError)
    assert issubclass(BackendUnavailable, KVBenchError)
    assert not issubclass(BackendUnavailable, ContractViolation)
    err = ScanLimitExceeded(5, 6)
    assert (err.count, err.returned) == (5, 6)
    assert "5" in str(err) and "6" in str(err)


class _NullClient(StoreClient):
    """Minimal concrete client recording close() calls."""

    name = "null"

    def __init__(self) -> None:
        self.closed = 0

    def insert(self, table: str, key: str, values: Record) -> Status:
        return Status.ERROR

    def read(
        self, table: str, key: str, fields: Collection[str] | None = None
    ) -> ReadResult:
        return ReadResult(Status.NOT_FOUND)

    def update(self, table: str, key: str, values: Record) -> Status:
        return Status.NOT_FOUND

    def delete(self, table: str, key: str) -> Status:
        return Status.NOT_FOUND

    def scan(
        self,
        table: str,
        start_key: str,
        count: int,
        fields: Collection[str] | None = None,
    ) -> ScanResult:
        return ScanResult(Status.OK)

    def close(self) -> None:
        self.closed += 1


def test_store_client_is_abstract():
    """StoreClient cannot be instantiated without the five operations."""
    with pytest.raises(TypeError):
        StoreClient()  # type: ignore[abstract] # pylint: disable=abstract-class-instantiated


def test_store_client_context_manager_closes():
    """Leaving a `with` block closes the client, even on error."""
    client = _NullClient()
    with pytest.raises(RuntimeError):
        with client as c:
            assert c is client
            raise RuntimeError("boom")

    assert client.closed == 1
