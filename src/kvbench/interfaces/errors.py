"""Exceptions for the store client contract.

Data-level outcomes (success, not found, engine error) are reported as
status codes and never raised. The exceptions below are reserved for
conditions that are not data: contract violations by an adapter or caller,
and an unavailable test environment.
"""


class KVBenchError(Exception):
    """Base class for kvbench errors."""


class ContractViolation(KVBenchError):
    """An adapter or caller broke the store client contract.

    These indicate a bug rather than a data condition and must never be
    silently tolerated by the conformance suite.
    """


class ByteSequenceExhausted(ContractViolation):
    """Raised when `next_byte()` is called on an exhausted sequence."""

    def __init__(self, position: int):
        super().__init__(f"Byte sequence exhausted after {position} byte(s).")
        self.position = position


class InvalidTableName(ContractViolation):
    """Raised when a table identifier is empty or not a string.

    Attributes:
        table: The rejected table identifier.
    """

    def __init__(self, table: object):
        super().__init__(f"Table identifier must be a non-empty string, got {table!r}.")
        self.table = table


class InvalidScanCount(ContractViolation):
    """Raised when `scan()` is called with a negative record count.

    Attributes:
        count: The rejected count.
    """

    def __init__(self, count: int):
        super().__init__(f"Scan count must be zero or positive, got {count}.")
        self.count = count


class ScanLimitExceeded(ContractViolation):
    """Raised when an adapter returns more scan results than requested.

    Attributes:
        count: The number of records requested.
        returned: The number of records the adapter returned.
    """

    def __init__(self, count: int, returned: int):
        super().__init__(
            f"Scan asked for at most {count} record(s) but the adapter returned {returned}."
        )
        self.count = count
        self.returned = returned


class BackendUnavailable(KVBenchError):
    """The backend under test could not be provisioned or constructed.

    Raised by launchers and client factories. The conformance suite reports
    the affected run as inconclusive rather than failed.
    """
