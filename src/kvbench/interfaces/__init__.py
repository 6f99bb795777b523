"""Ports for KVBENCH.

Abstract contracts that backend adapters implement and that the conformance
suite and benchmark drivers depend on.
"""

from .byte_sequence import (
    ByteArraySequence,
    ByteSequence,
    StreamByteSequence,
    as_record,
    materialize,
)
from .errors import (
    BackendUnavailable,
    ByteSequenceExhausted,
    ContractViolation,
    InvalidScanCount,
    InvalidTableName,
    KVBenchError,
    ScanLimitExceeded,
)
from .launcher import BackendHandle, BackendLauncher
from .store_client import (
    ReadResult,
    Record,
    ScanResult,
    Status,
    StoreClient,
    is_error,
)

__all__ = [
    "BackendHandle",
    "BackendLauncher",
    "BackendUnavailable",
    "ByteArraySequence",
    "ByteSequence",
    "ByteSequenceExhausted",
    "ContractViolation",
    "InvalidScanCount",
    "InvalidTableName",
    "KVBenchError",
    "ReadResult",
    "Record",
    "ScanLimitExceeded",
    "ScanResult",
    "Status",
    "StoreClient",
    "StreamByteSequence",
    "as_record",
    "is_error",
    "materialize",
]
