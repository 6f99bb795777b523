"""Conformance suite for StoreClient adapters.

Write the scenarios once, run them against every backend. The scenario
functions are usable on their own (e.g. from pytest); `ConformanceSuite`
wraps them with construction handling and reporting.
"""

from .checks import (
    ConformanceFailure,
    check_scan_limit,
    expect_bytes,
    expect_empty,
    expect_record,
    expect_status,
)
from .keys import decode_index, encode_index, padded
from .scenarios import (
    SCENARIOS,
    check_insert_read_delete,
    check_insert_read_update,
    check_scan,
)
from .suite import (
    ConformanceReport,
    ConformanceSuite,
    Outcome,
    ScenarioResult,
    run_with_launcher,
)

__all__ = [
    "SCENARIOS",
    "ConformanceFailure",
    "ConformanceReport",
    "ConformanceSuite",
    "Outcome",
    "ScenarioResult",
    "check_insert_read_delete",
    "check_insert_read_update",
    "check_scan",
    "check_scan_limit",
    "decode_index",
    "encode_index",
    "expect_bytes",
    "expect_empty",
    "expect_record",
    "expect_status",
    "padded",
    "run_with_launcher",
]
