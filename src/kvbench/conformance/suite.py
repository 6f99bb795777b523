"""Conformance suite runner.

Runs the canonical scenarios against any `StoreClient` and records one
`ScenarioResult` per scenario. The runner keeps three outcomes apart:

- **passed**: the scenario completed and every check held.
- **failed**: a check did not hold (`ConformanceFailure`), the adapter broke
  the contract (`ContractViolation`), or the backend raised while the
  scenario was running.
- **skipped**: the backend could not be provisioned or constructed. This
  marks the run inconclusive; it is never reported as a contract failure.

Typical usage
-------------
    suite = ConformanceSuite(InMemoryStoreClient, backend="memory")
    report = suite.run()
    assert report.passed

    # with a backend that has to be started first
    report = run_with_launcher(SqliteFileLauncher(), SqlAlchemyStoreClient.connect)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from kvbench.config import DEFAULT_TABLE
from kvbench.interfaces.errors import BackendUnavailable, ContractViolation
from kvbench.interfaces.launcher import BackendHandle, BackendLauncher
from kvbench.interfaces.store_client import StoreClient

from .checks import ConformanceFailure
from .scenarios import SCENARIOS

__all__ = [
    "ClientFactory",
    "ConformanceReport",
    "ConformanceSuite",
    "Outcome",
    "ScenarioResult",
    "run_with_launcher",
]

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], StoreClient]
Scenario = Callable[[StoreClient, str], None]


class Outcome(str, Enum):
    """Outcome of a single scenario."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ScenarioResult:
    """Result of running one scenario.

    Attributes:
        name: Scenario name (e.g. ``"scan"``).
        outcome: Passed, failed, or skipped.
        detail: Failure or skip reason; None when passed.
    """

    name: str
    outcome: Outcome
    detail: str | None = None


@dataclass
class ConformanceReport:
    """All scenario results for one backend."""

    backend: str
    table: str = DEFAULT_TABLE
    results: list[ScenarioResult] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """Return True if any scenario failed."""
        return any(r.outcome is Outcome.FAILED for r in self.results)

    @property
    def inconclusive(self) -> bool:
        """Return True if nothing failed but at least one scenario was skipped."""
        return not self.failed and any(
            r.outcome is Outcome.SKIPPED for r in self.results
        )

    @property
    def passed(self) -> bool:
        """Return True if there were results and every one passed."""
        return bool(self.results) and all(
            r.outcome is Outcome.PASSED for r in self.results
        )

    def counts(self) -> dict[Outcome, int]:
        """Return the number of results per outcome."""
        out = {outcome: 0 for outcome in Outcome}
        for result in self.results:
            out[result.outcome] += 1
        return out

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable view of the report."""
        return {
            "backend": self.backend,
            "table": self.table,
            "passed": self.passed,
            "inconclusive": self.inconclusive,
            "results": [
                {"name": r.name, "outcome": r.outcome.value, "detail": r.detail}
                for r in self.results
            ],
        }


class ConformanceSuite:
    """Drive a StoreClient through the canonical scenarios.

    Args:
        client_factory: Zero-argument callable returning a ready client. It is
            called once per scenario; any exception it raises marks that
            scenario skipped. Each client is closed after its scenario.
        table: Table identifier the scenarios write to.
        backend: Backend name used in the report and logs.
        scenarios: Scenario name → check function; defaults to `SCENARIOS`.
    """

    def __init__(
        self,
        client_factory: ClientFactory,
        *,
        table: str = DEFAULT_TABLE,
        backend: str = "backend",
        scenarios: Mapping[str, Scenario] | None = None,
    ):
        self.client_factory = client_factory
        self.table = table
        self.backend = backend
        self.scenarios = dict(SCENARIOS if scenarios is None else scenarios)

    def run(self) -> ConformanceReport:
        """Run every scenario in order and return the report."""
        report = ConformanceReport(self.backend, self.table)
        for name, check in self.scenarios.items():
            report.results.append(self._run_one(name, check))
        logger.info(
            "%s: %s",
            self.backend,
            ", ".join(f"{n} {o.value}" for o, n in report.counts().items() if n),
        )
        return report

    def skip_all(self, reason: str) -> ConformanceReport:
        """Return a report marking every scenario skipped for `reason`."""
        logger.warning("%s: run inconclusive: %s", self.backend, reason)
        return ConformanceReport(
            self.backend,
            self.table,
            [ScenarioResult(name, Outcome.SKIPPED, reason) for name in self.scenarios],
        )

    def _run_one(self, name: str, check: Scenario) -> ScenarioResult:
        try:
            client = self.client_factory()
        except Exception as e:  # pylint: disable=broad-except
            logger.warning(
                "%s: backend unavailable, skipping %s: %s", self.backend, name, e
            )
            return ScenarioResult(name, Outcome.SKIPPED, f"backend unavailable: {e}")

        logger.debug("%s: running %s", self.backend, name)
        try:
            with client:
                check(client, self.table)
        except (ConformanceFailure, ContractViolation) as e:
            logger.error("%s: %s failed: %s", self.backend, name, e)
            return ScenarioResult(name, Outcome.FAILED, str(e))
        except Exception as e:  # pylint: disable=broad-except
            logger.error("%s: %s raised", self.backend, name, exc_info=True)
            return ScenarioResult(name, Outcome.FAILED, f"{type(e).__name__}: {e}")
        logger.debug("%s: %s passed", self.backend, name)
        return ScenarioResult(name, Outcome.PASSED)


def run_with_launcher(
    launcher: BackendLauncher,
    client_for_url: Callable[[str], StoreClient],
    *,
    table: str = DEFAULT_TABLE,
    scenarios: Mapping[str, Scenario] | None = None,
) -> ConformanceReport:
    """Start a backend, run the suite against it, and always stop it.

    If `launcher.start()` fails the run is inconclusive: every scenario is
    reported skipped and nothing is torn down. A failure to stop the backend
    is logged and does not replace the report.

    Args:
        launcher: Provisions the backend.
        client_for_url: Builds a client from the running backend's URL.
        table: Table identifier the scenarios write to.
        scenarios: Scenario name → check function; defaults to `SCENARIOS`.
    """

    def _suite(factory: ClientFactory) -> ConformanceSuite:
        return ConformanceSuite(
            factory, table=table, backend=launcher.name, scenarios=scenarios
        )

    try:
        handle = launcher.start()
    except Exception as e:  # pylint: disable=broad-except
        return _suite(_not_started).skip_all(f"backend unavailable: {e}")

    try:
        return _suite(lambda: client_for_url(handle.url)).run()
    finally:
        _stop_quietly(launcher, handle)


def _not_started() -> StoreClient:
    raise BackendUnavailable("backend was not started")


def _stop_quietly(launcher: BackendLauncher, handle: BackendHandle) -> None:
    try:
        launcher.stop(handle)
    except Exception:  # pylint: disable=broad-except
        logger.warning("%s: could not stop backend", launcher.name, exc_info=True)
