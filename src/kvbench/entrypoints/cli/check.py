"""KVBENCH conformance CLI.

Runs the conformance suite against one backend and reports per-scenario
outcomes. Human-oriented lines go to **stderr**; ``--json`` prints the report
to **stdout**.

Backends
- ``memory``: a fresh in-memory store.
- ``sqlite`` / ``postgres``: with ``--url`` (or ``KVBENCH_DB_URL``), the given
  database; otherwise a throwaway backend is provisioned (a temp-file SQLite
  database, or a Testcontainers PostgreSQL that needs Docker).

Exit codes
- 0: every scenario passed, or the run was inconclusive (backend unavailable).
- 1: at least one scenario failed.
"""

from __future__ import annotations

import json
import logging

import click
from alembic import command
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from kvbench import config
from kvbench.adapters import (
    BACKENDS,
    SqlAlchemyStoreClient,
    client_factory,
    launcher_for,
)
from kvbench.adapters.db.dialects import DialectName, UnsupportedDialect
from kvbench.conformance import (
    ConformanceReport,
    ConformanceSuite,
    Outcome,
    run_with_launcher,
)

from .helpers import error, sanitize_url, success, warn

logger = logging.getLogger(__name__)

FAILED_EXIT_CODE = 1


def _check_url_matches(backend: str, url: str) -> None:
    try:
        dialect = DialectName.from_string(make_url(url).drivername)
    except (ArgumentError, UnsupportedDialect) as e:
        raise click.BadParameter(str(e), param_hint="--url") from e
    expected = DialectName.SQLITE if backend == "sqlite" else DialectName.POSTGRES
    if dialect is not expected:
        raise click.BadParameter(
            f"{sanitize_url(url)} is a {dialect.value} URL, not {backend}",
            param_hint="--url",
        )


def _render(report: ConformanceReport) -> None:
    for result in report.results:
        match result.outcome:
            case Outcome.PASSED:
                success(f"{result.name} passed")
            case Outcome.FAILED:
                error(f"{result.name} failed: {result.detail}")
            case Outcome.SKIPPED:
                warn(f"{result.name} skipped: {result.detail}")

    counts = report.counts()
    summary = ", ".join(f"{n} {o.value}" for o, n in counts.items())
    click.echo(f"{report.backend}: {summary}", err=True)
    if report.inconclusive:
        warn("Run inconclusive: the backend under test was not available.")


@click.command()
@click.option(
    "--backend",
    "-b",
    type=click.Choice(BACKENDS, case_sensitive=False),
    default="memory",
    show_default=True,
    help="Backend adapter to check.",
)
@click.option(
    "--url",
    envvar=config.DB_URL_ENV,
    show_envvar=True,
    default=None,
    help=(
        "Database URL for sqlite/postgres. When omitted a throwaway backend "
        "is provisioned for the run."
    ),
)
@click.option(
    "--table",
    default=config.DEFAULT_TABLE,
    show_default=True,
    help="Table identifier the scenarios write to.",
)
@click.option(
    "--migrate/--no-migrate",
    default=False,
    show_default=True,
    help="Upgrade the --url database to the latest schema before running.",
)
@click.option(
    "--json", "as_json", is_flag=True, help="Print the report as JSON on stdout."
)
def check(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    backend: str, url: str | None, table: str, migrate: bool, as_json: bool
) -> None:
    """Run the conformance suite against a backend."""
    backend = backend.lower()

    if backend == "memory":
        suite = ConformanceSuite(
            client_factory("memory"), table=table, backend=backend
        )
        report = suite.run()
    elif url:
        _check_url_matches(backend, url)
        if migrate:
            try:
                command.upgrade(config.build_alembic_config(url), "head")
            except SQLAlchemyError as e:
                logger.debug("migration failed", exc_info=True)
                raise click.ClickException(
                    f"Could not migrate {sanitize_url(url)}: {e}"
                ) from e
        suite = ConformanceSuite(
            client_factory(backend, url), table=table, backend=backend
        )
        report = suite.run()
    else:
        launcher = launcher_for(backend)
        if launcher is None:
            raise click.UsageError(f"--url is required for backend {backend!r}")
        report = run_with_launcher(
            launcher, SqlAlchemyStoreClient.connect, table=table
        )

    _render(report)
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))

    if report.failed:
        raise click.exceptions.Exit(FAILED_EXIT_CODE)
