"""KVBENCH CLI entry point.

Defines the top-level ``kvbench`` command (via Click-Extra) and registers its
subcommands.

Currently available commands
- ``kvbench check``: run the conformance suite against a backend adapter.
- ``kvbench db``: forward-only schema management for the SQL adapter.

Examples
    $ kvbench --version
    $ kvbench check --backend sqlite
    $ kvbench -v check --backend postgres --url postgresql+psycopg://...
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from kvbench import __version__
from kvbench.logging import LoggingSettings, configure_logging, log_startup

from .check import check as check_command
from .db import db as db_group
from .helpers.log_level_parser import parse_log_level

logger = logging.getLogger(__name__)


HELP = """KVBENCH command-line interface.

    Checks key-value store adapters against the shared client contract:
    insert/read/update/delete/scan status codes, byte-exact values, and
    ordered scans. Backends that cannot be provisioned are reported as
    inconclusive rather than failed.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (extra developer diagnostics beyond -vv).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the flight recorder log file.",
    default=Path(user_log_dir("kvbench", appauthor=False)) / "latest.log",
    envvar="KVBENCH_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="KVBENCH_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last N log records at DEBUG granularity (unaffected by -v/-q) "
        "and write them to --log-path when a WARNING/ERROR occurs, or on exit "
        "if --force-flush is set. Console verbosity is unchanged."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Write the flight recorder buffer to --log-path on exit.",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    envvar="KVBENCH_LOGGER_LEVELS",
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Applies to both "
        "console and flight recorder. Repeatable (e.g. -L sqlalchemy=INFO "
        "-L alembic=WARNING) or via KVBENCH_LOGGER_LEVELS (comma/space list)."
    ),
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    show_envvar=True,
)
@clickx.pass_context
def kvbench(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """KVBENCH command-line interface."""
    settings = LoggingSettings.from_counts(
        verbose_count,
        quiet_count,
        debug=debug,
        color=ctx.color is not False,  # None or True => allow color
        flight_recorder=flight_recorder,
        log_path=log_path,
        capacity=flight_recorder_capacity,
        force_flush=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )
    handlers = configure_logging(settings)
    log_startup(logger, settings, app_version=__version__, handlers=handlers)
    ctx.call_on_close(logging.shutdown)


kvbench.add_command(check_command)
kvbench.add_command(db_group)
