"""Logging setup for the KVBENCH CLI.

Two sinks are configured from a single `LoggingSettings`:

- a Rich console handler on stderr whose threshold follows ``-v``/``-q``;
- an in-memory "flight recorder" that keeps the most recent records at DEBUG
  and dumps them to a file when a WARNING arrives, so a failed conformance
  run leaves a full trace of the adapter calls that led up to it.

Records from the database stack are tagged on the console with a short
origin (``[sql]``, ``[migrate]``, ``[docker]``) so they stand apart from the
suite's own output.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from importlib import metadata
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "kvbench"

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]

LIBRARY_TAGS = {
    "sqlalchemy": "sql",
    "alembic": "migrate",
    "testcontainers": "docker",
    "docker": "docker",
    "urllib3": "docker",
}

# Distributions reported in the DEBUG startup diagnostics.
STACK_DISTRIBUTIONS = (
    "SQLAlchemy",
    "alembic",
    "sortedcontainers",
    "psycopg",
    "testcontainers",
)

FLIGHT_RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)


@dataclass(frozen=True)
class LoggingSettings:
    """Resolved logging options from the top-level CLI group."""

    level: int = logging.WARNING
    debug: bool = False
    color: bool = True
    flight_recorder: bool = True
    log_path: Path | None = None
    capacity: int = 2000
    force_flush: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_counts(cls, verbose: int, quiet: int, **kwargs) -> LoggingSettings:
        """Build settings from ``-v``/``-q`` repetition counts.

        The console starts at WARNING; each ``-v`` lowers and each ``-q``
        raises the threshold by one level, clamped to DEBUG..CRITICAL.
        """
        level = logging.WARNING - 10 * verbose + 10 * quiet
        level = max(logging.DEBUG, min(logging.CRITICAL, level))
        return cls(level=level, **kwargs)


class LibraryTagFilter(logging.Filter):
    """Set ``record.prefix`` to a bracketed origin for non-project records.

    Known libraries map to a short tag (``sqlalchemy.engine`` -> ``[sql]``);
    anything else uses its top-level logger name. Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(PROJECT_PREFIX):
            record.prefix = ""
        else:
            root = record.name.split(".")[0]
            record.prefix = f"[{LIBRARY_TAGS.get(root, root)}]"
        return True


def config_console_handler(settings: LoggingSettings) -> RichHandler:
    """Return a RichHandler on stderr configured from `settings`.

    In debug mode the handler drops to DEBUG and shows timestamps, logger
    names and source paths; otherwise lines carry only the library tag.
    """
    color_system: ColorSystem | None = "auto" if settings.color else None
    handler = RichHandler(
        level=logging.DEBUG if settings.debug else settings.level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=settings.debug,
        enable_link_path=settings.debug,
    )
    if settings.debug:
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(prefix)s %(message)s"))
        handler.addFilter(LibraryTagFilter())
    return handler


def config_flight_recorder(settings: LoggingSettings) -> MemoryHandler:
    """Return a MemoryHandler buffering records for ``settings.log_path``.

    The buffer holds ``settings.capacity`` records and is written out when a
    WARNING or worse arrives, or on close when ``settings.force_flush``.
    The log file is only created once something is flushed.
    """
    if settings.log_path is None:
        raise ValueError("flight recorder needs a log path")
    settings.log_path.parent.mkdir(parents=True, exist_ok=True)
    target = logging.FileHandler(
        settings.log_path, mode="w", encoding="utf-8", delay=True
    )
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(FLIGHT_RECORDER_FORMAT))
    return MemoryHandler(
        capacity=settings.capacity,
        flushLevel=logging.WARNING,
        target=target,
        flushOnClose=settings.force_flush,
    )


def configure_logging(settings: LoggingSettings) -> list[logging.Handler]:
    """Install the console and flight-recorder handlers on the root logger.

    The root logger passes everything through; each handler applies its own
    threshold. Per-logger overrides are applied last.

    Returns:
        The handlers now attached to the root logger.
    """
    handlers: list[logging.Handler] = [config_console_handler(settings)]
    if settings.flight_recorder:
        handlers.append(config_flight_recorder(settings))

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, lvl in settings.logger_levels.items():
        logging.getLogger(name).setLevel(lvl)
    return handlers


def stack_versions() -> dict[str, str]:
    """Installed versions of the database stack, ``"-"`` when absent."""
    versions = {}
    for dist in STACK_DISTRIBUTIONS:
        try:
            versions[dist] = metadata.version(dist)
        except metadata.PackageNotFoundError:
            versions[dist] = "-"
    return versions


def log_startup(
    logger: Logger,
    settings: LoggingSettings,
    *,
    app_version: str,
    handlers: list[logging.Handler],
) -> None:
    """Log a one-line INFO summary, then DEBUG environment diagnostics."""
    logger.info(
        "KVBENCH %s: console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(settings.level),
        "ON" if settings.flight_recorder else "OFF",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s, CWD: %s", os.getpid(), Path.cwd())
    logger.debug("Stack: %s", stack_versions())
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if settings.flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            settings.log_path,
            settings.capacity,
            settings.force_flush,
        )
    logger.debug(
        "Per-logger overrides: %s",
        {n: logging.getLevelName(lvl) for n, lvl in settings.logger_levels.items()}
        or "<none>",
    )
