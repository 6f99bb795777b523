"""Backend launchers for SQL-backed stores.

Provides throwaway backends for conformance runs:

- `SqliteFileLauncher`: a temp-file SQLite database migrated to Alembic head.
  We use a file (not ``:memory:``) so the migrated schema is visible to every
  connection the client opens.
- `PostgresContainerLauncher`: a Testcontainers ``postgres:17`` instance
  migrated to Alembic head. Needs a reachable Docker daemon and the
  ``postgres`` extra installed; otherwise `start()` raises
  `BackendUnavailable`.

Both launchers' `stop()` are idempotent.
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
from pathlib import Path

from alembic import command
from sqlalchemy.engine import URL

from kvbench import config
from kvbench.interfaces.errors import BackendUnavailable
from kvbench.interfaces.launcher import BackendHandle, BackendLauncher

__all__ = ["SqliteFileLauncher", "PostgresContainerLauncher", "migrate"]

logger = logging.getLogger(__name__)


def migrate(url: str) -> None:
    """Upgrade the database at `url` to Alembic head (idempotent)."""
    command.upgrade(config.build_alembic_config(url), "head")


class SqliteFileLauncher(BackendLauncher):
    """Provision a migrated SQLite database in a temporary directory.

    Args:
        directory: Parent directory for the temp dir; defaults to the system
            temp location.
    """

    name = "sqlite"

    def __init__(self, directory: Path | None = None):
        self.directory = directory

    def start(self) -> BackendHandle:
        workdir = Path(tempfile.mkdtemp(prefix="kvbench-", dir=self.directory))
        url = str(URL.create("sqlite+pysqlite", database=str(workdir / "kvbench.db")))
        try:
            migrate(url)
        except Exception as e:  # pylint: disable=broad-except
            shutil.rmtree(workdir, ignore_errors=True)
            raise BackendUnavailable(f"Could not migrate SQLite database: {e}") from e
        logger.debug("SQLite backend ready at %s", workdir)
        return BackendHandle(url=url, resource=workdir)

    def stop(self, handle: BackendHandle) -> None:
        if handle.stopped:
            return
        handle.stopped = True
        shutil.rmtree(handle.resource, ignore_errors=True)
        logger.debug("SQLite backend at %s removed", handle.resource)


def _docker_available() -> bool:
    try:
        import docker  # pylint: disable=import-outside-toplevel

        docker.from_env().ping()
    except Exception:  # pylint: disable=broad-except
        return False
    return True


class PostgresContainerLauncher(BackendLauncher):
    """Provision a migrated PostgreSQL instance with Testcontainers.

    Args:
        image: Docker image to run.
        username: Database user.
        password: Database password.
        dbname: Database name.
    """

    name = "postgres"

    def __init__(
        self,
        image: str = "postgres:17",
        *,
        username: str = "kvbench",
        password: str = "kvbench",
        dbname: str = "kvbench",
    ):
        self.image = image
        self.username = username
        self.password = password
        self.dbname = dbname

    def start(self) -> BackendHandle:
        try:
            from testcontainers.postgres import (  # pylint: disable=import-outside-toplevel
                PostgresContainer,  # pyright: ignore[reportMissingTypeStubs]
            )
        except ImportError as e:
            raise BackendUnavailable(
                "testcontainers is not installed (install the 'postgres' extra)"
            ) from e

        if not _docker_available():
            raise BackendUnavailable("Docker daemon is not available")

        container = PostgresContainer(
            image=self.image,
            username=self.username,
            password=self.password,
            dbname=self.dbname,
        )
        try:
            container.start()
        except Exception as e:  # pylint: disable=broad-except
            raise BackendUnavailable(f"Could not start {self.image}: {e}") from e

        # testcontainers returns psycopg2 URLs by default; normalize to psycopg v3
        url = re.sub(r"\+psycopg2\b", "+psycopg", container.get_connection_url())
        handle = BackendHandle(url=url, resource=container)
        try:
            migrate(url)
        except Exception as e:  # pylint: disable=broad-except
            self.stop(handle)
            raise BackendUnavailable(f"Could not migrate PostgreSQL: {e}") from e
        logger.debug("PostgreSQL backend ready (%s)", self.image)
        return handle

    def stop(self, handle: BackendHandle) -> None:
        if handle.stopped:
            return
        handle.stopped = True
        handle.resource.stop()
        logger.debug("PostgreSQL container stopped")
