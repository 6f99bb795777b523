"""Configuration utilities for KVBENCH.

Centralizes environment lookups and Alembic configuration used by the CLI,
the SQL adapter, and the backend launchers.
"""

import os
import sys
from importlib.resources import files
from typing import TextIO

from alembic.config import Config

DB_URL_ENV = "KVBENCH_DB_URL"  # pragma: no mutate
DEFAULT_TABLE = "test"  # pragma: no mutate

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate


class DatabaseUrlNotSetError(Exception):
    """Raised when the KVBENCH_DB_URL environment variable is not set."""


def get_db_url() -> str:
    """Get the database URL from the environment.

    Returns:
        The value of the `KVBENCH_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `KVBENCH_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Build an Alembic `Config` object for the KVBENCH schema.

    Sets only Alembic "main" options:
    - `sqlalchemy.url` → the database URL you pass
    - `script_location` → the packaged Alembic scripts

    Args:
        db_url: SQLAlchemy database URL. Can be `None` only where Alembic
            won't need to connect (e.g. `heads`).
        stdout: Text stream Alembic writes status lines to.

    Returns:
        An `alembic.config.Config` pointing at the packaged migrations.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        # configparser interpolation treats "%" as special
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url.replace("%", "%%"))
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(files("kvbench.adapters.db.alembic")),
    )
    return cfg
