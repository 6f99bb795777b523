"""Adapters (outbound) for KVBENCH.

Concrete `StoreClient` implementations plus the launchers that provision
throwaway backends for them.

Backends
- ``memory``   → `InMemoryStoreClient`
- ``sqlite``   → `SqlAlchemyStoreClient` over SQLite (`SqliteFileLauncher`)
- ``postgres`` → `SqlAlchemyStoreClient` over PostgreSQL (`PostgresContainerLauncher`)
"""

from __future__ import annotations

from collections.abc import Callable

from kvbench.interfaces.launcher import BackendLauncher
from kvbench.interfaces.store_client import StoreClient

from .launchers import PostgresContainerLauncher, SqliteFileLauncher
from .memory import InMemoryStoreClient
from .sqlalchemy_client import SqlAlchemyStoreClient

__all__ = [
    "BACKENDS",
    "InMemoryStoreClient",
    "PostgresContainerLauncher",
    "SqlAlchemyStoreClient",
    "SqliteFileLauncher",
    "client_factory",
    "launcher_for",
]

BACKENDS = ("memory", "sqlite", "postgres")


def client_factory(backend: str, url: str | None = None) -> Callable[[], StoreClient]:
    """Return a zero-argument factory building a client for `backend`.

    SQL factories check connectivity on every call and raise
    `BackendUnavailable` when the database cannot be reached.

    Args:
        backend: One of `BACKENDS`.
        url: Database URL for SQL backends. Required for ``sqlite`` and
            ``postgres``; ignored for ``memory``.

    Raises:
        ValueError: If the backend is unknown or a SQL backend has no URL.
    """
    match backend:
        case "memory":
            # one shared instance so every scenario sees the same store
            client = InMemoryStoreClient()
            return lambda: client
        case "sqlite" | "postgres":
            if url is None:
                raise ValueError(f"backend {backend!r} needs a database URL")
            return lambda: SqlAlchemyStoreClient.connect(url)
        case _:
            raise ValueError(f"unknown backend: {backend!r}")


def launcher_for(backend: str) -> BackendLauncher | None:
    """Return a launcher that provisions `backend`, or None if it needs none."""
    match backend:
        case "memory":
            return None
        case "sqlite":
            return SqliteFileLauncher()
        case "postgres":
            return PostgresContainerLauncher()
        case _:
            raise ValueError(f"unknown backend: {backend!r}")
