"""Pytest fixtures for StoreClient contract tests.

Provided fixtures
-----------------
- **client**: Parametrized over every adapter/engine combination. Returns a
  client bound to an empty store:

  - `"memory"` → `InMemoryStoreClient`
  - `"sqlite-memory"` → `SqlAlchemyStoreClient` on in-memory SQLite
    (schema from ``metadata.create_all()``)
  - `"sqlite-file"` → `SqlAlchemyStoreClient` on a migrated temp-file SQLite
  - `"postgres"` → `SqlAlchemyStoreClient` on the session Testcontainers
    PostgreSQL (skipped when Docker is down)

  Engine fixtures are requested lazily so only the selected backend is
  provisioned.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from kvbench.adapters import InMemoryStoreClient, SqlAlchemyStoreClient
from kvbench.interfaces import StoreClient

ENGINE_FIXTURES = {
    "sqlite-memory": "sqlite_engine_memory",
    "sqlite-file": "sqlite_engine_file",
    "postgres": "postgres_engine",
}


@pytest.fixture(
    params=[
        "memory",
        "sqlite-memory",
        "sqlite-file",
        pytest.param("postgres", marks=pytest.mark.docker),
    ]
)
def client(request: pytest.FixtureRequest) -> Iterator[StoreClient]:
    """Return a fresh client for the requested backend."""
    match request.param:
        case "memory":
            store: StoreClient = InMemoryStoreClient()
        case name if name in ENGINE_FIXTURES:
            store = SqlAlchemyStoreClient(
                request.getfixturevalue(ENGINE_FIXTURES[name])
            )
        case _:
            raise ValueError(f"unknown backend: {request.param}")
    with store:
        yield store


@pytest.fixture
def table() -> str:
    """Default table identifier for contract tests."""
    return "usertable"
