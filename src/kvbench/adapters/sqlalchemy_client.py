"""Implementation of StoreClient using SQLAlchemy.

Supports SQLite and PostgreSQL. Records live in ``kv_record`` and their
fields in ``kv_field`` (see `kvbench.adapters.db.schema`). Every operation
runs in its own transaction, so a single client can be reused across any
number of sequential calls without carrying state between them.

Engine errors never escape as exceptions: any `SQLAlchemyError` raised while
an operation runs is logged and reported as `Status.ERROR`. Contract
violations (empty table identifier, negative scan count) are checked before
touching the database and propagate to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy import delete, insert, inspect, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, IntegrityError, SQLAlchemyError

from kvbench.adapters.db.dialects import DialectName, UnsupportedDialect
from kvbench.adapters.db.engine import make_engine
from kvbench.adapters.db.schema import kv_field, kv_record
from kvbench.interfaces.byte_sequence import ByteArraySequence, materialize
from kvbench.interfaces.errors import BackendUnavailable
from kvbench.interfaces.store_client import (
    ReadResult,
    Record,
    ScanResult,
    Status,
    StoreClient,
    validate_count,
    validate_table,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import URL, Connection, Engine
    from sqlalchemy.sql import Select

__all__ = ["SqlAlchemyStoreClient"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCHEMA_MISSING_MSG = (
    "Schema not initialized (missing {}); "
    "run 'kvbench db upgrade' or pass --migrate"
)


class SqlAlchemyStoreClient(StoreClient):
    """StoreClient implementation that supports both PostgreSQL and SQLite.

    Args:
        engine: Engine bound to a database migrated to Alembic head (or
            created with ``metadata.create_all()``).
        owns_engine: If True, `close()` disposes the engine.
    """

    def __init__(self, engine: Engine, *, owns_engine: bool = False):
        self.engine = engine
        self.dialect = DialectName.from_sqlalchemy(engine)
        self.name = self.dialect.value
        self._owns_engine = owns_engine
        self._closed = False

    @classmethod
    def from_url(cls, url: str | URL) -> SqlAlchemyStoreClient:
        """Build a client with its own engine for `url`."""
        return cls(make_engine(url), owns_engine=True)

    @classmethod
    def connect(cls, url: str | URL) -> SqlAlchemyStoreClient:
        """Build a client for `url` and check the database is ready for use.

        Raises:
            BackendUnavailable: If the URL is invalid, the dialect is not
                supported, its driver is not installed, the database cannot
                be reached, or its tables have not been created.
        """
        try:
            DialectName.from_string(make_url(url).drivername)
            client = cls.from_url(url)
        except (ArgumentError, UnsupportedDialect) as e:
            raise BackendUnavailable(f"Invalid database URL: {e}") from e
        except ImportError as e:
            raise BackendUnavailable(f"Database driver not installed: {e}") from e
        try:
            with client.engine.connect() as conn:
                conn.execute(text("SELECT 1"))  # pragma: no mutate
                inspector = inspect(conn)
                missing = [
                    t.name
                    for t in (kv_record, kv_field)
                    if not inspector.has_table(t.name)
                ]
        except SQLAlchemyError as e:
            client.close()
            raise BackendUnavailable(f"Database is not reachable: {e}") from e
        if missing:
            client.close()
            raise BackendUnavailable(SCHEMA_MISSING_MSG.format(", ".join(missing)))
        return client

    # --- transaction helper ---

    def _transact(
        self,
        op: str,
        table: str,
        key: str,
        work: Callable[[Connection], T],
        on_error: T,
    ) -> T:
        try:
            with self.engine.begin() as conn:
                return work(conn)
        except IntegrityError:
            logger.debug("%s %s/%s rejected by a constraint", op, table, key)
            return on_error
        except SQLAlchemyError:
            logger.warning("%s %s/%s failed", op, table, key, exc_info=True)
            return on_error

    # --- query builders ---

    @staticmethod
    def _exists(conn: Connection, table: str, key: str) -> bool:
        stmt = select(kv_record.c.record_key).where(
            kv_record.c.table_name == table,
            kv_record.c.record_key == key,
        )
        return conn.execute(stmt).first() is not None

    @staticmethod
    def _select_fields(
        table: str, keys: list[str], fields: Collection[str] | None
    ) -> Select:
        stmt = select(
            kv_field.c.record_key, kv_field.c.field_name, kv_field.c.value
        ).where(
            kv_field.c.table_name == table,
            kv_field.c.record_key.in_(keys),
        )
        if fields:
            stmt = stmt.where(kv_field.c.field_name.in_(list(fields)))
        return stmt

    @staticmethod
    def _field_rows(table: str, key: str, values: dict[str, bytes]) -> list[dict]:
        return [
            {
                "table_name": table,
                "record_key": key,
                "field_name": name,
                "value": data,
            }
            for name, data in values.items()
        ]

    # --- StoreClient ---

    def insert(self, table: str, key: str, values: Record) -> Status:
        validate_table(table)
        data = materialize(values)

        def _insert(conn: Connection) -> Status:
            conn.execute(insert(kv_record).values(table_name=table, record_key=key))
            if data:
                conn.execute(insert(kv_field), self._field_rows(table, key, data))
            return Status.OK

        return self._transact("insert", table, key, _insert, Status.ERROR)

    def read(
        self, table: str, key: str, fields: Collection[str] | None = None
    ) -> ReadResult:
        validate_table(table)

        def _read(conn: Connection) -> ReadResult:
            if not self._exists(conn, table, key):
                return ReadResult(Status.NOT_FOUND)
            rows = conn.execute(self._select_fields(table, [key], fields))
            record: Record = {
                row.field_name: ByteArraySequence(row.value) for row in rows
            }
            return ReadResult(Status.OK, record)

        return self._transact("read", table, key, _read, ReadResult(Status.ERROR))

    def update(self, table: str, key: str, values: Record) -> Status:
        validate_table(table)
        data = materialize(values)

        def _update(conn: Connection) -> Status:
            if not self._exists(conn, table, key):
                return Status.NOT_FOUND
            if data:
                conn.execute(
                    delete(kv_field).where(
                        kv_field.c.table_name == table,
                        kv_field.c.record_key == key,
                        kv_field.c.field_name.in_(list(data)),
                    )
                )
                conn.execute(insert(kv_field), self._field_rows(table, key, data))
            return Status.OK

        return self._transact("update", table, key, _update, Status.ERROR)

    def delete(self, table: str, key: str) -> Status:
        validate_table(table)

        def _delete(conn: Connection) -> Status:
            conn.execute(
                delete(kv_field).where(
                    kv_field.c.table_name == table,
                    kv_field.c.record_key == key,
                )
            )
            result = conn.execute(
                delete(kv_record).where(
                    kv_record.c.table_name == table,
                    kv_record.c.record_key == key,
                )
            )
            return Status.OK if result.rowcount else Status.NOT_FOUND

        return self._transact("delete", table, key, _delete, Status.ERROR)

    def scan(
        self,
        table: str,
        start_key: str,
        count: int,
        fields: Collection[str] | None = None,
    ) -> ScanResult:
        validate_table(table)
        validate_count(count)
        if count == 0:
            return ScanResult(Status.OK)

        def _scan(conn: Connection) -> ScanResult:
            keys = list(
                conn.execute(
                    select(kv_record.c.record_key)
                    .where(
                        kv_record.c.table_name == table,
                        kv_record.c.record_key >= start_key,
                    )
                    .order_by(kv_record.c.record_key)
                    .limit(count)
                ).scalars()
            )
            if not keys:
                return ScanResult(Status.OK)

            # keys arrive ordered; dict insertion order preserves it
            grouped: dict[str, Record] = {k: {} for k in keys}
            for row in conn.execute(self._select_fields(table, keys, fields)):
                grouped[row.record_key][row.field_name] = ByteArraySequence(row.value)
            return ScanResult(Status.OK, list(grouped.items()))

        return self._transact("scan", table, start_key, _scan, ScanResult(Status.ERROR))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_engine:
            self.engine.dispose()
