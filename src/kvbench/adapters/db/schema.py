"""Key-value store schema.

Two tables back the SQL adapter:

- ``kv_record``: one row per stored record, keyed by ``(table_name, record_key)``.
  A row exists even when the record has no fields, so presence never depends
  on field rows.
- ``kv_field``: one row per field, holding the raw value bytes. Rows cascade
  with their record.

Record keys must order as plain strings. SQLite's default ``BINARY``
collation already does; on PostgreSQL the key column uses ``COLLATE "C"`` so
``ORDER BY record_key`` is byte order rather than locale order.

| Constraint                                   | Purpose                     |
|----------------------------------------------|-----------------------------|
| PK(table_name, record_key)                   | one record per key per table |
| PK(table_name, record_key, field_name)       | unique field names per record |
| FK kv_field → kv_record ON DELETE CASCADE    | no orphaned fields           |
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKeyConstraint,
    LargeBinary,
    PrimaryKeyConstraint,
    String,
    Table,
)

from kvbench.adapters.db.metadata import metadata

__all__ = ["kv_record", "kv_field", "RECORD_KEY_TYPE"]

#: Record key type; binary collation on PostgreSQL so keys sort as plain strings.
RECORD_KEY_TYPE = String(255).with_variant(String(255, collation="C"), "postgresql")

kv_record = Table(
    "kv_record",
    metadata,
    Column(
        "table_name",
        String(100),
        nullable=False,
        comment="Logical table (namespace) the record belongs to.",
    ),
    Column(
        "record_key",
        RECORD_KEY_TYPE,
        nullable=False,
        comment="Record key, unique within its table.",
    ),
    PrimaryKeyConstraint("table_name", "record_key"),
    comment="One row per stored record.",
)

kv_field = Table(
    "kv_field",
    metadata,
    Column("table_name", String(100), nullable=False),
    Column("record_key", RECORD_KEY_TYPE, nullable=False),
    Column(
        "field_name",
        String(255),
        nullable=False,
        comment="Field name, unique within its record.",
    ),
    Column(
        "value",
        LargeBinary,
        nullable=False,
        comment="Raw field bytes.",
    ),
    PrimaryKeyConstraint("table_name", "record_key", "field_name"),
    ForeignKeyConstraint(
        ["table_name", "record_key"],
        ["kv_record.table_name", "kv_record.record_key"],
        ondelete="CASCADE",
    ),
    comment="One row per field of a stored record.",
)
