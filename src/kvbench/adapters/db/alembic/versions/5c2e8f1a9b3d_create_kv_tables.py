"""Create kv_record and kv_field tables

Revision ID: 5c2e8f1a9b3d
Revises:
Create Date: 2026-10-17

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from kvbench.adapters.db.schema import RECORD_KEY_TYPE

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "5c2e8f1a9b3d"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "kv_record",
        sa.Column(
            "table_name",
            sa.String(length=100),
            nullable=False,
            comment="Logical table (namespace) the record belongs to.",
        ),
        sa.Column(
            "record_key",
            RECORD_KEY_TYPE,
            nullable=False,
            comment="Record key, unique within its table.",
        ),
        sa.PrimaryKeyConstraint("table_name", "record_key", name=op.f("pk_kv_record")),
        comment="One row per stored record.",
    )

    op.create_table(
        "kv_field",
        sa.Column("table_name", sa.String(length=100), nullable=False),
        sa.Column("record_key", RECORD_KEY_TYPE, nullable=False),
        sa.Column(
            "field_name",
            sa.String(length=255),
            nullable=False,
            comment="Field name, unique within its record.",
        ),
        sa.Column(
            "value",
            sa.LargeBinary(),
            nullable=False,
            comment="Raw field bytes.",
        ),
        sa.PrimaryKeyConstraint(
            "table_name", "record_key", "field_name", name=op.f("pk_kv_field")
        ),
        sa.ForeignKeyConstraint(
            ["table_name", "record_key"],
            ["kv_record.table_name", "kv_record.record_key"],
            name=op.f("fk_kv_field_table_name_record_key_kv_record"),
            ondelete="CASCADE",
        ),
        comment="One row per field of a stored record.",
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("kv_field")
    op.drop_table("kv_record")
