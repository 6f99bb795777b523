"""Alembic migration scripts for the KVBENCH SQL schema."""
