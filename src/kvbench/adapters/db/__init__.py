"""SQLAlchemy plumbing shared by SQL-backed adapters."""
