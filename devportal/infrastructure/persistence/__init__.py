"""Relational persistence: SQLAlchemy models, repositories and unit of work."""
