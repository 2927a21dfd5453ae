"""Infrastructure adapters: cache backends and SQLAlchemy persistence."""
