"""Application layer: validation, schemas, caching and entity services."""
