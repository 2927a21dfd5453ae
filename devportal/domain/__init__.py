"""Domain layer: entities, errors, metadata helpers and repository contracts."""
