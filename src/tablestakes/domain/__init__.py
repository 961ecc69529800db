"""Domain layer: the table entity, its value objects and services."""
