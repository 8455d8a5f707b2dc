"""Domain layer: entities, exceptions, interfaces and services."""
