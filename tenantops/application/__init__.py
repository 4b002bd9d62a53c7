"""Application layer: DTOs, ports (interfaces) and use-case services."""
