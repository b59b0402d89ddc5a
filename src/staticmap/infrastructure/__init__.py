"""Infrastructure layer - external services."""
