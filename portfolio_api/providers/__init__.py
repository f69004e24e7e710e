"""External service providers (object storage)."""
