"""Infrastructure Layer: cross-cutting concerns (logging)."""
