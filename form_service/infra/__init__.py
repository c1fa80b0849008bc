"""Infrastructure adapters (document store, logging)."""
