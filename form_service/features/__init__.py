"""Feature modules (each owns its models, repository, service and router)."""
