"""Persistence: database manager, models base and repositories."""
