"""Persistence engine: ORM tables, sessions and repositories."""
