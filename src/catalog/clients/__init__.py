"""Client modules for external services."""

from src.catalog.clients.sqlite_client import SqliteClient

__all__ = ["SqliteClient"]
