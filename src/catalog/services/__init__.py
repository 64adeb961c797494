"""Persistence services for products."""

from src.catalog.services.errors import PersistenceError
from src.catalog.services.product_store import ProductStore, SqliteProductStore

__all__ = ["PersistenceError", "ProductStore", "SqliteProductStore"]
