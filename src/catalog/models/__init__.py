"""Data models module."""

from src.catalog.models.product import Product
from src.catalog.models.page import SORTABLE_FIELDS, Page, Sort

__all__ = ["Product", "Page", "Sort", "SORTABLE_FIELDS"]
