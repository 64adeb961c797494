"""Sorting and pagination models used by product stores."""

import math
from dataclasses import dataclass, field
from typing import List

from src.catalog.models.product import Product

SORTABLE_FIELDS = ("id", "name", "description", "price", "stock")


@dataclass(frozen=True)
class Sort:
    """Ordering criterion for product queries."""

    field: str = "name"
    descending: bool = False

    def __post_init__(self):
        if self.field not in SORTABLE_FIELDS:
            raise ValueError(
                f"Cannot sort by '{self.field}'. Expected one of: {', '.join(SORTABLE_FIELDS)}"
            )

    @classmethod
    def by(cls, field_name: str) -> "Sort":
        return cls(field=field_name)


@dataclass(frozen=True)
class Page:
    """A bounded, offset-addressed slice of a sorted product collection."""

    items: List[Product] = field(default_factory=list)
    page: int = 0  # 0-based page index
    size: int = 0
    total: int = 0  # Number of products across all pages

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total / self.size)
