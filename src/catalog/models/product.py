"""Product model for database representation."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass
class Product:
    """Product data model representing a product record."""

    name: str
    price: float
    description: Optional[str] = None
    stock: int = 0
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Product":
        """Build a product from a database row keyed by column name."""
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            price=row["price"],
            stock=row["stock"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
