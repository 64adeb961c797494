"""Product persistence: the store interface and its SQLite implementation.

Every store operation runs inside one transaction, so a failed save or delete
leaves no partial write behind.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from sqlite3 import Connection
from typing import Iterator, List, Optional

from ..clients import SqliteClient
from ..models import Page, Product, Sort
from .errors import PersistenceError

logger = logging.getLogger(__name__)

# SQL statements
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    price REAL NOT NULL CHECK (price >= 0),
    stock INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0)
)
"""

CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_products_name ON products(name)
"""

SELECT_COLUMNS = "SELECT id, name, description, price, stock FROM products"

INSERT_SQL = """
INSERT INTO products (name, description, price, stock) VALUES (?, ?, ?, ?)
"""

UPSERT_SQL = """
INSERT INTO products (id, name, description, price, stock) VALUES (?, ?, ?, ?, ?)
ON CONFLICT(id) DO UPDATE SET
    name = excluded.name,
    description = excluded.description,
    price = excluded.price,
    stock = excluded.stock
"""


class ProductStore(ABC):
    """Persistence interface for products."""

    @abstractmethod
    def find_all(self, sort: Sort) -> List[Product]:
        """Return every product ordered by ``sort``."""

    @abstractmethod
    def find_page(self, page: int, size: int, sort: Sort) -> Page:
        """Return one page of products ordered by ``sort``.

        Raises:
            ValueError: If ``page`` is negative or ``size`` is less than one.
        """

    @abstractmethod
    def find_by_id(self, product_id: int) -> Optional[Product]:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def save(self, product: Product) -> Optional[Product]:
        """Insert a product without an ID, or insert-or-replace one with an ID.

        Returns:
            The stored product, or None if it could not be read back.
        """

    @abstractmethod
    def delete(self, product: Product) -> None:
        """Remove a product."""


def _order_by(sort: Sort) -> str:
    # Sort.field is restricted to known columns, so interpolation is safe
    direction = "DESC" if sort.descending else "ASC"
    return f"ORDER BY {sort.field} {direction}, id ASC"


class SqliteProductStore(ProductStore):
    """Product store backed by a SQLite database file."""

    def __init__(self, db_path: str = "products.db"):
        """Initialize the store and create the products table if needed.

        Args:
            db_path: Path to the SQLite database file.
        """
        self._db_path = db_path
        self._sqlite_client = SqliteClient(db_path)
        self._ensure_table_exists()

    def _ensure_table_exists(self) -> None:
        """Create the products table if it doesn't exist."""
        self._sqlite_client.execute_query(CREATE_TABLE_SQL)
        self._sqlite_client.execute_query(CREATE_INDEX_SQL)
        logger.debug(f"Products table initialized in {self._db_path}")

    @contextmanager
    def _transaction(self) -> Iterator[Connection]:
        try:
            with self._sqlite_client.transaction() as connection:
                yield connection
        except (sqlite3.Error, OverflowError) as e:
            # OverflowError: an integer parameter too large for SQLite
            raise PersistenceError(f"Database operation failed: {e}") from e

    def find_all(self, sort: Sort) -> List[Product]:
        with self._transaction() as connection:
            rows = connection.execute(f"{SELECT_COLUMNS} {_order_by(sort)}").fetchall()
        return [Product.from_row(row) for row in rows]

    def find_page(self, page: int, size: int, sort: Sort) -> Page:
        if page < 0:
            raise ValueError("Page index must not be less than zero")
        if size < 1:
            raise ValueError("Page size must not be less than one")

        with self._transaction() as connection:
            total = connection.execute("SELECT COUNT(*) FROM products").fetchone()[0]
            rows = connection.execute(
                f"{SELECT_COLUMNS} {_order_by(sort)} LIMIT ? OFFSET ?",
                (size, page * size),
            ).fetchall()

        return Page(
            items=[Product.from_row(row) for row in rows],
            page=page,
            size=size,
            total=total,
        )

    def find_by_id(self, product_id: int) -> Optional[Product]:
        with self._transaction() as connection:
            row = connection.execute(
                f"{SELECT_COLUMNS} WHERE id = ?", (product_id,)
            ).fetchone()
        return Product.from_row(row) if row is not None else None

    def save(self, product: Product) -> Optional[Product]:
        with self._transaction() as connection:
            if product.id is None:
                cursor = connection.execute(
                    INSERT_SQL,
                    (product.name, product.description, product.price, product.stock),
                )
                product_id = cursor.lastrowid
            else:
                connection.execute(
                    UPSERT_SQL,
                    (product.id, product.name, product.description, product.price, product.stock),
                )
                product_id = product.id

            row = connection.execute(
                f"{SELECT_COLUMNS} WHERE id = ?", (product_id,)
            ).fetchone()

        if row is None:
            logger.warning(f"Product {product_id} could not be read back after saving")
            return None

        logger.info(f"Saved product {product_id}")
        return Product.from_row(row)

    def delete(self, product: Product) -> None:
        with self._transaction() as connection:
            connection.execute("DELETE FROM products WHERE id = ?", (product.id,))
        logger.info(f"Deleted product {product.id}")
