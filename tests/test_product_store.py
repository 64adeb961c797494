"""Tests for the SQLite product store.

These tests verify:
- Table auto-creation
- Insert with store-assigned IDs and upsert by ID
- Sorted listing and pagination
- Deletion
- Transaction rollback and error wrapping on constraint violations
"""

import os
import sqlite3
import tempfile

import pytest

from src.catalog.clients import SqliteClient
from src.catalog.models import Page, Product, Sort
from src.catalog.services import PersistenceError, SqliteProductStore

PRODUCT_NAMES = ["Mouse", "Keyboard", "Monitor", "Cable", "Headset"]


@pytest.fixture
def temp_db_path():
    """Create a temporary database file for testing."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield path
    # Cleanup
    if os.path.exists(path):
        os.remove(path)


@pytest.fixture
def store(temp_db_path):
    """Create an empty SqliteProductStore."""
    return SqliteProductStore(temp_db_path)


@pytest.fixture
def seeded_store(store):
    """Store holding five products inserted in unsorted order."""
    for i, name in enumerate(PRODUCT_NAMES):
        store.save(Product(name=name, price=10.0 + i, description=f"{name} description"))
    return store


class TestSqliteProductStore:
    """Test SqliteProductStore functionality."""

    def test_initialization_creates_table(self, temp_db_path):
        """Test that the products table exists after construction."""
        SqliteProductStore(temp_db_path)

        rows = SqliteClient(temp_db_path).execute_query(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'products'"
        )
        assert len(rows) == 1

    def test_find_by_id_missing(self, store):
        """Test lookup of an ID that was never stored."""
        assert store.find_by_id(12345) is None

    def test_save_assigns_id(self, store):
        """Test that inserting a product without ID assigns one."""
        saved = store.save(Product(name="Lamp", price=19.99, stock=3))

        assert saved is not None
        assert saved.id is not None
        assert saved.name == "Lamp"
        assert saved.description is None
        assert saved.stock == 3

        assert store.find_by_id(saved.id) == saved
        print(f"Assigned product id: {saved.id}")

    def test_save_with_existing_id_replaces(self, store):
        """Test that saving with an existing ID replaces the whole record."""
        original = store.save(Product(name="Lamp", price=19.99, description="Desk lamp", stock=3))

        updated = store.save(Product(id=original.id, name="Floor lamp", price=49.0))

        assert updated.id == original.id
        assert updated.name == "Floor lamp"
        assert updated.description is None
        assert updated.stock == 0
        assert len(store.find_all(Sort.by("name"))) == 1

    def test_save_with_unknown_id_inserts(self, store):
        """Test upsert semantics for an ID that does not exist yet."""
        saved = store.save(Product(id=42, name="Chair", price=80.0))

        assert saved.id == 42
        assert store.find_by_id(42).name == "Chair"

    def test_find_all_sorted_by_name(self, seeded_store):
        """Test that listing returns every product ordered by name."""
        products = seeded_store.find_all(Sort.by("name"))

        assert [p.name for p in products] == sorted(PRODUCT_NAMES)

    def test_find_all_descending(self, seeded_store):
        """Test descending sort order."""
        products = seeded_store.find_all(Sort(field="price", descending=True))

        prices = [p.price for p in products]
        assert prices == sorted(prices, reverse=True)

    def test_find_page_first_page(self, seeded_store):
        """Test the first page of a sorted listing."""
        page = seeded_store.find_page(0, 2, Sort.by("name"))

        assert isinstance(page, Page)
        assert [p.name for p in page.items] == ["Cable", "Headset"]
        assert page.total == 5
        assert page.total_pages == 3

    def test_find_page_last_partial_page(self, seeded_store):
        """Test that the last page holds the remainder."""
        page = seeded_store.find_page(2, 2, Sort.by("name"))

        assert [p.name for p in page.items] == ["Mouse"]

    def test_find_page_past_the_end(self, seeded_store):
        """Test that a page beyond the data is empty but still counts the total."""
        page = seeded_store.find_page(10, 2, Sort.by("name"))

        assert page.items == []
        assert page.total == 5

    @pytest.mark.parametrize("page_index,size", [(-1, 2), (0, 0), (0, -5)])
    def test_find_page_rejects_invalid_bounds(self, store, page_index, size):
        """Test that negative pages and non-positive sizes are rejected."""
        with pytest.raises(ValueError):
            store.find_page(page_index, size, Sort.by("name"))

    def test_delete(self, seeded_store):
        """Test deleting a stored product."""
        target = seeded_store.find_all(Sort.by("name"))[0]

        seeded_store.delete(target)

        assert seeded_store.find_by_id(target.id) is None
        assert len(seeded_store.find_all(Sort.by("name"))) == 4

    def test_constraint_violation_raises_persistence_error(self, store):
        """Test that driver errors surface as PersistenceError with their cause."""
        with pytest.raises(PersistenceError) as exc_info:
            store.save(Product(name="Broken", price=-1.0))

        assert isinstance(exc_info.value.most_specific_cause, sqlite3.IntegrityError)
        assert store.find_all(Sort.by("name")) == []
        print(f"Most specific cause: {exc_info.value.most_specific_cause}")

    def test_integer_overflow_raises_persistence_error(self, store):
        """Test that ids beyond SQLite's integer range surface as PersistenceError."""
        with pytest.raises(PersistenceError) as exc_info:
            store.save(Product(id=10**30, name="Huge", price=1.0))

        assert isinstance(exc_info.value.most_specific_cause, OverflowError)

        with pytest.raises(PersistenceError):
            store.find_by_id(10**30)


class TestSort:
    """Test Sort validation."""

    def test_unknown_field_rejected(self):
        """Test that only product columns can be used for sorting."""
        with pytest.raises(ValueError):
            Sort.by("name; DROP TABLE products")

    def test_default_is_name_ascending(self):
        sort = Sort()
        assert sort.field == "name"
        assert sort.descending is False


class TestSqliteClient:
    """Test SqliteClient transaction handling."""

    def test_transaction_rolls_back_on_error(self, temp_db_path):
        """Test that a failed block leaves no partial write."""
        client = SqliteClient(temp_db_path)
        client.execute_query("CREATE TABLE items (value TEXT)")

        with pytest.raises(RuntimeError):
            with client.transaction() as connection:
                connection.execute("INSERT INTO items (value) VALUES ('a')")
                raise RuntimeError("boom")

        assert client.execute_query("SELECT COUNT(*) FROM items")[0][0] == 0

    def test_transaction_commits(self, temp_db_path):
        """Test that a successful block is committed."""
        client = SqliteClient(temp_db_path)
        client.execute_query("CREATE TABLE items (value TEXT)")

        with client.transaction() as connection:
            connection.execute("INSERT INTO items (value) VALUES (?)", ("a",))

        rows = client.execute_query("SELECT value FROM items")
        assert [row["value"] for row in rows] == ["a"]
