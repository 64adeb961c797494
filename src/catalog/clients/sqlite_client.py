import logging
import sqlite3
from contextlib import contextmanager
from sqlite3 import Connection
from typing import Iterator

logger = logging.getLogger(__name__)


class SqliteClient:
    """SQLite database client with connection and transaction management.

    A new connection is opened for every transaction so that concurrent
    request threads never share one.
    """

    def __init__(self, connection_string: str):
        self.connection_string = connection_string

    def connect(self) -> Connection:
        """Open a new database connection with name-addressable rows."""
        connection = sqlite3.connect(self.connection_string)
        connection.row_factory = sqlite3.Row
        return connection

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Run a block inside one transaction.

        Commits when the block exits normally and rolls back on any exception,
        which is re-raised. The connection is always closed.
        """
        connection = self.connect()
        try:
            yield connection
            connection.commit()
        except BaseException:
            connection.rollback()
            logger.debug(f"Transaction rolled back on {self.connection_string}")
            raise
        finally:
            connection.close()

    def execute_query(self, query: str, params=None):
        """Execute a query in its own transaction and return all results."""
        with self.transaction() as connection:
            cursor = connection.cursor()
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)

            results = cursor.fetchall()
            cursor.close()
            return results

