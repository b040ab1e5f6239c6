"""
Shared plumbing for the SQLite repositories.
"""
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from eventportal.db import Database
from eventportal.errors import ConstraintViolation, StoreError


class Repository:
    """Base repository holding the injected database client."""

    def __init__(self, database: Database):
        self.database = database

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """
        Yield a connection and translate driver errors into the portal's
        error taxonomy.
        """
        try:
            with self.database.connect() as conn:
                yield conn
        except sqlite3.IntegrityError as e:
            raise ConstraintViolation(str(e)) from e
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
