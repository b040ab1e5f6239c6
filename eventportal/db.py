"""
Database client and schema for the event portal.
The client is built once by the application factory and handed to the
repositories that need it.
"""
import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT UNIQUE NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS profiles (
        id TEXT PRIMARY KEY,
        username TEXT,
        first_name TEXT,
        last_name TEXT,
        user_role TEXT CHECK(user_role IN ('student', 'faculty', 'staff', 'guest')),
        unit TEXT,
        year INTEGER,
        section TEXT,
        position TEXT,
        address TEXT,
        sex TEXT,
        avatar_url TEXT,
        photo_consent INTEGER DEFAULT 0,
        social_media_consent INTEGER DEFAULT 0,
        can_create_events INTEGER DEFAULT 0,
        is_admin INTEGER DEFAULT 0,
        updated_at TIMESTAMP,
        CONSTRAINT profiles_username_key UNIQUE (username),
        FOREIGN KEY (id) REFERENCES users(id)
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS events (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        description TEXT,
        start_time TIMESTAMP,
        end_time TIMESTAMP,
        location TEXT,
        created_by TEXT NOT NULL,
        target_roles TEXT,
        target_units TEXT,
        target_year_levels TEXT,
        target_sections TEXT,
        created_at TIMESTAMP,
        updated_at TIMESTAMP,
        FOREIGN KEY (created_by) REFERENCES users(id)
    )
    ''',
]


class Database:
    """SQLite store client."""

    def __init__(self, path: str):
        self.path = path

    def _ensure_data_dir(self) -> None:
        data_dir = os.path.dirname(self.path)
        if data_dir and not os.path.exists(data_dir):
            os.makedirs(data_dir)

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection with row factory; always closed on exit."""
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create the portal tables if they do not exist."""
        self._ensure_data_dir()
        with self.connect() as conn:
            for statement in SCHEMA:
                conn.execute(statement)
            conn.commit()
        logger.info("Database initialized at: %s", self.path)

    def __repr__(self) -> str:
        return f"Database(path='{self.path}')"
