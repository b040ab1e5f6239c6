"""
EventRepository class for SQLite CRUD operations.
Handles all database interactions for events.
"""
from typing import Optional, List

from eventportal.models.event import Event, utcnow
from eventportal.repositories.base import Repository

EDITABLE_COLUMNS = [
    'title', 'description', 'start_time', 'end_time', 'location',
    'target_roles', 'target_units', 'target_year_levels', 'target_sections',
    'updated_at',
]


class EventRepository(Repository):
    """
    Repository class for Event database operations.
    """

    def create(self, event: Event) -> int:
        """
        Create a new event in the database.
        Returns the ID of the created event.
        """
        data = event.to_row()
        del data['id']  # Remove id for insert

        columns = ', '.join(data.keys())
        placeholders = ', '.join(['?' for _ in data])

        with self._connection() as conn:
            cursor = conn.execute(
                f"INSERT INTO events ({columns}) VALUES ({placeholders})",
                list(data.values())
            )
            conn.commit()
            return cursor.lastrowid

    def find_by_id(self, event_id: int) -> Optional[Event]:
        """Find an event by its ID."""
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM events WHERE id = ?", (event_id,)).fetchone()
            return Event.from_dict(dict(row)) if row else None

    def find_all(self) -> List[Event]:
        """
        Find all events, latest start first.
        Events without a start time come last.
        """
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM events ORDER BY start_time IS NULL, start_time DESC, id DESC"
            ).fetchall()
            return [Event.from_dict(dict(row)) for row in rows]

    def update(self, event: Event, author_id: str) -> bool:
        """
        Update an event, but only if ``author_id`` created it.
        Returns True if a row was updated.
        """
        if not event.id:
            return False

        event.updated_at = utcnow().isoformat()
        data = event.to_row()
        set_clause = ', '.join([f"{column} = ?" for column in EDITABLE_COLUMNS])

        with self._connection() as conn:
            cursor = conn.execute(
                f"UPDATE events SET {set_clause} WHERE id = ? AND created_by = ?",
                [data[column] for column in EDITABLE_COLUMNS] + [event.id, author_id]
            )
            conn.commit()
            return cursor.rowcount > 0
