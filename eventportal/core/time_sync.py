"""
Clock skew correction against a trusted time source.
"""
import logging
import sqlite3
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from eventportal.errors import TimeSourceUnavailable

logger = logging.getLogger(__name__)


def local_millis() -> int:
    return int(time.time() * 1000)


class TimeSync:
    """
    Estimates the trusted current time from the local clock.

    ``sync()`` measures the offset between the trusted clock and the
    local clock once. ``now()`` then adds that offset to the local clock
    on every call. If the trusted clock cannot be read the offset is 0
    and the local clock is used as is.
    """

    def __init__(
        self,
        clock_source: Callable[[], datetime],
        local_clock: Callable[[], int] = local_millis
    ):
        self.clock_source = clock_source
        self.local_clock = local_clock
        self.offset_millis: Optional[int] = None

    def sync(self) -> int:
        """Measure and remember the offset in milliseconds."""
        try:
            trusted = self.clock_source()
            trusted_millis = int(trusted.timestamp() * 1000)
            self.offset_millis = trusted_millis - self.local_clock()
        except Exception as e:
            logger.warning("Could not sync with server time, using local time as fallback: %s", e)
            self.offset_millis = 0
        return self.offset_millis

    def now(self) -> datetime:
        """Current estimated trusted time as an aware UTC datetime."""
        if self.offset_millis is None:
            self.sync()
        millis = self.local_clock() + self.offset_millis
        return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(milliseconds=millis)


class StoreClock:
    """
    Trusted clock backed by the database server's own time.
    """

    def __init__(self, database):
        self.database = database

    def __call__(self) -> datetime:
        try:
            with self.database.connect() as conn:
                row = conn.execute(
                    "SELECT strftime('%Y-%m-%dT%H:%M:%f', 'now') AS now"
                ).fetchone()
        except sqlite3.Error as e:
            raise TimeSourceUnavailable(str(e)) from e
        if not row or not row['now']:
            raise TimeSourceUnavailable("Database returned no time")
        return datetime.fromisoformat(row['now']).replace(tzinfo=timezone.utc)
