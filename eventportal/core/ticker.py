"""
Repeating timer for live countdowns.
"""
import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class Ticker:
    """
    Calls ``callback`` every ``interval`` seconds until stopped.

    The callback returns False to stop the ticker on its own. Use it as
    a context manager, or call ``stop()`` when the watcher goes away.
    """

    def __init__(
        self,
        callback: Callable[[], bool],
        interval: float = 1.0,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.callback = callback
        self.interval = interval
        self.sleep = sleep
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        self._stopped = True

    def run(self) -> None:
        """Tick until stopped. Meant to run as a background task."""
        while not self._stopped:
            self.sleep(self.interval)
            if self._stopped:
                break
            if self.callback() is False:
                self._stopped = True
        logger.debug("Ticker stopped")

    def __enter__(self) -> 'Ticker':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
