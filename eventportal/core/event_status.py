"""
Event lifecycle computed from wall-clock time.

Nothing here is stored; every evaluation derives the state afresh from
the event's start and end and the current instant.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Iterable, NamedTuple


class EventState(str, Enum):
    UPCOMING = 'Upcoming'
    ONGOING = 'Ongoing'
    FINISHED = 'Finished'
    INFO_MISSING = 'InfoMissing'


class EventStatus(NamedTuple):
    state: EventState
    remaining: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'status': self.state.value, 'remaining': self.remaining}


def format_remaining(total_seconds: float) -> str:
    """Format a duration as zero-padded HH:MM:SS, dropping fractions."""
    seconds = int(total_seconds)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def compute_status(
    start: Optional[datetime],
    end: Optional[datetime],
    now: datetime
) -> EventStatus:
    """
    Classify an event at the instant ``now``.

    ``now == start`` is Ongoing. A non-positive remaining time is
    Finished, so ``now == end`` is already Finished.
    """
    if start is None or end is None:
        return EventStatus(EventState.INFO_MISSING)

    if now < start:
        return EventStatus(EventState.UPCOMING)

    remaining = (end - now).total_seconds()
    if remaining <= 0:
        return EventStatus(EventState.FINISHED)

    return EventStatus(EventState.ONGOING, format_remaining(remaining))


def is_settled(status: EventStatus) -> bool:
    """True once no later evaluation can change the state."""
    return status.state in (EventState.FINISHED, EventState.INFO_MISSING)


def split_tabs(tagged: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Split tagged event dicts into the dashboard's two tabs.
    Finished events go to ``finished``; everything else is ``upcoming``.
    """
    tabs = {'upcoming': [], 'finished': []}
    for item in tagged:
        if item['status'] == EventState.FINISHED.value:
            tabs['finished'].append(item)
        else:
            tabs['upcoming'].append(item)
    return tabs
