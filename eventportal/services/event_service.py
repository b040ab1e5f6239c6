"""
EventService class for business logic.
Handles event creation, author-only edits and the per-user dashboard.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Tuple
from zoneinfo import ZoneInfo

from eventportal.core.audience import is_visible, filter_visible
from eventportal.core.event_status import compute_status, split_tabs
from eventportal.errors import NotFound, PermissionDenied, NotificationError, StoreError
from eventportal.models.event import Event, TargetingCriteria
from eventportal.models.profile import UserProfile
from eventportal.repositories.event_repository import EventRepository
from eventportal.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

TARGET_FIELDS = ('target_roles', 'target_units', 'target_year_levels', 'target_sections')
SCHEDULE_FIELDS = ('event_date', 'start_time', 'end_time')

NO_CREATE_PERMISSION = 'You do not have permission to create events.'
NO_EDIT_PERMISSION = 'You do not have permission to edit this event.'
EVENT_NOT_FOUND = 'Event not found.'
SCHEDULE_FORMAT_ERROR = "Use YYYY-MM-DD for the date and HH:MM for the time"


def _text(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()


class EventService:
    """
    Service class for event business logic.
    Times arrive as a local date plus HH:MM clock times and are stored
    as UTC instants.
    """

    def __init__(
        self,
        event_repository: EventRepository,
        profile_repository: ProfileRepository,
        notification_service=None,
        notify_on_save: bool = True,
        timezone_name: str = 'Asia/Manila'
    ):
        self.event_repository = event_repository
        self.profile_repository = profile_repository
        self.notification_service = notification_service
        self.notify_on_save = notify_on_save
        self.zone = ZoneInfo(timezone_name)

    # ------------------------------------------------------------------
    # Input parsing
    # ------------------------------------------------------------------
    def _combine(self, date_str: str, time_str: Optional[str]) -> Optional[datetime]:
        if not time_str:
            return None
        local = datetime.strptime(f"{date_str.strip()} {time_str.strip()}", '%Y-%m-%d %H:%M')
        return local.replace(tzinfo=self.zone).astimezone(timezone.utc)

    def _local_parts(self, instant: Optional[datetime]) -> Tuple[Optional[str], Optional[str]]:
        if instant is None:
            return None, None
        local = instant.astimezone(self.zone)
        return local.strftime('%Y-%m-%d'), local.strftime('%H:%M')

    def parse_schedule(
        self,
        data: Dict[str, Any],
        existing: Optional[Event] = None
    ) -> Tuple[Optional[datetime], Optional[datetime], Dict[str, str]]:
        """
        Turn event_date/start_time/end_time into UTC instants.
        Fields missing from ``data`` fall back to the existing event.
        """
        errors = {
            field: SCHEDULE_FORMAT_ERROR for field in SCHEDULE_FIELDS
            if data.get(field) is not None and not isinstance(data.get(field), str)
        }
        if errors:
            return None, None, errors

        existing_date, existing_start = self._local_parts(existing.start_time if existing else None)
        _, existing_end = self._local_parts(existing.end_time if existing else None)

        date_str = data.get('event_date') or existing_date
        start_str = data['start_time'] if 'start_time' in data else existing_start
        end_str = data['end_time'] if 'end_time' in data else existing_end

        if not date_str:
            if start_str or end_str:
                return None, None, {'event_date': "Date is required"}
            return None, None, {}

        try:
            start = self._combine(date_str, start_str)
        except ValueError:
            start = None
            errors['start_time'] = SCHEDULE_FORMAT_ERROR
        try:
            end = self._combine(date_str, end_str)
        except ValueError:
            end = None
            errors['end_time'] = SCHEDULE_FORMAT_ERROR
        return start, end, errors

    @staticmethod
    def parse_criteria(data: Dict[str, Any]) -> TargetingCriteria:
        return TargetingCriteria(
            roles=data.get('target_roles'),
            units=data.get('target_units'),
            year_levels=data.get('target_year_levels'),
            sections=data.get('target_sections'),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_event(self, event_id: int) -> Event:
        event = self.event_repository.find_by_id(event_id)
        if event is None:
            raise NotFound(EVENT_NOT_FOUND)
        return event

    def get_visible_event(self, event_id: int, user_id: str) -> Event:
        """Get an event the user may see; hidden events look missing."""
        event = self.get_event(event_id)
        profile = self.profile_repository.find_by_id(user_id)
        if not is_visible(profile, event.criteria, event.is_created_by(user_id)):
            raise NotFound(EVENT_NOT_FOUND)
        return event

    def tag(self, event: Event, now: datetime, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Event dict with its status at ``now``."""
        data = event.to_dict()
        data.update(compute_status(event.start_time, event.end_time, now).to_dict())
        data['is_creator'] = event.is_created_by(user_id)
        return data

    def dashboard(self, user_id: str, now: datetime) -> Dict[str, Any]:
        """
        The user's visible events split into upcoming and finished tabs,
        each tagged with its status at ``now``.
        """
        profile = self.profile_repository.find_by_id(user_id)
        events = filter_visible(profile, self.event_repository.find_all(), user_id)
        tabs = split_tabs(self.tag(event, now, user_id) for event in events)
        tabs['profile_required'] = profile is None
        tabs['can_create_events'] = bool(profile and profile.can_create_events)
        tabs['now'] = now.isoformat()
        return tabs

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def _require_creator_permission(self, user_id: str) -> UserProfile:
        profile = self.profile_repository.find_by_id(user_id)
        if profile is None or not profile.can_create_events:
            raise PermissionDenied(NO_CREATE_PERMISSION)
        return profile

    def _notify(self, event_id: int) -> Optional[Dict[str, Any]]:
        if not self.notify_on_save or self.notification_service is None:
            return None
        try:
            return self.notification_service.notify_event(event_id)
        except (NotificationError, StoreError) as e:
            logger.error("Notification for event %s failed: %s", event_id, e)
            return {'error': str(e)}

    def create_event(
        self,
        user_id: str,
        data: Dict[str, Any]
    ) -> Tuple[Optional[Event], Dict[str, str], Optional[Dict[str, Any]]]:
        """
        Create a new event with validation.
        Returns tuple of (created_event, errors, notification_result).
        """
        self._require_creator_permission(user_id)

        start, end, errors = self.parse_schedule(data)
        event = Event(
            title=_text(data.get('title')),
            description=_text(data.get('description')),
            start_time=start,
            end_time=end,
            location=_text(data.get('location')),
            created_by=user_id,
            criteria=self.parse_criteria(data),
        )

        errors.update(event.validate())
        if errors:
            return None, errors, None

        event.criteria = event.criteria.normalized()
        event.id = self.event_repository.create(event)
        logger.info("Event %s created by %s", event.id, user_id)

        return event, {}, self._notify(event.id)

    def update_event(
        self,
        user_id: str,
        event_id: int,
        data: Dict[str, Any]
    ) -> Tuple[Optional[Event], Dict[str, str], Optional[Dict[str, Any]]]:
        """
        Update an event; only its creator may do so.
        Fields absent from ``data`` keep their current values.
        Returns tuple of (updated_event, errors, notification_result).
        """
        event = self.get_event(event_id)
        if not event.is_created_by(user_id):
            raise PermissionDenied(NO_EDIT_PERMISSION)

        errors = {}
        if any(field in data for field in SCHEDULE_FIELDS):
            start, end, errors = self.parse_schedule(data, existing=event)
            event.start_time, event.end_time = start, end

        for field in ('title', 'description', 'location'):
            if field in data:
                setattr(event, field, _text(data.get(field)))

        if any(field in data for field in TARGET_FIELDS):
            current = event.criteria.to_dict()
            merged = {field: data[field] if field in data else current[field] for field in TARGET_FIELDS}
            event.criteria = self.parse_criteria(merged)

        errors.update(event.validate())
        if errors:
            return None, errors, None

        event.criteria = event.criteria.normalized()
        if not self.event_repository.update(event, user_id):
            raise PermissionDenied(NO_EDIT_PERMISSION)
        logger.info("Event %s updated by %s", event_id, user_id)

        return event, {}, self._notify(event_id)

    def notify(self, user_id: str, event_id: int) -> Dict[str, Any]:
        """Re-send the notification for an event; creator only."""
        event = self.get_event(event_id)
        if not event.is_created_by(user_id):
            raise PermissionDenied(NO_EDIT_PERMISSION)
        return self.notification_service.notify_event(event_id)
