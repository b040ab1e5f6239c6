"""
NotificationService: emails an event's target audience.
"""
import logging
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple
from zoneinfo import ZoneInfo

from markupsafe import escape

from eventportal.core.audience import select_recipients
from eventportal.errors import NotFound
from eventportal.models.event import Event
from eventportal.repositories.event_repository import EventRepository
from eventportal.repositories.profile_repository import ProfileRepository
from eventportal.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

PUBLIC_EVENT_MESSAGE = 'This is a public event; no notifications were sent.'
NO_RECIPIENTS_MESSAGE = 'No target users found for this event.'


def format_local(instant: Optional[datetime], zone: ZoneInfo) -> Optional[str]:
    """Format like ``10/18/2026, 3:05:00 PM`` in the given zone."""
    if instant is None:
        return None
    local = instant.astimezone(zone)
    hour = local.hour % 12 or 12
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local:%M:%S} {local:%p}"


class NotificationService:
    """
    Computes recipients with the shared audience rules and hands the
    message to the configured transport.
    """

    def __init__(
        self,
        event_repository: EventRepository,
        user_repository: UserRepository,
        profile_repository: ProfileRepository,
        transport,
        timezone_name: str = 'Asia/Manila'
    ):
        self.event_repository = event_repository
        self.user_repository = user_repository
        self.profile_repository = profile_repository
        self.transport = transport
        self.zone = ZoneInfo(timezone_name)

    def compose(self, event: Event) -> Tuple[str, str]:
        """Build the subject and HTML body for an event."""
        subject = f"Event Notification: {event.title}"
        when = format_local(event.start_time, self.zone) or 'TBD'
        html_body = (
            f"<h1>{escape(event.title)}</h1>\n"
            f"<p><strong>Description:</strong> {escape(event.description or 'N/A')}</p>\n"
            f"<p><strong>When:</strong> {escape(when)}</p>\n"
            f"<p><strong>Where:</strong> {escape(event.location or 'TBD')}</p>\n"
        )
        return subject, html_body

    def recipients_for(self, event: Event) -> List[str]:
        """Email addresses of every user in the event's audience."""
        users = self.user_repository.find_all()
        profiles_by_id = {profile.id: profile for profile in self.profile_repository.find_all()}
        return [user.email for user in select_recipients(users, profiles_by_id, event.criteria)]

    def notify_event(self, event_id: int) -> Dict[str, Any]:
        """
        Email the audience of an event.
        Returns a dict with a human-readable message and the recipients.
        Raises NotFound if the event does not exist.
        """
        event = self.event_repository.find_by_id(event_id)
        if event is None:
            raise NotFound(f"Event with ID {event_id} not found.")

        if event.criteria.is_public:
            logger.info("Event %s is public. No notifications will be sent.", event_id)
            return {'message': PUBLIC_EVENT_MESSAGE, 'recipients': []}

        emails = self.recipients_for(event)
        if not emails:
            logger.info("No target users found for event %s", event_id)
            return {'message': NO_RECIPIENTS_MESSAGE, 'recipients': []}

        subject, html_body = self.compose(event)
        logger.info("Sending notification for event %s to %d users", event_id, len(emails))
        self.transport.send(emails, subject, html_body)

        return {'message': f"Email sent to {len(emails)} users.", 'recipients': emails}
