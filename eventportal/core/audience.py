"""
Audience resolution for targeted events.

This is the single implementation of the targeting rules. The dashboard
uses it to filter the event list and the notification dispatcher uses it
to pick recipients, so both always agree on who an event is for.
"""
import logging
from typing import Optional, List, Dict, Iterable

from eventportal.config import AFFILIATED_ROLES
from eventportal.models.event import Event, TargetingCriteria
from eventportal.models.profile import UserProfile
from eventportal.models.user import User

logger = logging.getLogger(__name__)


def is_visible(
    profile: Optional[UserProfile],
    criteria: TargetingCriteria,
    is_creator: bool = False
) -> bool:
    """
    Decide whether a user belongs to an event's audience.

    The checks run in a fixed order and stop at the first decision:
    creators always see their events, public events are open to all,
    then role, unit (affiliated roles only), year and section (students
    only) must each match when the event restricts them.
    """
    if is_creator:
        return True

    if not criteria.roles:
        return True

    role = profile.role if profile else None
    if role not in criteria.roles:
        return False

    if role in AFFILIATED_ROLES and criteria.units:
        if profile.unit not in criteria.units:
            return False

    if role == 'student' and criteria.year_levels:
        if profile.year not in criteria.year_levels:
            return False

    if role == 'student' and criteria.sections:
        if profile.section not in criteria.sections:
            return False

    return True


def filter_visible(
    profile: Optional[UserProfile],
    events: Iterable[Event],
    user_id: Optional[str]
) -> List[Event]:
    """Keep the events the user may see, in their original order."""
    return [
        event for event in events
        if is_visible(profile, event.criteria, event.is_created_by(user_id))
    ]


def select_recipients(
    users: Iterable[User],
    profiles_by_id: Dict[str, UserProfile],
    criteria: TargetingCriteria
) -> List[User]:
    """
    Pick the users to notify about an event.

    Creators get no special treatment here. Users without a profile or
    an email address are skipped.
    """
    recipients = []
    for user in users:
        profile = profiles_by_id.get(user.id)
        if profile is None:
            logger.debug("Skipping %s: no profile", user.id)
            continue
        if not user.email:
            logger.debug("Skipping %s: no email address", user.id)
            continue
        matched = is_visible(profile, criteria, is_creator=False)
        logger.debug("User %s (role=%s, unit=%s, year=%s, section=%s) match=%s",
                     user.id, profile.role, profile.unit, profile.year, profile.section, matched)
        if matched:
            recipients.append(user)
    return recipients
