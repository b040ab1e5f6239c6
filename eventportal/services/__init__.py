"""
Service wiring. Everything here is built once by the application factory
and looked up per request through ``get_services()``.
"""
from typing import NamedTuple

from flask import current_app

from eventportal.core.time_sync import StoreClock, TimeSync
from eventportal.db import Database
from eventportal.repositories import EventRepository, ProfileRepository, UserRepository
from .event_service import EventService
from .notification_service import NotificationService
from .profile_service import ProfileService
from .transport import build_transport


class Services(NamedTuple):
    database: Database
    users: UserRepository
    profiles: ProfileRepository
    events: EventRepository
    profile_service: ProfileService
    event_service: EventService
    notification_service: NotificationService
    clock: StoreClock

    def time_sync(self) -> TimeSync:
        """A fresh clock sync against the store's time, measured once."""
        sync = TimeSync(self.clock)
        sync.sync()
        return sync


def build_services(database: Database, config, transport=None) -> Services:
    users = UserRepository(database)
    profiles = ProfileRepository(database)
    events = EventRepository(database)
    notification_service = NotificationService(
        events, users, profiles,
        transport or build_transport(config),
        timezone_name=config['EVENT_TIMEZONE'],
    )
    return Services(
        database=database,
        users=users,
        profiles=profiles,
        events=events,
        profile_service=ProfileService(
            profiles, config['STUDENT_EMAIL_SUFFIX'], config['EMPLOYEE_EMAIL_SUFFIX']
        ),
        event_service=EventService(
            events, profiles, notification_service,
            notify_on_save=config['NOTIFY_ON_SAVE'],
            timezone_name=config['EVENT_TIMEZONE'],
        ),
        notification_service=notification_service,
        clock=StoreClock(database),
    )


def get_services() -> Services:
    return current_app.extensions['eventportal']
