"""Repositories package for the event portal."""
from .event_repository import EventRepository
from .profile_repository import ProfileRepository
from .user_repository import UserRepository
