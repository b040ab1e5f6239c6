"""Entity models for the event portal."""
from .event import Event, TargetingCriteria
from .profile import UserProfile
from .user import User
