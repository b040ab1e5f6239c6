"""
ProfileService class for business logic.
Handles first-time profile setup, profile edits and creator permissions.
"""
import logging
from typing import Optional, List, Dict, Any, Tuple

from eventportal.auth import CurrentUser
from eventportal.core.roles import derive_role, forced_unit
from eventportal.errors import NotFound, PermissionDenied
from eventportal.models.profile import UserProfile
from eventportal.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

TRUE_VALUES = {'1', 'true', 'on', 'yes'}


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in TRUE_VALUES


def _as_year(value: Any) -> Any:
    if value in (None, ''):
        return None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class ProfileService:
    """
    Service class for profile business logic.
    The email address decides the role of students and guests.
    """

    def __init__(
        self,
        repository: ProfileRepository,
        student_suffix: str,
        employee_suffix: str
    ):
        self.repository = repository
        self.student_suffix = student_suffix
        self.employee_suffix = employee_suffix

    def derived_role(self, email: Optional[str]) -> Optional[str]:
        return derive_role(email, self.student_suffix, self.employee_suffix)

    def get_account(self, user: CurrentUser) -> Dict[str, Any]:
        """
        Load the user's profile. A missing profile means first-time
        setup rather than an error.
        """
        profile = self.repository.find_by_id(user.id)
        derived = self.derived_role(user.email)
        return {
            'email': user.email,
            'profile': profile.to_dict() if profile else None,
            'setup_required': profile is None,
            'derived_role': derived,
            'role_locked': derived is not None,
            'unit_locked': derived == 'guest',
        }

    def save_profile(
        self,
        user: CurrentUser,
        data: Dict[str, Any]
    ) -> Tuple[Optional[UserProfile], Dict[str, str]]:
        """
        Validate and upsert the user's profile.
        Returns tuple of (saved_profile, errors).
        Raises UsernameTaken when the username belongs to someone else.
        """
        derived = self.derived_role(user.email)
        role = derived or _clean(data.get('user_role') or data.get('role'))
        unit = forced_unit(role) or _clean(data.get('unit'))

        profile = UserProfile(
            id=user.id,
            role=role,
            username=_clean(data.get('username')),
            first_name=_clean(data.get('first_name')),
            last_name=_clean(data.get('last_name')),
            unit=unit,
            year=_as_year(data.get('year')),
            section=_clean(data.get('section')),
            position=_clean(data.get('position')),
            address=_clean(data.get('address')),
            sex=_clean(data.get('sex')),
            avatar_url=_clean(data.get('avatar_url')),
            photo_consent=as_bool(data.get('photo_consent')),
            social_media_consent=as_bool(data.get('social_media_consent')),
        )

        errors = profile.validate()
        if 'role' not in errors:
            errors.update(profile.validate_for_email_role(derived))
        if errors:
            return None, errors

        saved = self.repository.upsert(profile)
        logger.info("Profile %s saved with role %s", user.id, role)
        return saved, {}

    def require_admin(self, user_id: str) -> UserProfile:
        profile = self.repository.find_by_id(user_id)
        if profile is None or not profile.is_admin:
            raise PermissionDenied('Admin access required.')
        return profile

    def list_profiles(self, admin_id: str) -> List[UserProfile]:
        self.require_admin(admin_id)
        return self.repository.find_all()

    def set_can_create_events(self, admin_id: str, profile_id: str, allowed: bool) -> UserProfile:
        """Grant or revoke event creation; admins only."""
        self.require_admin(admin_id)
        if not self.repository.set_can_create_events(profile_id, allowed):
            raise NotFound('Profile not found.')
        logger.info("Admin %s set can_create_events=%s for %s", admin_id, allowed, profile_id)
        return self.repository.find_by_id(profile_id)
