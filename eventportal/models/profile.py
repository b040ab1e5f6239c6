"""
UserProfile entity class with validation methods.
Represents the role-specific profile a user completes after sign-up.
"""
import re
from typing import Optional, Dict, Any

from eventportal.config import (
    VALID_ROLES, EMPLOYEE_ROLES, VALID_UNITS, GUEST_UNIT,
    VALID_YEAR_LEVELS, VALID_SECTIONS, VALID_SEX_OPTIONS
)
from eventportal.models.event import utcnow

USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9_.-]{3,30}$')


class UserProfile:
    """
    Entity class representing a user's profile.

    The role decides which of unit, year, section and position are
    meaningful. Values outside the role's domain may be present but are
    neither validated nor used for audience targeting.
    """

    def __init__(
        self,
        id: str,
        role: Optional[str] = None,
        username: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        unit: Optional[str] = None,
        year: Optional[int] = None,
        section: Optional[str] = None,
        position: Optional[str] = None,
        address: Optional[str] = None,
        sex: Optional[str] = None,
        avatar_url: Optional[str] = None,
        photo_consent: bool = False,
        social_media_consent: bool = False,
        can_create_events: bool = False,
        is_admin: bool = False,
        updated_at: Optional[str] = None
    ):
        self.id = id
        self.role = role
        self.username = username
        self.first_name = first_name
        self.last_name = last_name
        self.unit = unit
        self.year = year
        self.section = section
        self.position = position
        self.address = address
        self.sex = sex
        self.avatar_url = avatar_url
        self.photo_consent = photo_consent
        self.social_media_consent = social_media_consent
        self.can_create_events = can_create_events
        self.is_admin = is_admin
        self.updated_at = updated_at or utcnow().isoformat()

    @property
    def is_student(self) -> bool:
        return self.role == 'student'

    @property
    def is_faculty(self) -> bool:
        return self.role == 'faculty'

    def validate(self) -> Dict[str, str]:
        """
        Validate the profile data.
        Returns a dictionary of field names to error messages.
        """
        errors = {}

        if not self.username or not self.username.strip():
            errors['username'] = "Username is required"
        elif not USERNAME_PATTERN.match(self.username):
            errors['username'] = "Username must be 3-30 letters, numbers, dots, dashes or underscores"

        if not self.role:
            errors['role'] = "Please select a role"
        elif self.role not in VALID_ROLES:
            errors['role'] = "Please select a valid role"

        if self.role == 'guest':
            if self.unit not in (None, GUEST_UNIT):
                errors['unit'] = "Guests cannot belong to an institutional unit"
        elif self.unit is not None and self.unit not in VALID_UNITS:
            errors['unit'] = "Please select a valid unit"

        if self.is_student:
            if self.year is not None and self.year not in VALID_YEAR_LEVELS:
                errors['year'] = "Year level must be between 1 and 4"
            if self.section is not None and self.section not in VALID_SECTIONS:
                errors['section'] = "Please select a valid section"

        if self.sex is not None and self.sex not in VALID_SEX_OPTIONS:
            errors['sex'] = "Please select a valid option"

        return errors

    def validate_for_email_role(self, derived_role: Optional[str]) -> Dict[str, str]:
        """
        Check the chosen role against the role derived from the email.
        Students and guests get their role from the address; employees
        must choose between faculty and staff.
        """
        if derived_role is None and self.role not in EMPLOYEE_ROLES:
            return {'role': "Please select either faculty or staff"}
        if derived_role is not None and self.role != derived_role:
            return {'role': f"Your email address registers you as {derived_role}"}
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert the UserProfile to a dictionary."""
        return {
            'id': self.id,
            'username': self.username,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'user_role': self.role,
            'unit': self.unit,
            'year': self.year,
            'section': self.section,
            'position': self.position,
            'address': self.address,
            'sex': self.sex,
            'avatar_url': self.avatar_url,
            'photo_consent': bool(self.photo_consent),
            'social_media_consent': bool(self.social_media_consent),
            'can_create_events': bool(self.can_create_events),
            'is_admin': bool(self.is_admin),
            'updated_at': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserProfile':
        """Create a UserProfile from a dictionary (database row)."""
        year = data.get('year')
        if isinstance(year, str) and year.strip().isdigit():
            year = int(year)
        return cls(
            id=data.get('id'),
            username=data.get('username'),
            first_name=data.get('first_name'),
            last_name=data.get('last_name'),
            role=data.get('user_role'),
            unit=data.get('unit') or None,
            year=year or None,
            section=data.get('section') or None,
            position=data.get('position') or None,
            address=data.get('address'),
            sex=data.get('sex') or None,
            avatar_url=data.get('avatar_url'),
            photo_consent=bool(data.get('photo_consent', 0)),
            social_media_consent=bool(data.get('social_media_consent', 0)),
            can_create_events=bool(data.get('can_create_events', 0)),
            is_admin=bool(data.get('is_admin', 0)),
            updated_at=data.get('updated_at'),
        )

    def __repr__(self) -> str:
        return f"UserProfile(id={self.id}, username='{self.username}', role='{self.role}')"
