"""
Event entity and its audience targeting criteria.
"""
import json
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Iterable

from eventportal.config import (
    VALID_ROLES, AFFILIATED_ROLES, VALID_UNITS, VALID_YEAR_LEVELS, VALID_SECTIONS
)

TITLE_MAX_LENGTH = 200
LOCATION_MAX_LENGTH = 200


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_instant(value: Any) -> Optional[datetime]:
    """
    Parse a stored or submitted instant into an aware UTC datetime.
    Naive values are taken to be UTC. Empty values give None.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        instant = value
    else:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        instant = datetime.fromisoformat(text)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def format_instant(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _coerce_year(value: Any) -> Any:
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def _unique(values: Optional[Iterable[Any]]) -> List[Any]:
    if not values:
        return []
    if isinstance(values, (str, int)):
        values = [values]
    out = []
    for value in values:
        if value in (None, '') or value in out:
            continue
        out.append(value)
    return out


def _load_list(raw: Any) -> List[Any]:
    """Read a targeting column that may be NULL, a JSON string or a list."""
    if raw is None or raw == '':
        return []
    if isinstance(raw, str):
        return json.loads(raw) or []
    return list(raw)


class TargetingCriteria:
    """
    Four independent audience filters attached to an event.
    An empty filter places no restriction at its level, and an empty
    role filter makes the event public.
    """

    def __init__(
        self,
        roles: Optional[Iterable[str]] = None,
        units: Optional[Iterable[str]] = None,
        year_levels: Optional[Iterable[Any]] = None,
        sections: Optional[Iterable[str]] = None
    ):
        self.roles = _unique(roles)
        self.units = _unique(units)
        self.year_levels = [_coerce_year(y) for y in _unique(year_levels)]
        self.sections = _unique(sections)

    @property
    def is_public(self) -> bool:
        return not self.roles

    def validate(self) -> Dict[str, str]:
        """
        Validate every dimension against the known enumerations.
        Returns a dictionary of field names to error messages.
        """
        errors = {}
        checks = (
            ('target_roles', self.roles, VALID_ROLES, 'role'),
            ('target_units', self.units, VALID_UNITS, 'unit'),
            ('target_year_levels', self.year_levels, VALID_YEAR_LEVELS, 'year level'),
            ('target_sections', self.sections, VALID_SECTIONS, 'section'),
        )
        for field, values, allowed, label in checks:
            unknown = [str(v) for v in values if v not in allowed]
            if unknown:
                errors[field] = f"Unknown {label}(s): {', '.join(unknown)}"
        return errors

    def normalized(self) -> 'TargetingCriteria':
        """
        Drop dimensions that can never apply to the targeted roles:
        units need an affiliated role, years and sections need students,
        and a public event keeps no filters at all.
        """
        if self.is_public:
            return TargetingCriteria()
        has_affiliated = any(role in AFFILIATED_ROLES for role in self.roles)
        has_students = 'student' in self.roles
        return TargetingCriteria(
            roles=self.roles,
            units=self.units if has_affiliated else None,
            year_levels=self.year_levels if has_students else None,
            sections=self.sections if has_students else None,
        )

    def to_dict(self) -> Dict[str, Optional[List[Any]]]:
        """Convert to API form; empty filters become None."""
        return {
            'target_roles': self.roles or None,
            'target_units': self.units or None,
            'target_year_levels': self.year_levels or None,
            'target_sections': self.sections or None,
        }

    def to_row(self) -> Dict[str, Optional[str]]:
        """Convert to database columns (JSON text or NULL)."""
        return {
            key: json.dumps(value) if value else None
            for key, value in self.to_dict().items()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TargetingCriteria':
        return cls(
            roles=_load_list(data.get('target_roles')),
            units=_load_list(data.get('target_units')),
            year_levels=_load_list(data.get('target_year_levels')),
            sections=_load_list(data.get('target_sections')),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TargetingCriteria):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"TargetingCriteria(roles={self.roles}, units={self.units}, "
            f"year_levels={self.year_levels}, sections={self.sections})"
        )


class Event:
    """
    Entity class representing a scheduled event.
    """

    def __init__(
        self,
        title: str,
        created_by: Optional[str],
        description: str = '',
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        location: str = '',
        criteria: Optional[TargetingCriteria] = None,
        id: Optional[int] = None,
        created_at: Optional[str] = None,
        updated_at: Optional[str] = None
    ):
        self.id = id
        self.title = title
        self.description = description
        self.start_time = parse_instant(start_time)
        self.end_time = parse_instant(end_time)
        self.location = location
        self.created_by = created_by
        self.criteria = criteria or TargetingCriteria()

        now = utcnow().isoformat()
        self.created_at = created_at or now
        self.updated_at = updated_at or now

    def validate(self) -> Dict[str, str]:
        """
        Validate the event data, including its targeting criteria.
        Empty dictionary means validation passed.
        """
        errors = {}

        if not self.title or not self.title.strip():
            errors['title'] = "Event title is required"
        elif len(self.title) > TITLE_MAX_LENGTH:
            errors['title'] = f"Event title must be {TITLE_MAX_LENGTH} characters or less"

        if self.location and len(self.location) > LOCATION_MAX_LENGTH:
            errors['location'] = f"Location must be {LOCATION_MAX_LENGTH} characters or less"

        if self.start_time and self.end_time and self.end_time <= self.start_time:
            errors['end_time'] = "Closing time must be after the starting time"

        errors.update(self.criteria.validate())
        return errors

    def is_created_by(self, user_id: Optional[str]) -> bool:
        return user_id is not None and self.created_by == user_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert the Event to a dictionary."""
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'start_time': format_instant(self.start_time),
            'end_time': format_instant(self.end_time),
            'location': self.location,
            'created_by': self.created_by,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
        data.update(self.criteria.to_dict())
        return data

    def to_row(self) -> Dict[str, Any]:
        """Convert the Event to database columns."""
        data = self.to_dict()
        data.update(self.criteria.to_row())
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Event':
        """Create an Event from a dictionary (database row)."""
        return cls(
            id=data.get('id'),
            title=data.get('title', ''),
            description=data.get('description') or '',
            start_time=data.get('start_time'),
            end_time=data.get('end_time'),
            location=data.get('location') or '',
            created_by=data.get('created_by'),
            criteria=TargetingCriteria.from_dict(data),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
        )

    def __repr__(self) -> str:
        return f"Event(id={self.id}, title='{self.title}', start={format_instant(self.start_time)})"
