"""
Role derivation from institutional email addresses.
"""
from typing import Optional

from eventportal.config import GUEST_UNIT


def derive_role(email: Optional[str], student_suffix: str, employee_suffix: str) -> Optional[str]:
    """
    Map an email address to the role it implies.

    Student addresses give ``student``. Employee addresses give None
    because the user still has to choose faculty or staff. Any other
    address gives ``guest``.
    """
    address = (email or '').strip().lower()
    if address.endswith(student_suffix.lower()):
        return 'student'
    if address.endswith(employee_suffix.lower()):
        return None
    return 'guest'


def forced_unit(role: Optional[str]) -> Optional[str]:
    """Guests always carry the guest unit; other roles choose theirs."""
    return GUEST_UNIT if role == 'guest' else None
