"""
Identity record as listed by the identity store.
"""
from typing import Optional, Dict, Any


class User:
    """An authenticated identity: an opaque id and an email address."""

    def __init__(self, id: str, email: Optional[str]):
        self.id = id
        self.email = email

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'email': self.email}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(id=data.get('id'), email=data.get('email'))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return (self.id, self.email) == (other.id, other.email)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email='{self.email}')"
