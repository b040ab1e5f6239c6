"""
UserRepository: read access to the identity store's user list.
"""
import uuid
from typing import Optional, List

from eventportal.models.user import User
from eventportal.repositories.base import Repository


class UserRepository(Repository):

    def create(self, email: str, user_id: Optional[str] = None) -> User:
        """Record an identity created by the host's sign-up flow."""
        user = User(id=user_id or uuid.uuid4().hex, email=email.strip().lower())
        with self._connection() as conn:
            conn.execute("INSERT INTO users (id, email) VALUES (?, ?)", (user.id, user.email))
            conn.commit()
        return user

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._connection() as conn:
            row = conn.execute("SELECT id, email FROM users WHERE id = ?", (user_id,)).fetchone()
            return User.from_dict(dict(row)) if row else None

    def find_by_email(self, email: str) -> Optional[User]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT id, email FROM users WHERE email = ?", (email.strip().lower(),)
            ).fetchone()
            return User.from_dict(dict(row)) if row else None

    def find_all(self) -> List[User]:
        with self._connection() as conn:
            rows = conn.execute("SELECT id, email FROM users ORDER BY created_at ASC, rowid ASC").fetchall()
            return [User.from_dict(dict(row)) for row in rows]
