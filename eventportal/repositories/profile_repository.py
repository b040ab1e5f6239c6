"""
ProfileRepository class for SQLite CRUD operations.
Handles all database interactions for user profiles.
"""
from typing import Optional, List

from eventportal.errors import UsernameTaken
from eventportal.models.profile import UserProfile
from eventportal.models.event import utcnow
from eventportal.repositories.base import Repository

# Columns the profile owner may write; permissions are managed separately
OWNER_COLUMNS = [
    'username', 'first_name', 'last_name', 'user_role', 'unit', 'year',
    'section', 'position', 'address', 'sex', 'avatar_url',
    'photo_consent', 'social_media_consent', 'updated_at',
]


class ProfileRepository(Repository):
    """
    Repository class for UserProfile database operations.
    """

    def find_by_id(self, profile_id: str) -> Optional[UserProfile]:
        """Find a profile by its user ID."""
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM profiles WHERE id = ?", (profile_id,)).fetchone()
            return UserProfile.from_dict(dict(row)) if row else None

    def find_all(self) -> List[UserProfile]:
        """Find all profiles ordered by last name."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM profiles ORDER BY last_name IS NULL, last_name ASC, first_name ASC"
            ).fetchall()
            return [UserProfile.from_dict(dict(row)) for row in rows]

    def upsert(self, profile: UserProfile) -> UserProfile:
        """
        Insert or update the owner-editable fields of a profile.
        Raises UsernameTaken if another profile already uses the username.
        """
        profile.updated_at = utcnow().isoformat()
        data = profile.to_dict()
        values = [data['id']] + [data[column] for column in OWNER_COLUMNS]

        columns = ', '.join(['id'] + OWNER_COLUMNS)
        placeholders = ', '.join(['?' for _ in values])
        updates = ', '.join([f"{column} = excluded.{column}" for column in OWNER_COLUMNS])

        with self._connection() as conn:
            conn.execute("BEGIN IMMEDIATE")
            taken = conn.execute(
                "SELECT 1 FROM profiles WHERE username = ? AND id != ?",
                (profile.username, profile.id)
            ).fetchone()
            if taken:
                conn.rollback()
                raise UsernameTaken()

            conn.execute(
                f"INSERT INTO profiles ({columns}) VALUES ({placeholders}) "
                f"ON CONFLICT(id) DO UPDATE SET {updates}",
                values
            )
            conn.commit()
        return self.find_by_id(profile.id)

    def set_can_create_events(self, profile_id: str, allowed: bool) -> bool:
        """
        Grant or revoke event creation for a profile.
        Returns True if the profile exists.
        """
        with self._connection() as conn:
            cursor = conn.execute(
                "UPDATE profiles SET can_create_events = ? WHERE id = ?",
                (1 if allowed else 0, profile_id)
            )
            conn.commit()
            return cursor.rowcount > 0

    def set_admin(self, profile_id: str, is_admin: bool) -> bool:
        """Mark a profile as administrator. Returns True if it exists."""
        with self._connection() as conn:
            cursor = conn.execute(
                "UPDATE profiles SET is_admin = ? WHERE id = ?",
                (1 if is_admin else 0, profile_id)
            )
            conn.commit()
            return cursor.rowcount > 0
