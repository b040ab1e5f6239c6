"""
Pytest configuration and fixtures for the event portal tests
"""
from datetime import datetime, timezone

import pytest

from eventportal import create_app
from eventportal.models import UserProfile
from eventportal.services.transport import OutboxTransport


@pytest.fixture
def outbox():
    return OutboxTransport()


@pytest.fixture
def app(tmp_path, outbox):
    """Application on a throwaway database with an in-memory mail outbox."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'DATABASE_PATH': str(tmp_path / 'portal.db'),
        'WTF_CSRF_ENABLED': False,
        'NOTIFICATION_TRANSPORT': outbox,
    })
    return app


@pytest.fixture
def services(app):
    return app.extensions['eventportal']


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(services):
    """
    Create an identity and, when a role is given, its profile.
    Extra keyword arguments become profile fields.
    """
    def _make(email, role=None, can_create_events=False, is_admin=False, **fields):
        user = services.users.create(email)
        if role is not None:
            profile = UserProfile(
                id=user.id,
                role=role,
                username=fields.pop('username', email.split('@')[0]),
                **fields
            )
            services.profiles.upsert(profile)
            if can_create_events:
                services.profiles.set_can_create_events(user.id, True)
            if is_admin:
                services.profiles.set_admin(user.id, True)
        return user
    return _make


@pytest.fixture
def login(client):
    """Write the host application's session keys for a user."""
    def _login(user):
        with client.session_transaction() as sess:
            sess['user_id'] = user.id
            sess['email'] = user.email
    return _login


@pytest.fixture
def fixed_now():
    return datetime(2026, 10, 18, 6, 0, 0, tzinfo=timezone.utc)
