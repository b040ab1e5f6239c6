"""
Auth helpers integrated with the host application's session-based login.
Reads user_id and email from the Flask session; signing in and out is
the host's job.
"""
from functools import wraps
from typing import Optional, NamedTuple

from flask import session, redirect, current_app


class CurrentUser(NamedTuple):
    id: str
    email: Optional[str]


def get_current_user() -> Optional[CurrentUser]:
    """
    Return the logged-in user from the session.
    Returns None if no user is logged in.
    """
    user_id = session.get('user_id')
    if not user_id:
        return None
    return CurrentUser(id=user_id, email=session.get('email'))


def login_required(f):
    """Require login - redirects to the host's login page."""
    @wraps(f)
    def decorated(*args, **kwargs):
        if get_current_user() is None:
            return redirect(current_app.config['LOGIN_URL'])
        return f(*args, **kwargs)
    return decorated
