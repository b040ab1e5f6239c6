"""Flask blueprints for the event portal."""
from .account_bp import account_bp
from .admin_bp import admin_bp
from .api_bp import api_bp
from .events_bp import events_bp
