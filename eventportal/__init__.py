"""
Event Attendance Portal
Application factory for the institution's event portal: role-based
profiles, audience-targeted events, live status and email notifications.
"""
import logging

import click
from flask import Flask, request
from flask_wtf.csrf import CSRFProtect

from eventportal import config
from eventportal.blueprints import account_bp, admin_bp, api_bp, events_bp
from eventportal.blueprints.errors import register_error_handlers
from eventportal.db import Database
from eventportal.live import socketio
from eventportal.services import build_services, get_services

__version__ = '0.1.0'

csrf = CSRFProtect()


def configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger('eventportal').setLevel(level)


def create_app(test_config=None) -> Flask:
    """
    Build the Flask application.

    ``test_config`` overrides any setting; a ``NOTIFICATION_TRANSPORT``
    entry replaces the mail transport.
    """
    app = Flask(__name__)
    app.config.from_mapping(config.as_mapping())
    if test_config:
        app.config.update(test_config)

    configure_logging(app)

    # Store client and services are built once and shared by all requests
    database = Database(app.config['DATABASE_PATH'])
    database.init_schema()
    app.extensions['eventportal'] = build_services(
        database, app.config, transport=app.config.get('NOTIFICATION_TRANSPORT')
    )

    csrf.init_app(app)

    @app.before_request
    def _protect_form_posts():
        # JSON posts are exempt
        if not app.config['WTF_CSRF_ENABLED']:
            return
        if request.method == 'POST' and not request.is_json:
            csrf.protect()

    app.register_blueprint(events_bp, url_prefix='/events')
    app.register_blueprint(account_bp, url_prefix='/account')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(api_bp, url_prefix='/api')
    register_error_handlers(app)

    socketio.init_app(app, async_mode=app.config.get('SOCKETIO_ASYNC_MODE', 'threading'))

    register_commands(app)
    return app


def register_commands(app: Flask) -> None:

    @app.cli.command('init-db')
    def init_db_command():
        """Create the portal tables."""
        get_services().database.init_schema()
        click.echo('Events tables initialized successfully!')

    @app.cli.command('add-user')
    @click.argument('email')
    def add_user_command(email):
        """Record an identity created by the host's sign-up flow."""
        user = get_services().users.create(email)
        click.echo(f'Added {user.email} as {user.id}')

    @app.cli.command('grant-admin')
    @click.argument('email')
    def grant_admin_command(email):
        """Make the profile of EMAIL an administrator."""
        services = get_services()
        user = services.users.find_by_email(email)
        if user is None or not services.profiles.set_admin(user.id, True):
            raise click.ClickException(f'No profile found for {email}')
        click.echo(f'{email} is now an administrator')
