"""
Maps the portal's error taxonomy onto JSON responses.
"""
import logging

from flask import jsonify, url_for

from eventportal.errors import (
    NotFound, PermissionDenied, ConstraintViolation, StoreError, NotificationError
)

logger = logging.getLogger(__name__)


def register_error_handlers(app):

    @app.errorhandler(NotFound)
    def not_found(error):
        return jsonify({'error': str(error)}), 404

    @app.errorhandler(PermissionDenied)
    def permission_denied(error):
        return jsonify({'error': str(error), 'redirect': url_for('events.dashboard')}), 403

    @app.errorhandler(ConstraintViolation)
    def constraint_violation(error):
        return jsonify({'error': str(error), 'constraint': error.constraint}), 409

    @app.errorhandler(StoreError)
    def store_error(error):
        logger.exception("Store error: %s", error)
        return jsonify({'error': str(error)}), 500

    @app.errorhandler(NotificationError)
    def notification_error(error):
        return jsonify({'error': str(error)}), 502

    @app.errorhandler(404)
    def page_not_found(error):
        return jsonify({'error': 'Not found.'}), 404
