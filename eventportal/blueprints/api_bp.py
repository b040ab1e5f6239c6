"""
API blueprint: trusted server time and CSRF tokens for form clients.
"""
from flask import Blueprint, jsonify
from flask_wtf.csrf import generate_csrf

from eventportal.services import get_services

api_bp = Blueprint('api', __name__)


@api_bp.route('/now')
def server_now():
    """The trusted current instant, read from the database clock."""
    services = get_services()
    now = services.time_sync().now()
    return jsonify({'now': now.isoformat()})


@api_bp.route('/csrf-token')
def csrf_token():
    return jsonify({'csrf_token': generate_csrf()})
