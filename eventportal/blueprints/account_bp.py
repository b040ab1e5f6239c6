"""
Account blueprint: view and complete the current user's profile.
"""
from flask import Blueprint, jsonify

from eventportal.auth import get_current_user, login_required
from eventportal.blueprints.helpers import request_data
from eventportal.services import get_services

account_bp = Blueprint('account', __name__)


@account_bp.route('/', methods=['GET'])
@login_required
def view_account():
    """Profile, or the first-time setup state when none exists yet."""
    services = get_services()
    return jsonify(services.profile_service.get_account(get_current_user()))


@account_bp.route('/', methods=['POST'])
@login_required
def update_account():
    """Create or update the profile."""
    services = get_services()
    profile, errors = services.profile_service.save_profile(get_current_user(), request_data())
    if errors:
        return jsonify({'errors': errors}), 400
    return jsonify({'message': 'Profile updated successfully!', 'profile': profile.to_dict()})
