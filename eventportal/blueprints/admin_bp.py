"""
Admin blueprint: manage who may create events.
"""
from flask import Blueprint, jsonify

from eventportal.auth import get_current_user, login_required
from eventportal.blueprints.helpers import request_data
from eventportal.services import get_services
from eventportal.services.profile_service import as_bool

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/')
@login_required
def list_profiles():
    """All profiles ordered by last name."""
    services = get_services()
    profiles = services.profile_service.list_profiles(get_current_user().id)
    return jsonify({'profiles': [
        {
            'id': p.id,
            'username': p.username,
            'first_name': p.first_name,
            'last_name': p.last_name,
            'user_role': p.role,
            'can_create_events': p.can_create_events,
        }
        for p in profiles
    ]})


@admin_bp.route('/profiles/<profile_id>/can-create-events', methods=['POST'])
@login_required
def set_can_create_events(profile_id):
    """Grant or revoke the event creation permission."""
    services = get_services()
    allowed = as_bool(request_data().get('can_create_events'))
    profile = services.profile_service.set_can_create_events(get_current_user().id, profile_id, allowed)
    return jsonify({'message': 'Saved!', 'profile': profile.to_dict()})
