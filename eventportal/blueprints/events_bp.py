"""
Events blueprint: dashboard, creation, author-only edits, status and
notifications.
"""
import logging

from flask import Blueprint, jsonify, request, url_for

from eventportal.auth import get_current_user, login_required
from eventportal.blueprints.helpers import LIST_FIELDS, request_data
from eventportal.services import get_services

logger = logging.getLogger(__name__)

events_bp = Blueprint('events', __name__)


# ---------------------------------------------------------------------------
# Routes - Dashboard
# ---------------------------------------------------------------------------
@events_bp.route('/', endpoint='dashboard')
@login_required
def dashboard():
    """Visible events for the current user, split into two tabs."""
    services = get_services()
    user = get_current_user()
    now = services.time_sync().now()
    return jsonify(services.event_service.dashboard(user.id, now))


@events_bp.route('/<int:event_id>')
@login_required
def event_detail(event_id):
    """Event details with its current status."""
    services = get_services()
    user = get_current_user()
    event = services.event_service.get_visible_event(event_id, user.id)
    now = services.time_sync().now()
    return jsonify({'event': services.event_service.tag(event, now, user.id)})


@events_bp.route('/<int:event_id>/status')
@login_required
def event_status(event_id):
    """Current status of an event."""
    services = get_services()
    user = get_current_user()
    event = services.event_service.get_visible_event(event_id, user.id)
    tagged = services.event_service.tag(event, services.time_sync().now(), user.id)
    return jsonify({
        'id': event.id,
        'status': tagged['status'],
        'remaining': tagged['remaining'],
    })


# ---------------------------------------------------------------------------
# Routes - Creator actions
# ---------------------------------------------------------------------------
@events_bp.route('/create', methods=['POST'])
@login_required
def create_event():
    """Create a new event."""
    services = get_services()
    user = get_current_user()
    event, errors, notification = services.event_service.create_event(user.id, request_data())
    if errors:
        return jsonify({'errors': errors}), 400
    return jsonify({
        'message': 'Event created successfully!',
        'event': event.to_dict(),
        'notification': notification,
        'redirect': url_for('events.dashboard'),
    }), 201


@events_bp.route('/<int:event_id>/edit', methods=['POST'])
@login_required
def edit_event(event_id):
    """Update event details; creator only."""
    services = get_services()
    user = get_current_user()
    data = request_data()
    if not request.is_json:
        # Unchecked checkbox groups are absent from a submitted form
        for field in LIST_FIELDS:
            data.setdefault(field, [])
    event, errors, notification = services.event_service.update_event(user.id, event_id, data)
    if errors:
        return jsonify({'errors': errors}), 400
    return jsonify({
        'message': 'Event updated successfully!',
        'event': event.to_dict(),
        'notification': notification,
        'redirect': url_for('events.dashboard'),
    })


@events_bp.route('/<int:event_id>/notify', methods=['POST'])
@login_required
def notify_event(event_id):
    """Email the event's audience again."""
    services = get_services()
    user = get_current_user()
    return jsonify(services.event_service.notify(user.id, event_id))
