"""
Live event countdowns over Socket.IO.

A client emits ``watch`` with an event id and receives ``status``
messages until the event settles, it emits ``unwatch``, or it
disconnects.
"""
import logging
from typing import Dict

from flask import current_app, request
from flask_socketio import SocketIO, emit

from eventportal.auth import get_current_user
from eventportal.core.event_status import compute_status, is_settled
from eventportal.core.ticker import Ticker
from eventportal.errors import NotFound
from eventportal.services import get_services

logger = logging.getLogger(__name__)

NAMESPACE = '/countdown'

socketio = SocketIO()


def status_payload(event, status):
    payload = {'event_id': event.id}
    payload.update(status.to_dict())
    return payload


def register_countdown_events(sio: SocketIO, namespace: str = NAMESPACE) -> Dict[str, Ticker]:
    """
    Attach the countdown handlers to ``sio``.
    Returns the table of active tickers keyed by session id.
    """
    watchers: Dict[str, Ticker] = {}

    def release(sid):
        ticker = watchers.pop(sid, None)
        if ticker is not None:
            ticker.stop()

    @sio.on('connect', namespace=namespace)
    def on_connect(auth=None):
        if get_current_user() is None:
            return False
        return None

    @sio.on('watch', namespace=namespace)
    def on_watch(data):
        sid = request.sid
        release(sid)

        services = get_services()
        user = get_current_user()
        try:
            event_id = int((data or {}).get('event_id'))
            event = services.event_service.get_visible_event(event_id, user.id)
        except (TypeError, ValueError, NotFound):
            emit('error', {'error': 'Event not found.'})
            return

        # Synced once per watch; each tick only reads the local clock
        clock = services.time_sync()
        status = compute_status(event.start_time, event.end_time, clock.now())
        emit('status', status_payload(event, status))
        if is_settled(status):
            return

        def tick():
            current = compute_status(event.start_time, event.end_time, clock.now())
            sio.emit('status', status_payload(event, current), to=sid, namespace=namespace)
            if is_settled(current):
                if watchers.get(sid) is ticker:
                    del watchers[sid]
                return False
            return True

        ticker = Ticker(tick, interval=current_app.config['COUNTDOWN_INTERVAL'], sleep=sio.sleep)
        watchers[sid] = ticker
        sio.start_background_task(ticker.run)
        logger.debug("Watching event %s for %s", event.id, sid)

    @sio.on('unwatch', namespace=namespace)
    def on_unwatch(data=None):
        release(request.sid)

    @sio.on('disconnect', namespace=namespace)
    def on_disconnect(reason=None):
        release(request.sid)

    return watchers


countdown_watchers = register_countdown_events(socketio)
