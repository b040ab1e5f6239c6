"""
Tests for the HTTP routes.
"""
import time
from datetime import datetime, timedelta, timezone

import pytest

from eventportal.live import NAMESPACE, countdown_watchers, socketio
from eventportal.models import Event

EVENT_FORM = {
    'title': 'Intramurals',
    'location': 'Oval',
    'event_date': '2999-01-10',
    'start_time': '08:00',
    'end_time': '17:00',
}


@pytest.fixture
def creator(make_user, login):
    user = make_user('prof@dmmmsu.edu.ph', role='faculty', unit='CCS', can_create_events=True)
    login(user)
    return user


class TestAuthentication:

    @pytest.mark.parametrize('path', ['/events/', '/account/', '/admin/', '/events/1'])
    def test_anonymous_user_is_sent_to_login(self, client, path):
        response = client.get(path)
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/login')


class TestEventRoutes:

    def test_dashboard_for_user_without_profile(self, client, make_user, login):
        login(make_user('new@gmail.com'))
        response = client.get('/events/')
        assert response.status_code == 200
        data = response.get_json()
        assert data['profile_required'] is True
        assert data['upcoming'] == [] and data['finished'] == []

    def test_create_event_from_form(self, client, creator, outbox):
        response = client.post('/events/create', data=dict(EVENT_FORM, target_roles=['student', 'guest']))
        assert response.status_code == 201
        data = response.get_json()
        assert data['message'] == 'Event created successfully!'
        assert data['event']['target_roles'] == ['student', 'guest']
        assert data['event']['start_time'] == '2999-01-10T00:00:00+00:00'
        assert data['notification']['message'] == 'No target users found for this event.'

    def test_create_event_validation_errors(self, client, creator):
        response = client.post('/events/create', json={'title': ''})
        assert response.status_code == 400
        assert 'title' in response.get_json()['errors']

    def test_create_without_permission(self, client, make_user, login):
        login(make_user('juan@student.dmmmsu.edu.ph', role='student', unit='CCS', year=1))
        response = client.post('/events/create', json=EVENT_FORM)
        assert response.status_code == 403
        data = response.get_json()
        assert data['error'] == 'You do not have permission to create events.'
        assert data['redirect'] == '/events/'

    def test_created_event_on_dashboard(self, client, creator):
        client.post('/events/create', json=EVENT_FORM)
        data = client.get('/events/').get_json()
        assert [e['title'] for e in data['upcoming']] == ['Intramurals']
        assert data['upcoming'][0]['status'] == 'Upcoming'
        assert data['can_create_events'] is True

    def test_status_of_finished_event(self, client, creator):
        event_id = client.post(
            '/events/create', json=dict(EVENT_FORM, event_date='2001-01-10')
        ).get_json()['event']['id']
        data = client.get(f'/events/{event_id}/status').get_json()
        assert data == {'id': event_id, 'status': 'Finished', 'remaining': None}

    def test_edit_by_other_user_is_forbidden(self, client, creator, make_user, login):
        event_id = client.post('/events/create', json=EVENT_FORM).get_json()['event']['id']
        login(make_user('other@dmmmsu.edu.ph', role='faculty', can_create_events=True))
        response = client.post(f'/events/{event_id}/edit', json={'title': 'Taken over'})
        assert response.status_code == 403

    def test_edit_by_creator(self, client, creator):
        event_id = client.post('/events/create', json=EVENT_FORM).get_json()['event']['id']
        response = client.post(f'/events/{event_id}/edit', json={'location': 'Gym'})
        assert response.status_code == 200
        assert response.get_json()['event']['location'] == 'Gym'
        assert response.get_json()['event']['title'] == 'Intramurals'

    def test_hidden_event_detail_is_not_found(self, client, creator, make_user, login):
        event_id = client.post(
            '/events/create', json=dict(EVENT_FORM, target_roles=['faculty'])
        ).get_json()['event']['id']
        login(make_user('visitor@gmail.com', role='guest', unit='GUEST'))
        assert client.get(f'/events/{event_id}').status_code == 404

    def test_notify_again(self, client, creator, make_user, outbox):
        make_user('juan@student.dmmmsu.edu.ph', role='student', unit='CCS', year=1)
        event_id = client.post(
            '/events/create', json=dict(EVENT_FORM, target_roles=['student'])
        ).get_json()['event']['id']
        response = client.post(f'/events/{event_id}/notify')
        assert response.get_json()['message'] == 'Email sent to 1 users.'
        assert len(outbox.messages) == 2


class TestAccountRoutes:

    def test_setup_state(self, client, make_user, login):
        login(make_user('visitor@gmail.com'))
        data = client.get('/account/').get_json()
        assert data['setup_required'] is True
        assert data['derived_role'] == 'guest'
        assert data['unit_locked'] is True

    def test_save_profile(self, client, make_user, login):
        login(make_user('juan@student.dmmmsu.edu.ph'))
        response = client.post('/account/', data={
            'username': 'juan', 'unit': 'CCS', 'year': '1', 'section': 'A', 'photo_consent': 'on',
        })
        assert response.status_code == 200
        profile = response.get_json()['profile']
        assert profile['user_role'] == 'student'
        assert profile['photo_consent'] is True

    def test_username_taken(self, client, make_user, login):
        make_user('juan@student.dmmmsu.edu.ph', role='student', username='juan')
        login(make_user('pedro@student.dmmmsu.edu.ph'))
        response = client.post('/account/', json={'username': 'juan'})
        assert response.status_code == 409
        assert response.get_json()['error'] == 'This username is already taken. Please choose another one.'

    def test_invalid_profile(self, client, make_user, login):
        login(make_user('prof@dmmmsu.edu.ph'))
        response = client.post('/account/', json={'username': 'prof'})
        assert response.status_code == 400
        assert response.get_json()['errors']['role'] == 'Please select a role'


class TestAdminRoutes:

    def test_non_admin_is_forbidden(self, client, make_user, login):
        login(make_user('prof@dmmmsu.edu.ph', role='faculty'))
        assert client.get('/admin/').status_code == 403

    def test_toggle_can_create_events(self, client, make_user, login, services):
        admin = make_user('admin@dmmmsu.edu.ph', role='staff', is_admin=True)
        prof = make_user('prof@dmmmsu.edu.ph', role='faculty')
        login(admin)

        listing = client.get('/admin/').get_json()['profiles']
        assert {p['id'] for p in listing} == {admin.id, prof.id}

        response = client.post(f'/admin/profiles/{prof.id}/can-create-events',
                               data={'can_create_events': 'on'})
        assert response.get_json()['message'] == 'Saved!'
        assert services.profiles.find_by_id(prof.id).can_create_events is True

        client.post(f'/admin/profiles/{prof.id}/can-create-events', json={'can_create_events': False})
        assert services.profiles.find_by_id(prof.id).can_create_events is False


class TestApiRoutes:

    def test_now_returns_utc_instant(self, client):
        data = client.get('/api/now').get_json()
        assert data['now'].endswith('+00:00')


class TestCountdown:

    def test_watch_finished_event_sends_single_status(self, app, client, creator):
        event_id = client.post(
            '/events/create', json=dict(EVENT_FORM, event_date='2001-01-10')
        ).get_json()['event']['id']

        sio_client = socketio.test_client(app, namespace=NAMESPACE, flask_test_client=client)
        assert sio_client.is_connected(NAMESPACE)
        sio_client.emit('watch', {'event_id': event_id}, namespace=NAMESPACE)

        received = sio_client.get_received(NAMESPACE)
        assert [message['name'] for message in received] == ['status']
        assert received[0]['args'][0] == {'event_id': event_id, 'status': 'Finished', 'remaining': None}
        sio_client.disconnect(namespace=NAMESPACE)

    def test_watch_unknown_event(self, app, client, creator):
        sio_client = socketio.test_client(app, namespace=NAMESPACE, flask_test_client=client)
        sio_client.emit('watch', {'event_id': 999}, namespace=NAMESPACE)
        received = sio_client.get_received(NAMESPACE)
        assert received[0]['name'] == 'error'
        assert received[0]['args'][0] == {'error': 'Event not found.'}
        sio_client.disconnect(namespace=NAMESPACE)

    def test_watching_upcoming_event_starts_ticker_released_on_disconnect(self, app, client, creator):
        event_id = client.post('/events/create', json=EVENT_FORM).get_json()['event']['id']

        sio_client = socketio.test_client(app, namespace=NAMESPACE, flask_test_client=client)
        sio_client.emit('watch', {'event_id': event_id}, namespace=NAMESPACE)
        assert sio_client.get_received(NAMESPACE)[0]['args'][0]['status'] == 'Upcoming'
        assert len(countdown_watchers) == 1
        ticker = next(iter(countdown_watchers.values()))

        sio_client.disconnect(namespace=NAMESPACE)
        assert ticker.stopped
        assert countdown_watchers == {}

    def test_unwatch_releases_ticker(self, app, client, creator):
        event_id = client.post('/events/create', json=EVENT_FORM).get_json()['event']['id']

        sio_client = socketio.test_client(app, namespace=NAMESPACE, flask_test_client=client)
        sio_client.emit('watch', {'event_id': event_id}, namespace=NAMESPACE)
        ticker = next(iter(countdown_watchers.values()))

        sio_client.emit('unwatch', namespace=NAMESPACE)
        assert ticker.stopped
        assert countdown_watchers == {}
        sio_client.disconnect(namespace=NAMESPACE)

    def test_ticker_leaves_table_when_event_finishes(self, app, client, creator, services):
        app.config['COUNTDOWN_INTERVAL'] = 0.05
        now = datetime.now(timezone.utc)
        event_id = services.events.create(Event(
            title='Flash quiz', created_by=creator.id,
            start_time=now - timedelta(minutes=1), end_time=now + timedelta(seconds=1),
        ))

        sio_client = socketio.test_client(app, namespace=NAMESPACE, flask_test_client=client)
        sio_client.emit('watch', {'event_id': event_id}, namespace=NAMESPACE)
        ticker = next(iter(countdown_watchers.values()))

        deadline = time.monotonic() + 10
        while countdown_watchers and time.monotonic() < deadline:
            time.sleep(0.05)
        assert ticker.stopped
        assert countdown_watchers == {}
        sio_client.disconnect(namespace=NAMESPACE)


class TestMalformedEventInput:

    def test_json_array_body_is_a_validation_error(self, client, creator):
        response = client.post('/events/create', json=[1])
        assert response.status_code == 400
        assert 'title' in response.get_json()['errors']

    def test_non_string_time_is_a_field_error(self, client, creator):
        response = client.post('/events/create', json=dict(EVENT_FORM, start_time=900))
        assert response.status_code == 400
        assert response.get_json()['errors'] == {
            'start_time': 'Use YYYY-MM-DD for the date and HH:MM for the time'
        }

    def test_non_string_text_fields_are_coerced(self, client, creator):
        response = client.post('/events/create', json=dict(EVENT_FORM, title=5, location=None))
        assert response.status_code == 201
        assert response.get_json()['event']['title'] == '5'
        assert response.get_json()['event']['location'] == ''

    def test_non_string_date_on_edit_is_a_field_error(self, client, creator):
        event_id = client.post('/events/create', json=EVENT_FORM).get_json()['event']['id']
        response = client.post(f'/events/{event_id}/edit', json={'event_date': 20990110})
        assert response.status_code == 400
        assert 'event_date' in response.get_json()['errors']


class TestFormEdit:

    def test_form_without_checked_roles_makes_event_public(self, client, creator, services):
        event_id = client.post(
            '/events/create', json=dict(EVENT_FORM, target_roles=['student'], target_year_levels=[1])
        ).get_json()['event']['id']

        response = client.post(f'/events/{event_id}/edit', data={'title': 'Intramurals'})
        assert response.status_code == 200
        assert services.events.find_by_id(event_id).criteria.is_public

    def test_json_edit_keeps_targeting_it_does_not_mention(self, client, creator, services):
        event_id = client.post(
            '/events/create', json=dict(EVENT_FORM, target_roles=['student'])
        ).get_json()['event']['id']

        client.post(f'/events/{event_id}/edit', json={'title': 'Intramurals 2'})
        assert services.events.find_by_id(event_id).criteria.roles == ['student']
