"""
tests/test_admin_create.py
"""
from __future__ import annotations

from sqlalchemy.exc import OperationalError

from database import db
from models import AdminCreationLog, User, UserCreationInfo
from services import admin_creation
from tests.conftest import ADMIN_KEY, CHROME_UA, CURL_UA, make_user

BROWSER_HEADERS = {
    'User-Agent': CHROME_UA,
    'Origin': 'http://localhost:3000',
    'Referer': 'http://localhost:3000/dashboard/admins/add',
    'X-Forwarded-For': '203.0.113.7',
}


def _payload(**overrides):
    body = {
        'name': 'Maria Souza',
        'email': 'maria@guia-tnn.com',
        'password': 'segredo-forte-123',
        'adminKey': ADMIN_KEY,
    }
    body.update(overrides)
    return body


def _attempts(app):
    with app.app_context():
        rows = AdminCreationLog.query.order_by(AdminCreationLog.created_at).all()
        return [(row.status, row.reason, row.user_id) for row in rows]


def test_create_admin_from_browser(app, client):
    rv = client.post('/api/admin/create', json=_payload(), headers=BROWSER_HEADERS)
    assert rv.status_code == 200
    body = rv.get_json()
    assert body['message'] == 'Admin created successfully'
    assert body['suspicious'] is False
    assert body['user']['email'] == 'maria@guia-tnn.com'
    assert body['user']['role'] == 'admin'
    assert 'password' not in body['user']
    assert 'password_hash' not in body['user']
    assert body['user']['creationInfo']['ipAddress'] == '203.0.113.7'
    assert body['user']['creationInfo']['origin'] == 'http://localhost:3000'

    with app.app_context():
        user = User.query.filter_by(email='maria@guia-tnn.com').one()
        assert user.check_password('segredo-forte-123')
        assert user.creation_info is not None
        assert user.creation_info.browser.startswith('Chrome')
    assert _attempts(app) == [('SUCCESS', None, body['user']['id'])]


def test_create_admin_from_tool_is_flagged_but_allowed(app, client):
    rv = client.post('/api/admin/create', json=_payload(), headers={'User-Agent': CURL_UA})
    assert rv.status_code == 200
    assert rv.get_json()['suspicious'] is True

    statuses = [status for status, _reason, _uid in _attempts(app)]
    assert sorted(statuses) == ['SUCCESS_SUSPICIOUS', 'SUSPICIOUS']


def test_wrong_key_from_curl_writes_suspicious_then_failed(app, client, monkeypatch):
    written = []
    record = admin_creation.record_creation_attempt

    def recording(email, client_info, status, reason=None, user_id=None):
        written.append((status, reason))
        return record(email, client_info, status, reason=reason, user_id=user_id)

    monkeypatch.setattr(admin_creation, 'record_creation_attempt', recording)
    rv = client.post('/api/admin/create', json=_payload(adminKey='nope'), headers={'User-Agent': CURL_UA})
    assert rv.status_code == 401
    assert rv.get_json() == {'error': 'Unauthorized'}
    assert ADMIN_KEY not in rv.get_data(as_text=True)

    assert written == [
        ('SUSPICIOUS', 'Request from API client or automation tool'),
        ('FAILED', 'Invalid admin key'),
    ]
    with app.app_context():
        assert AdminCreationLog.query.count() == 2
        assert User.query.count() == 0


def test_wrong_key_never_reaches_uniqueness_gate(app, client, monkeypatch):
    def fail_if_called(email):
        raise AssertionError('uniqueness gate reached')

    monkeypatch.setattr(admin_creation, '_find_account', fail_if_called)
    rv = client.post('/api/admin/create', json=_payload(adminKey='wrong'), headers=BROWSER_HEADERS)
    assert rv.status_code == 401
    assert _attempts(app) == [('FAILED', 'Invalid admin key', None)]


def test_duplicate_email_is_rejected(app, client):
    make_user(app, email='maria@guia-tnn.com')
    rv = client.post('/api/admin/create', json=_payload(email='  Maria@Guia-TNN.com '), headers=BROWSER_HEADERS)
    assert rv.status_code == 400
    assert rv.get_json()['error'] == 'User already exists'
    assert _attempts(app) == [('FAILED', 'User already exists', None)]
    with app.app_context():
        assert User.query.count() == 1
        assert UserCreationInfo.query.count() == 0


def test_unique_constraint_race_is_reported_as_duplicate(app, client, monkeypatch):
    make_user(app, email='maria@guia-tnn.com')
    # Simulate a concurrent insert landing after the pre-check.
    monkeypatch.setattr(admin_creation, '_find_account', lambda email: None)

    rv = client.post('/api/admin/create', json=_payload(), headers=BROWSER_HEADERS)
    assert rv.status_code == 400
    assert rv.get_json()['error'] == 'User already exists'
    assert _attempts(app) == [('FAILED', 'User already exists', None)]
    with app.app_context():
        assert User.query.count() == 1


def test_missing_fields_are_rejected_without_audit(app, client):
    rv = client.post('/api/admin/create', json=_payload(adminKey=''), headers={'User-Agent': CURL_UA})
    assert rv.status_code == 400
    assert 'Missing required fields' in rv.get_json()['error']
    assert _attempts(app) == []


def test_malformed_json_is_rejected_without_audit(app, client):
    rv = client.post(
        '/api/admin/create',
        data='{"name": ',
        content_type='application/json',
        headers=BROWSER_HEADERS,
    )
    assert rv.status_code == 400
    assert rv.get_json() == {'error': 'Invalid JSON format in request body'}
    assert _attempts(app) == []


def test_non_object_json_is_rejected(app, client):
    rv = client.post('/api/admin/create', json=['not', 'an', 'object'], headers=BROWSER_HEADERS)
    assert rv.status_code == 400
    assert _attempts(app) == []


def test_empty_configured_key_never_matches(app, client):
    app.config['ADMIN_CREATION_KEY'] = ''
    rv = client.post('/api/admin/create', json=_payload(adminKey=' '), headers=BROWSER_HEADERS)
    assert rv.status_code == 400  # blank key is a missing field
    rv = client.post('/api/admin/create', json=_payload(adminKey='anything'), headers=BROWSER_HEADERS)
    assert rv.status_code == 401


def test_blocking_toggle_rejects_suspicious_clients(app, client):
    app.config['BLOCK_SUSPICIOUS_CLIENTS'] = True
    rv = client.post('/api/admin/create', json=_payload(), headers={'User-Agent': CURL_UA})
    assert rv.status_code == 403
    assert rv.get_json() == {'error': 'Admin creation not allowed from this client'}
    assert _attempts(app) == [('SUSPICIOUS', 'Request from API client or automation tool', None)]
    with app.app_context():
        assert User.query.count() == 0

    rv = client.post('/api/admin/create', json=_payload(), headers=BROWSER_HEADERS)
    assert rv.status_code == 200


def test_audit_failure_does_not_change_outcome(app, client, monkeypatch):
    monkeypatch.setattr(admin_creation, 'record_creation_attempt', lambda *a, **kw: None)
    rv = client.post('/api/admin/create', json=_payload(), headers=BROWSER_HEADERS)
    assert rv.status_code == 200
    with app.app_context():
        assert User.query.count() == 1


def test_persistence_failure_returns_500(app, client, monkeypatch):
    original_commit = db.session.commit
    calls = {'n': 0}

    def flaky_commit():
        calls['n'] += 1
        raise OperationalError('INSERT', {}, Exception('database is locked'))

    monkeypatch.setattr(admin_creation.db.session, 'commit', flaky_commit)
    rv = client.post('/api/admin/create', json=_payload(), headers=BROWSER_HEADERS)
    monkeypatch.setattr(admin_creation.db.session, 'commit', original_commit)

    assert rv.status_code == 500
    body = rv.get_json()
    assert body == {'error': 'Failed to create admin'}
    assert 'segredo' not in rv.get_data(as_text=True)
    assert calls['n'] >= 1
    with app.app_context():
        assert User.query.count() == 0
