import pytest

from taskboard.db.models import User
from taskboard.errors import ConflictError


def _login(client, username, password):
    return client.post('/auth/token', data={'username': username, 'password': password}, headers={'Content-Type': 'application/x-www-form-urlencoded'})


def test_register_obtain_token_and_create_task(client):
    r = client.post('/users', json={'username': 'alex', 'password': 'adelina'})
    assert r.status_code == 201, r.text
    alex = r.json()
    # Obtain token
    r = _login(client, 'alex', 'adelina')
    assert r.status_code == 200, r.text
    token = r.json()['access_token']
    assert r.json()['token_type'] == 'bearer'
    # Use token to create task
    r2 = client.post('/tasks', json={'message': 'Sample', 'assigneeId': alex['id']}, headers={'Authorization': f'Bearer {token}'})
    assert r2.status_code == 201, r2.text
    body = r2.json()
    assert body['message'] == 'Sample'
    assert body['creatorId'] == alex['id']


def test_wrong_password_is_rejected(client, existing_user):
    r = _login(client, 'alex', 'not-adelina')
    assert r.status_code == 401


def test_unknown_user_is_not_auto_registered(client):
    r = _login(client, 'nobody', 'whatever')
    assert r.status_code == 401
    r2 = client.post('/users', json={'username': 'nobody', 'password': 'whatever'})
    assert r2.status_code == 201


def test_duplicate_username_conflicts(client, existing_user):
    r = client.post('/users', json={'username': 'alex', 'password': 'other'})
    assert r.status_code == 409
    assert r.json()['detail']['code'] == 'USERNAME_TAKEN'


def test_duplicate_username_past_lookup_hits_unique_constraint(db, user_service, existing_user, monkeypatch):
    monkeypatch.setattr(user_service, 'get_by_username', lambda username: None)
    with pytest.raises(ConflictError) as exc:
        user_service.create('alex', 'other')
    assert exc.value.code == 'USERNAME_TAKEN'
    # session is usable again after the rollback
    db.expire_all()
    assert db.query(User).filter(User.username == 'alex').count() == 1


def test_get_user(client, existing_user):
    r = client.get(f'/users/{existing_user.id}')
    assert r.status_code == 200
    assert r.json() == {'id': existing_user.id, 'username': 'alex'}
    assert client.get('/users/missing').status_code == 404
