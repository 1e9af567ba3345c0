from lawoffice.auth import jwt_handler
from lawoffice.auth.sessions import MemorySessionStore
from lawoffice.core import config


def test_register_creates_user(client, storage) -> None:
    response = client.post('/api/auth/register', json={'username': '  alice ', 'password': 'pw123'})

    assert response.status_code == 200
    assert response.json() == {'message': 'User created successfully'}
    user = storage.get_user_by_username('alice')
    assert user is not None
    assert user.hashed_password != 'pw123'


def test_register_rejects_duplicate_username(client) -> None:
    first = client.post('/api/auth/register', json={'username': 'alice', 'password': 'pw123'})
    second = client.post('/api/auth/register', json={'username': 'alice', 'password': 'other-pw'})

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json() == {'message': 'Username already exists'}


def test_register_rejects_short_password(client) -> None:
    response = client.post('/api/auth/register', json={'username': 'alice', 'password': 'pw'})

    assert response.status_code == 400
    assert response.json()['message'] == 'Invalid request data'


def test_login_returns_token_for_valid_credentials(client, login_as) -> None:
    token = login_as(client)

    payload = jwt_handler.decode_access_token(token)
    assert payload['username'] == 'alice'
    assert payload['sub'] == str(payload['id'])


def test_login_with_wrong_password_returns_401(client) -> None:
    client.post('/api/auth/register', json={'username': 'alice', 'password': 'pw123'})

    response = client.post('/api/auth/login', json={'username': 'alice', 'password': 'wrong-pw'})

    assert response.status_code == 401
    assert response.json() == {'message': 'Invalid credentials'}


def test_login_with_unknown_user_returns_401(client) -> None:
    response = client.post('/api/auth/login', json={'username': 'nobody', 'password': 'pw123'})

    assert response.status_code == 401


def test_current_user_returns_decoded_identity(client, auth_headers, storage) -> None:
    response = client.get('/api/auth/user', headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {'id': storage.get_user_by_username('alice').id, 'username': 'alice'}


def test_current_user_without_token_returns_401(client) -> None:
    response = client.get('/api/auth/user')

    assert response.status_code == 401
    assert response.json() == {'message': 'No token provided'}
    assert response.headers['www-authenticate'] == 'Bearer'


def test_current_user_with_garbage_token_returns_401(client) -> None:
    response = client.get('/api/auth/user', headers={'Authorization': 'Bearer not-a-jwt'})

    assert response.status_code == 401
    assert response.json() == {'message': 'Invalid token'}


def test_current_user_with_expired_token_returns_401(client) -> None:
    token = jwt_handler.create_access_token(user_id=1, username='alice', expires_minutes=-1)

    response = client.get('/api/auth/user', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401


def test_change_password_rotates_credentials(client, auth_headers) -> None:
    response = client.post(
        '/api/auth/change-password',
        json={'currentPassword': 'pw123', 'newPassword': 'new-secret'},
        headers=auth_headers,
    )

    assert response.status_code == 200
    old_login = client.post('/api/auth/login', json={'username': 'alice', 'password': 'pw123'})
    new_login = client.post('/api/auth/login', json={'username': 'alice', 'password': 'new-secret'})
    assert old_login.status_code == 401
    assert new_login.status_code == 200


def test_change_password_rejects_wrong_current_password(client, auth_headers) -> None:
    response = client.post(
        '/api/auth/change-password',
        json={'currentPassword': 'not-it', 'newPassword': 'new-secret'},
        headers=auth_headers,
    )

    assert response.status_code == 401
    assert response.json() == {'message': 'Current password is incorrect'}


def test_change_password_requires_authentication(client) -> None:
    response = client.post(
        '/api/auth/change-password',
        json={'currentPassword': 'pw123', 'newPassword': 'new-secret'},
    )

    assert response.status_code == 401


def test_session_login_sets_signed_cookie(make_client) -> None:
    client = make_client(auth_backend='session')
    client.post('/api/auth/register', json={'username': 'alice', 'password': 'pw123'})

    response = client.post('/api/login', json={'username': 'alice', 'password': 'pw123'})

    assert response.status_code == 200
    assert response.json() == {'message': 'Logged in successfully'}
    set_cookie = response.headers['set-cookie']
    assert set_cookie.startswith(f'{config.SESSION_COOKIE_NAME}=')
    assert 'httponly' in set_cookie.lower()


def test_session_login_rejects_bad_credentials(make_client) -> None:
    client = make_client(auth_backend='session')
    client.post('/api/auth/register', json={'username': 'alice', 'password': 'pw123'})

    response = client.post('/api/login', json={'username': 'alice', 'password': 'nope!'})

    assert response.status_code == 401
    assert config.SESSION_COOKIE_NAME not in response.cookies


def test_session_backend_authorizes_until_logout(make_client) -> None:
    store = MemorySessionStore()
    client = make_client(auth_backend='session', session_store=store)
    client.post('/api/auth/register', json={'username': 'alice', 'password': 'pw123'})
    client.post('/api/login', json={'username': 'alice', 'password': 'pw123'})
    cookie_value = client.cookies.get(config.SESSION_COOKIE_NAME)

    assert client.get('/api/auth/user').json()['username'] == 'alice'
    assert len(store) == 1

    logout = client.post('/api/logout')
    assert logout.status_code == 200
    assert len(store) == 0

    # Replaying the old cookie must not work once the session is gone.
    client.cookies.clear()
    client.cookies.set(config.SESSION_COOKIE_NAME, cookie_value)
    response = client.get('/api/auth/user')
    assert response.status_code == 401
    assert response.json() == {'message': 'Not authenticated'}


def test_session_backend_ignores_bearer_tokens(make_client, login_as) -> None:
    client = make_client(auth_backend='session')
    token = login_as(client)

    response = client.get('/api/auth/user', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401


def test_session_backend_rejects_tampered_cookie(make_client) -> None:
    client = make_client(auth_backend='session')
    client.cookies.set(config.SESSION_COOKIE_NAME, 'forged.value')

    response = client.get('/api/auth/user')

    assert response.status_code == 401


def test_logout_does_not_revoke_bearer_tokens(client, auth_headers) -> None:
    client.post('/api/logout', headers=auth_headers)

    response = client.get('/api/auth/user', headers=auth_headers)

    assert response.status_code == 200


def test_token_login_is_logged(client, caplog) -> None:
    client.post('/api/auth/register', json={'username': 'alice', 'password': 'pw123'})

    with caplog.at_level('INFO', logger='lawoffice.routes.auth_routes'):
        client.post('/api/auth/login', json={'username': 'alice', 'password': 'pw123'})

    assert 'Token issued for user alice' in caplog.text
    assert 'pw123' not in caplog.text


def test_session_login_is_disabled_under_bearer_backend(make_client) -> None:
    store = MemorySessionStore()
    client = make_client(auth_backend='bearer', session_store=store)
    client.post('/api/auth/register', json={'username': 'alice', 'password': 'pw123'})

    response = client.post('/api/login', json={'username': 'alice', 'password': 'pw123'})

    assert response.status_code == 404
    assert response.json() == {'message': 'Session login is disabled'}
    assert len(store) == 0
    assert config.SESSION_COOKIE_NAME not in response.cookies
