# pet_ledger/api/auth/test_auth_routes.py
import jwt
import pytest
from flask_jwt_extended import decode_token


def _unsigned_id_token(payload):
    return jwt.encode(payload, 'identity-provider-signing-key-not-checked-in-dev', algorithm='HS256')


def test_session_exchanges_id_token(client, app):
    response = client.post('/api/auth/session', json={"id_token": _unsigned_id_token({"user_id": "abc123"})})

    assert response.status_code == 200
    body = response.get_json()
    assert body['user_id'] == 'abc123'
    with app.app_context():
        assert decode_token(body['access_token'])['sub'] == 'abc123'
        assert decode_token(body['refresh_token'])['type'] == 'refresh'


@pytest.mark.parametrize('payload, expected', [
    ({"sub": "from-sub"}, 'from-sub'),
    ({"uid": "from-uid"}, 'from-uid'),
    ({"email": "nobody@example.com"}, 'dev-user'),
])
def test_session_user_id_claims_in_development(client, payload, expected):
    response = client.post('/api/auth/session', json={"id_token": _unsigned_id_token(payload)})
    assert response.get_json()['user_id'] == expected


def test_session_with_undecodable_token_uses_fallback_user(client):
    response = client.post('/api/auth/session', json={"id_token": "not-a-jwt"})
    assert response.status_code == 200
    assert response.get_json()['user_id'] == 'dev-user'


def test_session_requires_id_token(client):
    response = client.post('/api/auth/session', json={})
    assert response.status_code == 400
    assert 'id_token' in response.get_json()['details']


def test_session_rejected_when_verification_fails(client, app, monkeypatch):
    from firebase_admin import auth as firebase_auth

    def reject(token):
        raise ValueError("bad token")

    app.config['VERIFY_ID_TOKENS'] = True
    monkeypatch.setattr(firebase_auth, 'verify_id_token', reject)

    response = client.post('/api/auth/session', json={"id_token": "whatever"})
    assert response.status_code == 401
    assert response.get_json()['error_code'] == 'INVALID_ID_TOKEN'


def test_refresh_token(client, refresh_token, auth_headers):
    response = client.post('/api/auth/token/refresh', headers={"Authorization": f"Bearer {refresh_token}"})
    assert response.status_code == 200
    assert response.get_json()['access_token']

    # an access token cannot be used to refresh
    response = client.post('/api/auth/token/refresh', headers=auth_headers)
    assert response.status_code == 401
    assert response.get_json()['error_code'] == 'WRONG_TOKEN_TYPE'


def test_logout_revokes_both_tokens(client, auth_headers, refresh_token):
    access_token = auth_headers['Authorization'].split(' ', 1)[1]
    assert client.get('/api/animals', headers=auth_headers).status_code == 200

    response = client.post('/api/auth/logout', json={"access_token": access_token, "refresh_token": refresh_token})
    assert response.status_code == 200

    response = client.get('/api/animals', headers=auth_headers)
    assert response.status_code == 401
    assert response.get_json()['error_code'] == 'TOKEN_REVOKED'

    response = client.post('/api/auth/token/refresh', headers={"Authorization": f"Bearer {refresh_token}"})
    assert response.status_code == 401


def test_logout_validation(client):
    assert client.post('/api/auth/logout', json={"access_token": "x"}).status_code == 400

    response = client.post('/api/auth/logout', json={"access_token": "x", "refresh_token": "y"})
    assert response.status_code == 422
    assert response.get_json()['error_code'] == 'INVALID_TOKEN'


def test_invalid_bearer_token(client):
    response = client.get('/api/settings', headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.get_json()['message'] == 'Authentication required'
