# pet_ledger/conftest.py
import pytest
from flask_jwt_extended import create_access_token, create_refresh_token

from pet_ledger import create_app


@pytest.fixture
def app(tmp_path):
    app = create_app('testing', {'DATA_DIR': str(tmp_path / 'data')})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def make_auth_headers(app, user_id):
    with app.app_context():
        token = create_access_token(identity=user_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(app):
    return make_auth_headers(app, 'user-1')


@pytest.fixture
def other_auth_headers(app):
    return make_auth_headers(app, 'user-2')


@pytest.fixture
def refresh_token(app):
    with app.app_context():
        return create_refresh_token(identity='user-1')


@pytest.fixture
def services(app):
    return app.services


@pytest.fixture
def create_animal(client, auth_headers):
    """POST an animal for user-1 and return the response body."""
    def _create(**overrides):
        payload = {"name": "Biscuit", "species": "dog", "breed": "Beagle", "date_of_birth": "2019-04-10"}
        payload.update(overrides)
        response = client.post('/api/animals', json=payload, headers=auth_headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _create
