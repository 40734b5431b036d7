"""
pytest configuration and fixtures for BDR Dragon tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from bdr_dragon import create_app, db
from bdr_dragon.models import ROLE_ADMIN, ROLE_BASIC
from bdr_dragon import user_service

ADMIN_EMAIL = 'admin@example.com'
BASIC_EMAIL = 'rep@example.com'
PASSWORD = 'Password123!'


@pytest.fixture
def app():
    """Application on the testing config with a fresh in-memory database."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    """Push an application context for tests that talk to the database directly."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Factory creating a user (with default task lists) and returning its id."""
    counter = {'n': 0}

    def _make_user(email=None, role=ROLE_BASIC, password=PASSWORD, is_active=True, **quotas):
        counter['n'] += 1
        email = email or f'user{counter["n"]}@example.com'
        with app.app_context():
            user = user_service.create_user(
                email=email,
                password=password,
                role=role,
                first_name='Test',
                last_name=f'User{counter["n"]}',
                quotas=quotas
            )
            if not is_active:
                user.is_active = False
                db.session.commit()
            return user.id

    return _make_user


@pytest.fixture
def login_as(app):
    """Return a test client logged in as the given account."""
    def _login_as(email, password=PASSWORD):
        test_client = app.test_client()
        response = test_client.post('/auth/login', json={'email': email, 'password': password})
        assert response.status_code == 200, response.get_json()
        return test_client

    return _login_as


@pytest.fixture
def admin_id(make_user):
    return make_user(email=ADMIN_EMAIL, role=ROLE_ADMIN)


@pytest.fixture
def basic_id(make_user):
    return make_user(email=BASIC_EMAIL, role=ROLE_BASIC, quota_calls=100, quota_emails=300)


@pytest.fixture
def admin_client(login_as, admin_id):
    return login_as(ADMIN_EMAIL)


@pytest.fixture
def basic_client(login_as, basic_id):
    return login_as(BASIC_EMAIL)
