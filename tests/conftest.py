import os

# config.Config refuses to load without a secret key
os.environ.setdefault('SECRET_KEY', 'test-secret-key')

import pytest

from app import create_app
from models import User, db
from store import ProfileStore


class TestingConfig:
    SECRET_KEY = 'test-secret-key'
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    PDF_BASE_URL = None


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms=1000):
        self.now += ms
        return self.now


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(app, clock):
    with app.app_context():
        yield ProfileStore(clock=clock)


def ensure_user(app, email='staff@example.com', password='secret1'):
    with app.app_context():
        if not User.query.filter_by(email=email).first():
            u = User(email=email)
            u.set_password(password)
            db.session.add(u)
            db.session.commit()


@pytest.fixture
def logged_in(app, client):
    ensure_user(app)
    client.post('/login', data={'email': 'staff@example.com', 'password': 'secret1'})
    return client


def sample_profile(**overrides):
    data = {
        'regn_number': 'REG001',
        'gender': 'Girl',
        'full_name_with_surname': 'Jane Doe',
        'contact_no': '9876543210',
    }
    data.update(overrides)
    return data
