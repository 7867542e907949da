import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Ensure the backend root (containing the `timerbe` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from timerbe import create_app, db, socketio
from timerbe.services.timers import InMemoryTimerStore, TimerEngine


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = ['*']
    SOCKETIO_NAMESPACE = '/'
    TIMER_BROADCAST = True
    TIMER_STORE = 'sql'
    PORT = 8080


class ReplyOnlyConfig(TestConfig):
    TIMER_BROADCAST = False


class FakeClock:
    """Hand-driven UTC clock."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


def _make_app(config_class):
    application = create_app(config_class)
    with application.app_context():
        # Ensure models are imported so tables are created
        import timerbe.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def flask_app():
    yield from _make_app(TestConfig)


@pytest.fixture()
def reply_only_app():
    yield from _make_app(ReplyOnlyConfig)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def app_clock(flask_app, clock):
    flask_app.extensions['timer_engine'].clock = clock
    return clock


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass


@pytest.fixture()
def store():
    return InMemoryTimerStore()


@pytest.fixture()
def engine(store, clock):
    return TimerEngine(store, clock=clock)
