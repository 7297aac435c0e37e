import os
import sys
import random
from datetime import datetime, timedelta, timezone
import pytest

# Ensure the backend root (containing the `lexlock` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from lexlock import create_app, db, socketio
from lexlock.services.games.engine import GameEngine
from lexlock.services.games.store import MemorySessionStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_STORE = 'sql'
    POLL_INTERVAL_SEC = 1.0


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start=None):
        self.current = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.current

    def advance(self, seconds):
        self.current = self.current + timedelta(seconds=seconds)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def clock():
    return FrozenClock()


@pytest.fixture()
def engine(clock):
    return GameEngine(MemorySessionStore(), clock=clock, rng=random.Random(1234))


def find_coordinates(words, word):
    """Start/end payload for a placed word from a create/state response."""
    for w in words:
        if w['word'] == word:
            return w['start'], w['end']
    raise AssertionError(f'{word} not placed')
