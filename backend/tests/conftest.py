import os
import random
import sys
from datetime import datetime

import pytest

# Ensure the backend root (containing the `arena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arena import create_app, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SOCKETIO_NAMESPACE = '/'
    DATA_DIR = '.'
    MAP_WIDTH = 4800
    MAP_HEIGHT = 3200
    SPAWN_MARGIN = 100
    MAX_PILLS = 30
    MOVE_THROTTLE_MS = 16
    RESPAWN_DELAY_MS = 0
    TOKEN_TTL_SEC = 24 * 60 * 60
    ENABLE_TIMERS = False


class FakeClock:
    """Manually advanced wall clock (epoch seconds)."""

    def __init__(self, start: float):
        self.ms = int(start * 1000)

    def __call__(self) -> float:
        return self.ms / 1000.0

    def advance(self, seconds: int = 0, ms: int = 0) -> None:
        self.ms += seconds * 1000 + ms

    def set(self, moment: datetime) -> None:
        self.ms = int(moment.timestamp() * 1000)


class RecordingBroadcaster:
    """Stands in for the Socket.IO fan-out in service-level tests."""

    def __init__(self):
        self.sent = []

    def to_all(self, event, data=None):
        self.sent.append(('all', event, data, None))

    def to_others(self, event, data, sid):
        self.sent.append(('others', event, data, sid))

    def to_one(self, event, data, sid):
        self.sent.append(('one', event, data, sid))

    def named(self, event):
        return [data for _, name, data, _ in self.sent if name == event]


@pytest.fixture()
def clock():
    return FakeClock(datetime(2026, 10, 19, 12, 0, 0).timestamp())


@pytest.fixture()
def data_dir(tmp_path):
    return str(tmp_path)


@pytest.fixture()
def make_app(data_dir, clock):
    def _make(**overrides):
        attrs = {'DATA_DIR': data_dir}
        attrs.update(overrides)
        config_class = type('PerTestConfig', (TestConfig,), attrs)
        return create_app(config_class, clock=clock, rng=random.Random(1234))
    return _make


@pytest.fixture()
def flask_app(make_app):
    application = make_app()
    with application.app_context():
        yield application


@pytest.fixture()
def ctx(flask_app):
    return flask_app.extensions['arena']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def sio_client(connect):
    return connect()


@pytest.fixture()
def events():
    def _events(received, name):
        return [pkt['args'][0] if pkt['args'] else None for pkt in received if pkt['name'] == name]
    return _events


@pytest.fixture()
def sid_for():
    """Server-side sid of a connected test client."""
    def _sid_for(test_client, namespace='/'):
        return socketio.server.manager.sid_from_eio_sid(test_client.eio_sid, namespace)
    return _sid_for


@pytest.fixture()
def recorder():
    return RecordingBroadcaster()


@pytest.fixture()
def recording_ctx(ctx, recorder):
    """The app's GameContext with broadcasts captured in ``recorder``."""
    ctx.broadcaster = recorder
    ctx.daily.broadcaster = recorder
    ctx.all_time.broadcaster = recorder
    return ctx
