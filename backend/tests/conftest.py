import os
import sys
import pytest

# Ensure the backend root (containing the `race_server` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from race_server import create_app, socketio
from race_server.services.games import GameService, PhysicsSettings


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SIMULATION_AUTOSTART = False


class DeferredScheduler:
    """Stands in for SocketIO's task API: tasks queue up until run_pending()."""

    def __init__(self):
        self.tasks = []
        self.sleeps = []

    def start_background_task(self, target, *args, **kwargs):
        self.tasks.append((target, args, kwargs))

    def sleep(self, seconds):
        self.sleeps.append(seconds)

    def run_pending(self):
        while self.tasks:
            target, args, kwargs = self.tasks.pop(0)
            target(*args, **kwargs)


class RecordingBroadcaster:
    def __init__(self):
        self.events = []

    def broadcast(self, room_id, event, payload=None):
        self.events.append((room_id, event, payload))

    def names(self, room_id=None):
        return [e for r, e, _ in self.events if room_id is None or r == room_id]

    def payloads(self, event, room_id=None):
        return [p for r, e, p in self.events if e == event and (room_id is None or r == room_id)]

    def clear(self):
        self.events.clear()


@pytest.fixture()
def scheduler():
    return DeferredScheduler()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def settings():
    return PhysicsSettings()


@pytest.fixture()
def service(broadcaster, scheduler, settings):
    return GameService(broadcaster, scheduler, settings=settings)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig, scheduler=DeferredScheduler())
    yield application
    application.extensions['race_service'].stop()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
