import os
import random
import sys
import pytest

# Ensure the backend root (containing the `partyhost` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from partyhost import create_app, socketio
from partyhost.models import GameType, RoomSettings
from partyhost.services.broadcaster import Broadcaster
from partyhost.services.games.scheduler import ScheduledCall
from partyhost.services.games.words import DEFAULT_WORDS, Vocabulary
from partyhost.services.rooms import RoomRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'
    DEFAULT_ROUNDS = 3
    DEFAULT_ROUND_TIME_SEC = 60
    DEFAULT_GRID_SIZE = 3
    MAX_ROUNDS = 20
    MAX_ROUND_TIME_SEC = 600
    MAX_GRID_SIZE = 10
    WORD_CHOICES = 3
    GUESS_REVEAL_DELAY_SEC = 3
    GRID_RESET_DELAY_SEC = 3
    ROOM_CODE_MAX_ATTEMPTS = 50
    WORDS_FILE = None


class ManualScheduler:
    """Virtual-clock scheduler: nothing runs until the test calls ``advance``."""

    def __init__(self):
        self.now = 0.0
        self._seq = 0
        self._calls = []

    def call_later(self, room_code, delay, callback):
        call = ScheduledCall(room_code, callback, delay)
        self._seq += 1
        self._calls.append((self.now + delay, self._seq, call))
        return call

    def cancel_room(self, room_code):
        for _, _, call in self._calls:
            if call.room_code == room_code:
                call.cancel()

    def pending_count(self, room_code=None):
        return len([
            c for _, _, c in self._calls
            if not c.cancelled and (room_code is None or c.room_code == room_code)
        ])

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [entry for entry in self._calls if entry[0] <= target and not entry[2].cancelled]
            if not due:
                break
            entry = min(due, key=lambda e: (e[0], e[1]))
            self._calls.remove(entry)
            self.now = entry[0]
            entry[2].fire()
        self._calls = [entry for entry in self._calls if not entry[2].cancelled]
        self.now = target


class RecordingSocketIO:
    """Captures what the Broadcaster would have emitted."""

    def __init__(self):
        self.emitted = []

    def emit(self, event, data=None, to=None, skip_sid=None, namespace=None):
        self.emitted.append({'event': event, 'data': data, 'to': to, 'skip_sid': skip_sid})

    def events(self, name, to=None):
        return [e['data'] for e in self.emitted if e['event'] == name and (to is None or e['to'] == to)]

    def messages(self):
        return self.events('system_message')

    def clear(self):
        self.emitted = []


def config_dict(config_class=TestConfig):
    return {k: getattr(config_class, k) for k in dir(config_class) if k.isupper()}


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def transport():
    return RecordingSocketIO()


@pytest.fixture()
def registry(transport, scheduler):
    return RoomRegistry(
        Broadcaster(transport),
        scheduler,
        vocabulary=Vocabulary(DEFAULT_WORDS, rng=random.Random(7)),
        config=config_dict(),
    )


@pytest.fixture()
def make_room(registry):
    """Create a room and join the named users as ``sid-<name>``; the first one is admin."""

    def _make(game_type=GameType.SCRIBBLE, names=('A', 'B', 'C'), **settings):
        admin = f"sid-{names[0]}" if names else 'sid-creator'
        code = registry.create_room('Test room', admin, game_type, RoomSettings(**settings))
        session = registry.get_room(code)
        for name in names:
            session.join(f"sid-{name}", name, avatar=f"{name.lower()}.png")
        return session

    return _make


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig, scheduler=ManualScheduler())
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    """Open Socket.IO test clients; returns (client, sid) with the inbox flushed."""
    opened = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        opened.append(test_client)
        received = test_client.get_received()
        sid = next(pkt['args'][0]['sid'] for pkt in received if pkt['name'] == 'connected')
        return test_client, sid

    yield _connect
    for test_client in opened:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except RuntimeError:
            pass

