import os
import sys
import pytest

# Ensure the backend root (containing the `bluff` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from bluff import create_app, socketio
from bluff.models import Question, Room, Settings
from bluff.services import GameRules
from bluff.services.penalty import PenaltyClock
from bluff.services.phases import PhaseController
from bluff.services.questions import QuestionBank
from bluff.services.reveal import RevealSequencer
from bluff.services.submissions import SubmissionTracker


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    LOG_LEVEL = 'DEBUG'
    WRITING_TIME_LIMIT_SEC = 45
    VOTING_TIME_LIMIT_SEC = 45
    WRITING_PENALTY_PER_SEC = 20
    VOTING_PENALTY_PER_SEC = 10
    MIN_PLAYERS = 2
    CLAMP_BETS = False
    QUESTIONS_PATH = None


class FakeChannel:
    """Records broadcasts instead of sending them."""

    def __init__(self):
        self.sent = []
        self.closed = []

    def broadcast(self, code, message):
        self.sent.append((code, message))

    def close(self, code):
        self.closed.append(code)

    def events(self, name=None):
        return [m for _, m in self.sent if name is None or m.EVENT == name]

    def last(self, name):
        found = self.events(name)
        return found[-1] if found else None

    def clear(self):
        self.sent = []


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


SKY = Question('The ___ is blue.', 'sky')


@pytest.fixture()
def channel():
    return FakeChannel()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def rules():
    return GameRules(writing_penalty_per_second=20, voting_penalty_per_second=10)


@pytest.fixture()
def bank():
    return QuestionBank([SKY, Question('A ___ a day keeps the doctor away.', 'apple')])


@pytest.fixture()
def controller(channel, bank, rules, clock):
    return PhaseController(channel, bank, rules, reveal=RevealSequencer(channel), clock=clock)


@pytest.fixture()
def tracker(controller, channel, rules, clock):
    return SubmissionTracker(controller, PenaltyClock(rules, clock), channel, rules)


def make_room(names=('Alice', 'Bob', 'Cara'), code='ABCD', settings=None):
    """Room hosted by the first player, already holding every named player."""
    ids = [name.lower() for name in names]
    room = Room(code=code, host_id=ids[0] if ids else 'host', settings=settings or Settings(round_count=2, shuffle_questions=False))
    for pid, name in zip(ids, names):
        room.add_player(pid, name)
    return room


@pytest.fixture()
def room():
    return make_room()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        clients.append(test_client)
        return test_client

    yield connect
    for test_client in clients:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass
