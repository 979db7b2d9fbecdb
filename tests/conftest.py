"""Shared fixtures: an app wired to in-memory collaborators."""

import pytest
from fastapi.testclient import TestClient
from limits.storage import MemoryStorage
from redis.exceptions import ConnectionError

from pastr.config import Settings
from pastr.database import InMemoryStore, PasteStore
from pastr.main import create_app
from pastr.notifier import Notifier


class RecordingNotifier(Notifier):
    """Keeps notifications in a list instead of posting them."""

    def __init__(self):
        super().__init__()
        self.events = []

    async def notify(self, event, details):
        self.events.append((event, details))


class BrokenRedis:
    """Redis client whose every command fails like a dropped connection."""

    def _fail(self, *args, **kwargs):
        raise ConnectionError("Connection refused")

    set = get = ping = _fail


class FailingStorage(MemoryStorage):
    """Counter storage whose first `failures` increments fail like Redis would."""

    def __init__(self, failures=float("inf")):
        super().__init__()
        self.failures = failures

    def incr(self, *args, **kwargs):
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("Connection reset by peer")
        return super().incr(*args, **kwargs)


@pytest.fixture
def memory_redis():
    return InMemoryStore()


@pytest.fixture
def store(memory_redis):
    return PasteStore(memory_redis, using_fallback=True)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def settings():
    return Settings(
        CREATE_RATE_LIMIT=5,
        RETRIEVE_RATE_LIMIT=5,
        RATE_LIMIT_WINDOW_SECONDS=60,
        MAX_PASTE_BYTES=1024,
        NOTIFY_WEBHOOK_URL="",
    )


@pytest.fixture
def app(settings, store, notifier):
    return create_app(settings=settings, store=store, notifier=notifier)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
