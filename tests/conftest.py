import fakeredis
import pytest

from rollout import codec
from rollout.manager import Manager
from rollout.models import Feature
from rollout.store import RedisStore, classify

KEY_PREFIX = "dealsff"


class MemoryStore:
    """Dict-backed store; values are returned exactly as stored."""

    def __init__(self):
        self.data = {}
        self.gets = 0
        self.sets = 0

    def get(self, key):
        self.gets += 1
        return self.data.get(key)

    def set(self, key, data):
        self.sets += 1
        self.data[key] = data

    def multi_get(self, keys):
        return [classify(self.data.get(k)) for k in keys]

    def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0

    def scan_keys(self, pattern):
        prefix = pattern.rstrip("*")
        return sorted(k for k in self.data if k.startswith(prefix))


def stored(name, percentage=0, team_ids=()):
    return codec.encode(Feature(name, percentage, set(team_ids)))


@pytest.fixture
def redis_server():
    return fakeredis.FakeServer()


@pytest.fixture
def fake_redis(redis_server):
    return fakeredis.FakeRedis(server=redis_server)


@pytest.fixture
def store(fake_redis):
    return RedisStore(fake_redis)


@pytest.fixture
def manager(store):
    return Manager(store, KEY_PREFIX)


@pytest.fixture
def memory_store():
    return MemoryStore()
