from rollout import config
from rollout.manager import Manager
from rollout.store import RedisStore, connect

_store = None


def get_store() -> RedisStore:
    global _store
    if _store is None:
        _store = RedisStore(connect(config.REDIS_URL, socket_timeout=config.REDIS_SOCKET_TIMEOUT))
    return _store


def get_manager() -> Manager:
    return Manager(get_store(), config.KEY_PREFIX, config.RANDOMIZE_PERCENTAGE)
