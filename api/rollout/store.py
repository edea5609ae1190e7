import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

import redis
from redis.cluster import ClusterNode, RedisCluster
from redis.exceptions import RedisClusterException

from rollout.errors import StoreError

logger = logging.getLogger(__name__)


class _Absent:
    def __repr__(self) -> str:
        return "Absent"


# key missing from the store
Absent = _Absent()


@dataclass(frozen=True)
class Payload:
    data: bytes


@dataclass(frozen=True)
class Malformed:
    value: Any


Entry = Union[_Absent, Payload, Malformed]


def classify(value: Any) -> Entry:
    if value is None:
        return Absent
    if isinstance(value, bytes):
        return Payload(value)
    return Malformed(value)


def _parse_host(host: str) -> ClusterNode:
    name, _, port = host.strip().rpartition(":")
    if not name:
        return ClusterNode(port, 6379)
    return ClusterNode(name, int(port))


def connect(hosts: str, socket_timeout: Optional[float] = None):
    """Build a Redis client from a URL, a ``host:port`` or a comma separated
    list of cluster nodes. Responses are left as bytes.

    A cluster client talks to its startup nodes while being built, so
    unreachable nodes and unparsable hosts both surface here as StoreError.
    """
    try:
        return _client(hosts, socket_timeout)
    except (redis.RedisError, RedisClusterException, ValueError) as e:
        raise StoreError(str(e) or f"cannot connect to {hosts}") from e


def _client(hosts: str, socket_timeout: Optional[float]):
    if "://" in hosts:
        return redis.Redis.from_url(hosts, socket_timeout=socket_timeout)
    nodes = [_parse_host(h) for h in hosts.split(",") if h.strip()]
    if not nodes:
        raise ValueError("no redis host given")
    if len(nodes) == 1:
        logger.debug("connecting to redis at %s:%s", nodes[0].host, nodes[0].port)
        return redis.Redis(host=nodes[0].host, port=nodes[0].port, socket_timeout=socket_timeout)
    logger.debug("connecting to redis cluster with %d startup nodes", len(nodes))
    return RedisCluster(startup_nodes=nodes, socket_timeout=socket_timeout)


class RedisStore:
    """Key-value operations used by the manager, with redis errors turned into StoreError."""

    def __init__(self, client):
        self.client = client

    def get(self, key: str) -> Optional[bytes]:
        try:
            return self.client.get(key)
        except redis.RedisError as e:
            raise StoreError(str(e)) from e

    def set(self, key: str, data: bytes) -> None:
        try:
            self.client.set(key, data)
        except redis.RedisError as e:
            raise StoreError(str(e)) from e

    def multi_get(self, keys: Sequence[str]) -> List[Entry]:
        if not keys:
            return []
        try:
            if isinstance(self.client, RedisCluster):
                values = self.client.mget_nonatomic(list(keys))
            else:
                values = self.client.mget(list(keys))
        except redis.RedisError as e:
            raise StoreError(str(e)) from e
        return [classify(v) for v in values]

    def delete(self, key: str) -> int:
        try:
            return int(self.client.delete(key))
        except redis.RedisError as e:
            raise StoreError(str(e)) from e

    def scan_keys(self, pattern: str) -> List[str]:
        try:
            keys = list(self.client.scan_iter(match=pattern, count=100))
        except redis.RedisError as e:
            raise StoreError(str(e)) from e
        return sorted(k.decode("utf-8") if isinstance(k, bytes) else k for k in keys)

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            raise StoreError(str(e)) from e
