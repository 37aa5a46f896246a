"""
Expiring key-value store used for session positions and form documents.

The engine only talks to `KeyValueStore` (get / set / delete). `RedisStore`
is the production backend; anything with the same three methods can replace it.
"""
from typing import Optional, Protocol

from redis import Redis
from redis.exceptions import RedisError

from formflow.core.errors import StoreUnavailable
from formflow.store.redis_conn import get_redis


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class RedisStore:
    def __init__(self, client: Optional[Redis] = None):
        self._client = client

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = get_redis()
        return self._client

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(key)
        except RedisError as e:
            raise StoreUnavailable("get", key, e) from e

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        try:
            if ttl_seconds:
                self.client.set(key, value, ex=int(ttl_seconds))
            else:
                self.client.set(key, value)
        except RedisError as e:
            raise StoreUnavailable("set", key, e) from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except RedisError as e:
            raise StoreUnavailable("delete", key, e) from e

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except RedisError as e:
            raise StoreUnavailable("ping", "", e) from e


def get_store() -> KeyValueStore:
    return RedisStore()
