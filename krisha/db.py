"""
Storage Module - Durable key-value stores

Provides the DurableKeyValueStore protocol the stores persist through and
three backends:
- MemoryKeyValueStore: process memory (tests, ephemeral sessions)
- FileKeyValueStore: a single JSON document on local disk
- RedisKeyValueStore: Upstash Redis over REST
"""

import json
import os
import tempfile
from typing import Optional, Protocol

from upstash_redis import Redis

from krisha.config import Settings
from krisha.errors import ERROR_REDIS_NOT_CONFIGURED, ERROR_UNKNOWN_BACKEND
from krisha.logging import get_logger

logger = get_logger(__name__)


class StorageKeys:
    """Fixed keys in the durable store."""

    CART = "krisha-cart"
    AUTH_TOKEN = "authToken"


class DurableKeyValueStore(Protocol):
    """Synchronous string key-value store that survives restarts."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Dictionary-backed store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileKeyValueStore:
    """
    Store all keys in one JSON object on disk.

    Every write rewrites the whole file through a temporary file and
    os.replace, so a crash leaves either the old or the new document.
    An unreadable file is treated as empty.
    """

    def __init__(self, path: str):
        self.path = os.path.expanduser(path)

    def _read_all(self) -> dict[str, str]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Unreadable storage file %s: %s", self.path, type(e).__name__)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s does not hold an object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".krisha-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class RedisKeyValueStore:
    """
    Upstash Redis backend.

    Uses the sync client: cart writes happen inside synchronous store
    operations and must not require an event loop.
    """

    def __init__(self, client: Redis, prefix: str = ""):
        self._redis = client
        self.prefix = prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisKeyValueStore":
        if not settings.redis_url or not settings.redis_token:
            raise ValueError(ERROR_REDIS_NOT_CONFIGURED)
        return cls(Redis(url=settings.redis_url, token=settings.redis_token))

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        value = self._redis.get(self._key(key))
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def set(self, key: str, value: str) -> None:
        self._redis.set(self._key(key), value)

    def delete(self, key: str) -> None:
        self._redis.delete(self._key(key))


def create_storage(settings: Settings) -> DurableKeyValueStore:
    """
    Build the storage backend named by settings.storage_backend.

    Raises:
        ValueError: If the backend is unknown or misconfigured
    """
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryKeyValueStore()
    if backend == "file":
        return FileKeyValueStore(settings.storage_path)
    if backend == "redis":
        return RedisKeyValueStore.from_settings(settings)
    raise ValueError(f"{ERROR_UNKNOWN_BACKEND}: {backend}")
