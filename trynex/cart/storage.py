"""Durable key-value storage backends for the cart."""
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol
from urllib.parse import quote

from trynex.db import get_redis, RedisKeys, TTL
from trynex.logging import get_logger

logger = get_logger(__name__)

CART_STORAGE_KEY = "ecommerce-cart"

CART_STORAGE_BACKEND = os.environ.get("CART_STORAGE_BACKEND", "file")
CART_STORAGE_DIR = os.environ.get("CART_STORAGE_DIR", str(Path.home() / ".trynex"))


class KeyValueStorage(Protocol):
    """Minimal get/set/remove by string key."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage. Lives as long as the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage:
    """
    One file per key inside a directory.

    Writes go to a temp file in the same directory and are moved into place,
    so a crash mid-write never leaves a half-written cart behind.
    """

    def __init__(self, directory: str | Path = CART_STORAGE_DIR):
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class RedisStorage:
    """Upstash Redis storage with a TTL so abandoned carts expire."""

    def __init__(self, redis=None, ttl: int = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            try:
                self._redis = get_redis()
            except ValueError as e:
                raise ValueError(
                    f"Redis not available: {e}. Check UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN environment variables."
                ) from e
        return self._redis

    def get(self, key: str) -> Optional[str]:
        return self.redis.get(RedisKeys.cart_key(key))

    def set(self, key: str, value: str) -> None:
        self.redis.set(RedisKeys.cart_key(key), value, ex=self.ttl)

    def remove(self, key: str) -> None:
        self.redis.delete(RedisKeys.cart_key(key))


def get_default_storage() -> KeyValueStorage:
    """Build the storage backend selected by CART_STORAGE_BACKEND."""
    backend = CART_STORAGE_BACKEND.lower()
    if backend == "memory":
        return MemoryStorage()
    if backend == "redis":
        return RedisStorage()
    if backend != "file":
        logger.warning(f"Unknown CART_STORAGE_BACKEND {backend!r}, falling back to file storage")
    return FileStorage(CART_STORAGE_DIR)


__all__ = [
    "CART_STORAGE_KEY",
    "KeyValueStorage",
    "MemoryStorage",
    "FileStorage",
    "RedisStorage",
    "get_default_storage",
]
