# cachedfs/services/cache.py
from __future__ import annotations

import logging
import re
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Protocol, Union, runtime_checkable

import redis

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


@runtime_checkable
class ContentCache(Protocol):
    """
    File content cache keyed by canonical absolute path.
    Eviction is the implementation's business; callers only rely on this contract.
    """

    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> bytes: ...

    def set(self, key: str, data: bytes) -> None: ...

    def delete(self, key: str) -> None: ...

    def rename(self, old_key: str, new_key: str) -> None: ...


class MemoryCache:
    """
    Bounded, thread-safe in-process cache with a byte budget (LRU eviction).
    A budget of 0 disables caching: has() is always False and nothing is stored.
    """

    def __init__(self, max_bytes: int = 0):
        if max_bytes < 0:
            raise ValueError("max_bytes must be >= 0")
        self.max_bytes = max_bytes
        self._entries: OrderedDict[str, bytes] = OrderedDict()
        self._size = 0
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.max_bytes > 0

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return len(self._entries)

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> bytes:
        with self._lock:
            data = self._entries[key]
            self._entries.move_to_end(key)
            return data

    def set(self, key: str, data: bytes) -> None:
        with self._lock:
            self._discard(key)
            if not self.enabled or len(data) > self.max_bytes:
                return
            self._entries[key] = data
            self._size += len(data)
            while self._size > self.max_bytes:
                victim, evicted = self._entries.popitem(last=False)
                self._size -= len(evicted)
                logger.debug("cache evict %s (%d bytes)", victim, len(evicted))

    def delete(self, key: str) -> None:
        with self._lock:
            self._discard(key)

    def rename(self, old_key: str, new_key: str) -> None:
        with self._lock:
            if old_key not in self._entries:
                return
            data = self._entries.pop(old_key)
            self._size -= len(data)
            self._discard(new_key)
            self._entries[new_key] = data
            self._size += len(data)

    def rename_prefix(self, old_prefix: str, new_prefix: str) -> int:
        """Relocate every key under old_prefix (a renamed directory)."""
        with self._lock:
            moved = [k for k in self._entries if k.startswith(old_prefix)]
            for key in moved:
                data = self._entries.pop(key)
                self._size -= len(data)
                new_key = new_prefix + key[len(old_prefix):]
                self._discard(new_key)
                self._entries[new_key] = data
                self._size += len(data)
            return len(moved)

    def _discard(self, key: str) -> None:
        data = self._entries.pop(key, None)
        if data is not None:
            self._size -= len(data)


class RedisCache:
    """
    Redis-backed content cache with optional TTL. Survives process restarts
    and can be shared by several processes serving the same root.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        client: Optional[redis.Redis] = None,
        prefix: str = "cachedfs:",
        ttl_sec: Optional[int] = None,
    ):
        if client is None:
            if not url:
                raise ValueError("RedisCache needs a url or a client")
            client = redis.from_url(url)
        self._client = client
        self.prefix = prefix
        self.ttl_sec = ttl_sec

    def _key(self, key: str) -> str:
        return self.prefix + key

    def has(self, key: str) -> bool:
        return bool(self._client.exists(self._key(key)))

    def get(self, key: str) -> bytes:
        data = self._client.get(self._key(key))
        if data is None:
            raise KeyError(key)
        return bytes(data)

    def set(self, key: str, data: bytes) -> None:
        if self.ttl_sec:
            self._client.set(self._key(key), data, ex=int(self.ttl_sec))
        else:
            self._client.set(self._key(key), data)

    def delete(self, key: str) -> None:
        self._client.delete(self._key(key))

    def rename(self, old_key: str, new_key: str) -> None:
        try:
            self._client.rename(self._key(old_key), self._key(new_key))
        except redis.ResponseError:
            # RENAME fails on a missing source key; nothing to relocate
            logger.debug("cache rename skipped, %s not cached", old_key)

    def rename_prefix(self, old_prefix: str, new_prefix: str) -> int:
        pattern = self._key(_GLOB_SPECIAL.sub(r"\\\1", old_prefix)) + "*"
        moved = 0
        for raw in list(self._client.scan_iter(match=pattern)):
            name = raw.decode() if isinstance(raw, bytes) else raw
            key = name[len(self.prefix):]
            self.rename(key, new_prefix + key[len(old_prefix):])
            moved += 1
        return moved


# ---------- Construction-time configuration ----------


@dataclass(frozen=True)
class Disabled:
    pass


@dataclass(frozen=True)
class ByteBudget:
    max_bytes: int


@dataclass(frozen=True)
class Existing:
    handle: ContentCache


CacheConfig = Union[Disabled, ByteBudget, Existing]


def cache_config(arg: Union[ContentCache, int, None]) -> CacheConfig:
    """Map the loose constructor argument onto a CacheConfig variant."""
    if isinstance(arg, (Disabled, ByteBudget, Existing)):
        return arg
    if arg is None:
        return Disabled()
    if isinstance(arg, bool):
        raise TypeError("Expected cache to be a ContentCache, a byte budget (int >= 0) or None")
    if isinstance(arg, int):
        if arg < 0:
            raise ValueError("Cache byte budget must be >= 0")
        return ByteBudget(arg) if arg else Disabled()
    if isinstance(arg, ContentCache):
        return Existing(arg)
    raise TypeError("Expected cache to be a ContentCache, a byte budget (int >= 0) or None")


def build_cache(config: CacheConfig) -> ContentCache:
    if isinstance(config, Existing):
        return config.handle
    if isinstance(config, ByteBudget):
        return MemoryCache(config.max_bytes)
    return MemoryCache(0)
