# cachedfs/di.py
from dataclasses import dataclass
from typing import Optional

from cachedfs.config import Settings
from cachedfs.services.aio import AsyncFileSystemService
from cachedfs.services.cache import ContentCache, MemoryCache, RedisCache
from cachedfs.services.filesystem import FileSystemService

@dataclass
class Container:
    settings: Settings
    cache: ContentCache
    fs_service: FileSystemService
    async_fs_service: AsyncFileSystemService

def build_cache_from_settings(s: Settings) -> ContentCache:
    if s.CACHE_BACKEND == "redis":
        if not s.REDIS_URL:
            raise ValueError("CACHE_BACKEND=redis requires REDIS_URL")
        return RedisCache(s.REDIS_URL, prefix=s.REDIS_KEY_PREFIX, ttl_sec=s.REDIS_TTL_SEC)
    return MemoryCache(s.CACHE_MAX_BYTES)

def build_container(settings: Optional[Settings] = None) -> Container:
    s = settings or Settings()
    cache = build_cache_from_settings(s)
    fs = FileSystemService(s.SANDBOX_ROOT, cache, canonicalize=s.CANONICALIZE_SYMLINKS)
    return Container(s, cache, fs, AsyncFileSystemService(fs))
