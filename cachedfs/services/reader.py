# cachedfs/services/reader.py
from __future__ import annotations

import logging
import os
from typing import List

from cachedfs.services.cache import ContentCache
from cachedfs.services.info import Info
from cachedfs.services.sandbox import SandboxRoot

logger = logging.getLogger(__name__)


def read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


class ReadAccessor:
    """
    Read side of the sandbox. File content goes through the cache;
    listings and metadata always come from disk.
    """

    def __init__(self, sandbox: SandboxRoot):
        self.sandbox = sandbox

    @property
    def root(self) -> str:
        return self.sandbox.root

    @property
    def cache(self) -> ContentCache:
        return self.sandbox.cache

    def read_file(self, filename: str) -> bytes:
        key = self.sandbox.resolve_content(filename, "filename")
        if self.cache.has(key):
            try:
                data = self.cache.get(key)
            except KeyError:
                # evicted between has() and get(); fall through to disk
                logger.debug("cache entry vanished %s", key)
            else:
                logger.debug("cache hit %s", key)
                return data

        logger.debug("cache miss %s", key)
        data = read_bytes(key)
        self.cache.set(key, data)
        return data

    def read_dir(self, dirname: str) -> List[os.DirEntry]:
        key = self.sandbox.resolve_content(dirname, "dirname")
        with os.scandir(key) as it:
            return sorted(it, key=lambda e: e.name)

    def info(self, entry: str) -> Info:
        key = self.sandbox.resolve_entry(entry, "entry")
        return Info(os.lstat(key))

    def _probe(self, entry: str):
        try:
            return self.info(entry)
        except (FileNotFoundError, NotADirectoryError):
            return None

    def is_file(self, entry: str) -> bool:
        info = self._probe(entry)
        return info is not None and info.is_file()

    def is_dir(self, entry: str) -> bool:
        info = self._probe(entry)
        return info is not None and info.is_directory()

    def is_symlink(self, entry: str) -> bool:
        info = self._probe(entry)
        return info is not None and info.is_symbolic_link()
