# cachedfs/services/writer.py
from __future__ import annotations

import logging
import os

from cachedfs.services.cache import ContentCache
from cachedfs.services.reader import ReadAccessor

logger = logging.getLogger(__name__)

BYTES_LIKE = (bytes, bytearray, memoryview)


def write_bytes(path: str, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)


class MutationAccessor:
    """
    Write side of the sandbox, layered on a ReadAccessor.

    Every operation runs the disk step first and only then touches the cache.
    If the disk step raises, the exception propagates and the cache is left as it was.
    """

    def __init__(self, reader: ReadAccessor):
        self.reader = reader
        self.sandbox = reader.sandbox

    @property
    def cache(self) -> ContentCache:
        return self.reader.cache

    def write_file(self, filename: str, data: bytes, *, make_parents: bool = False) -> None:
        if not isinstance(data, BYTES_LIKE):
            raise TypeError("Expected data to be bytes-like")
        blob = bytes(data)
        key = self.sandbox.resolve_content(filename, "filename")

        if make_parents:
            os.makedirs(os.path.dirname(key), exist_ok=True)
        write_bytes(key, blob)

        self.cache.set(key, blob)

    def create_dir(self, dirname: str) -> None:
        key = self.sandbox.resolve_content(dirname, "dirname")
        os.makedirs(key, exist_ok=True)

    def create_symlink(self, target: str, link_path: str) -> None:
        resolved_target = self.sandbox.resolve_content(target, "target")
        resolved_link = self.sandbox.resolve_entry(link_path, "link_path")
        os.symlink(resolved_target, resolved_link)

    def create_hardlink(self, target: str, link_path: str) -> None:
        resolved_target = self.sandbox.resolve_content(target, "target")
        resolved_link = self.sandbox.resolve_entry(link_path, "link_path")
        os.link(resolved_target, resolved_link)

    def rename(self, old_path: str, new_path: str) -> None:
        old_key = self.sandbox.resolve_entry(old_path, "old_path")
        new_key = self.sandbox.resolve_entry(new_path, "new_path")

        os.rename(old_key, new_key)

        if self.cache.has(old_key):
            self.cache.rename(old_key, new_key)
            logger.debug("cache moved %s -> %s", old_key, new_key)
        else:
            # a cached file the rename just overwrote would otherwise go stale
            self.cache.delete(new_key)

        if os.path.isdir(new_key) and not os.path.islink(new_key):
            rename_prefix = getattr(self.cache, "rename_prefix", None)
            if rename_prefix is not None:
                moved = rename_prefix(old_key + os.sep, new_key + os.sep)
                logger.debug("cache moved %d entries under %s", moved, new_key)

    def delete(self, path: str) -> None:
        key = self.sandbox.resolve_entry(path, "path")
        os.unlink(key)
        self.cache.delete(key)
        logger.debug("cache dropped %s", key)
