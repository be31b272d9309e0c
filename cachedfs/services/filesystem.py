# cachedfs/services/filesystem.py
from __future__ import annotations

import os
from typing import List, Union

from cachedfs.services.cache import ContentCache
from cachedfs.services.info import Info
from cachedfs.services.reader import ReadAccessor
from cachedfs.services.sandbox import SandboxRoot
from cachedfs.services.writer import MutationAccessor


class FileSystemService:
    """
    Sandbox all file operations inside a root directory, with a write-through
    content cache in front of the disk.

    cache may be a ContentCache instance (adopted as-is), a byte budget for a
    fresh in-memory cache, or None / 0 to disable caching.
    """

    def __init__(
        self,
        root: Union[str, "os.PathLike[str]"],
        cache: Union[ContentCache, int, None] = None,
        *,
        canonicalize: bool = True,
    ):
        self.sandbox = SandboxRoot(root, cache, canonicalize=canonicalize)
        self.reader = ReadAccessor(self.sandbox)
        self.writer = MutationAccessor(self.reader)

    @property
    def root(self) -> str:
        return self.sandbox.root

    @property
    def cache(self) -> ContentCache:
        return self.sandbox.cache

    # ---------- Reads ----------

    def read_file(self, rel_path: str) -> bytes:
        return self.reader.read_file(rel_path)

    def read_dir(self, rel_path: str = "") -> List[os.DirEntry]:
        return self.reader.read_dir(rel_path)

    def info(self, rel_path: str) -> Info:
        return self.reader.info(rel_path)

    def is_file(self, rel_path: str) -> bool:
        return self.reader.is_file(rel_path)

    def is_dir(self, rel_path: str) -> bool:
        return self.reader.is_dir(rel_path)

    def is_symlink(self, rel_path: str) -> bool:
        return self.reader.is_symlink(rel_path)

    def read_text(self, rel_path: str, encoding: str = "utf-8") -> str:
        return self.read_file(rel_path).decode(encoding)

    # ---------- Mutations ----------

    def write_file(self, rel_path: str, data: bytes, *, make_parents: bool = False) -> None:
        self.writer.write_file(rel_path, data, make_parents=make_parents)

    def write_text(self, rel_path: str, content: str, encoding: str = "utf-8") -> str:
        if not isinstance(content, str):
            raise TypeError("Expected content to be a str")
        self.write_file(rel_path, content.encode(encoding), make_parents=True)
        return "OK"

    def create_dir(self, rel_path: str) -> None:
        self.writer.create_dir(rel_path)

    def create_symlink(self, target: str, link_path: str) -> None:
        self.writer.create_symlink(target, link_path)

    def create_hardlink(self, target: str, link_path: str) -> None:
        self.writer.create_hardlink(target, link_path)

    def rename(self, old_path: str, new_path: str) -> None:
        self.writer.rename(old_path, new_path)

    def delete(self, rel_path: str) -> None:
        self.writer.delete(rel_path)
