# cachedfs/services/aio.py
from __future__ import annotations

import asyncio
import os
from typing import Any, Callable, List

from cachedfs.services.filesystem import FileSystemService
from cachedfs.services.info import Info


class AsyncFileSystemService:
    """
    Awaitable surface over FileSystemService. Each call runs the blocking
    implementation on a worker thread, so both surfaces share one code path.
    """

    def __init__(self, fs: FileSystemService):
        self.fs = fs

    @property
    def root(self) -> str:
        return self.fs.root

    async def _run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await asyncio.to_thread(fn, *args, **kwargs)

    async def read_file(self, rel_path: str) -> bytes:
        return await self._run(self.fs.read_file, rel_path)

    async def read_dir(self, rel_path: str = "") -> List[os.DirEntry]:
        return await self._run(self.fs.read_dir, rel_path)

    async def info(self, rel_path: str) -> Info:
        return await self._run(self.fs.info, rel_path)

    async def is_file(self, rel_path: str) -> bool:
        return await self._run(self.fs.is_file, rel_path)

    async def is_dir(self, rel_path: str) -> bool:
        return await self._run(self.fs.is_dir, rel_path)

    async def is_symlink(self, rel_path: str) -> bool:
        return await self._run(self.fs.is_symlink, rel_path)

    async def write_file(self, rel_path: str, data: bytes, *, make_parents: bool = False) -> None:
        await self._run(self.fs.write_file, rel_path, data, make_parents=make_parents)

    async def create_dir(self, rel_path: str) -> None:
        await self._run(self.fs.create_dir, rel_path)

    async def create_symlink(self, target: str, link_path: str) -> None:
        await self._run(self.fs.create_symlink, target, link_path)

    async def create_hardlink(self, target: str, link_path: str) -> None:
        await self._run(self.fs.create_hardlink, target, link_path)

    async def rename(self, old_path: str, new_path: str) -> None:
        await self._run(self.fs.rename, old_path, new_path)

    async def delete(self, rel_path: str) -> None:
        await self._run(self.fs.delete, rel_path)
