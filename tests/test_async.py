# tests/test_async.py
import asyncio
import os
from pathlib import Path

import pytest

from cachedfs.config import Settings
from cachedfs.di import build_container
from cachedfs.services.paths import ContainmentError


def test_async_surface_shares_cache_semantics(tmp_path: Path):
    container = build_container(Settings(SANDBOX_ROOT=tmp_path, CACHE_MAX_BYTES=2048))
    afs = container.async_fs_service
    assert afs.fs is container.fs_service

    async def scenario():
        await afs.write_file("a.txt", b"hello")
        assert await afs.read_file("a.txt") == b"hello"
        await afs.rename("a.txt", "b.txt")
        assert await afs.read_file("b.txt") == b"hello"
        assert await afs.is_file("b.txt")
        await afs.create_dir("sub/dir")
        assert await afs.is_dir("sub/dir")
        await afs.create_symlink("b.txt", "link")
        assert await afs.is_symlink("link")
        await afs.create_hardlink("b.txt", "hard")
        assert (await afs.info("hard")).link_count == 2
        names = [e.name for e in await afs.read_dir("")]
        assert names == ["b.txt", "hard", "link", "sub"]
        await afs.delete("b.txt")
        with pytest.raises(FileNotFoundError):
            await afs.read_file("b.txt")

    asyncio.run(scenario())
    assert not container.cache.has(os.path.join(afs.root, "b.txt"))


def test_async_errors_propagate_unchanged(tmp_path: Path):
    afs = build_container(Settings(SANDBOX_ROOT=tmp_path, CACHE_MAX_BYTES=0)).async_fs_service

    async def scenario():
        with pytest.raises(ContainmentError):
            await afs.read_file("../x")
        with pytest.raises(TypeError):
            await afs.write_file("x", "not bytes")

    asyncio.run(scenario())
