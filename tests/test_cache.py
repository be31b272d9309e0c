# tests/test_cache.py
import re

import pytest
import redis

from cachedfs.services.cache import (
    ByteBudget,
    ContentCache,
    Disabled,
    Existing,
    MemoryCache,
    RedisCache,
    build_cache,
    cache_config,
)


def test_memory_cache_basic_contract():
    c = MemoryCache(1024)
    assert isinstance(c, ContentCache)
    assert not c.has("/r/a")
    c.set("/r/a", b"hello")
    assert c.has("/r/a")
    assert c.get("/r/a") == b"hello"
    assert c.size == 5

    c.rename("/r/a", "/r/b")
    assert not c.has("/r/a")
    assert c.get("/r/b") == b"hello"
    assert c.size == 5

    c.delete("/r/b")
    c.delete("/r/b")  # removing a missing key is a no-op
    assert len(c) == 0 and c.size == 0


def test_memory_cache_evicts_least_recently_used_to_stay_in_budget():
    c = MemoryCache(10)
    c.set("a", b"1234")
    c.set("b", b"1234")
    c.get("a")  # touch a, so b is the oldest
    c.set("c", b"1234")
    assert c.has("a") and c.has("c")
    assert not c.has("b")
    assert c.size <= 10


def test_memory_cache_skips_values_larger_than_budget():
    c = MemoryCache(4)
    c.set("k", b"old")
    c.set("k", b"too large")
    # the stale value must not survive an oversized overwrite
    assert not c.has("k")


def test_zero_budget_disables_caching():
    c = MemoryCache(0)
    c.set("k", b"")
    c.set("j", b"data")
    assert not c.has("k")
    assert not c.has("j")


def test_rename_of_missing_key_is_noop():
    c = MemoryCache(100)
    c.set("/r/b", b"keep")
    c.rename("/r/a", "/r/b")
    assert c.get("/r/b") == b"keep"


def test_rename_prefix_moves_directory_entries():
    c = MemoryCache(100)
    c.set("/r/d/x", b"x")
    c.set("/r/d/y/z", b"z")
    c.set("/r/dd", b"other")
    assert c.rename_prefix("/r/d/", "/r/e/") == 2
    assert c.get("/r/e/x") == b"x"
    assert c.get("/r/e/y/z") == b"z"
    assert c.has("/r/dd")
    assert not c.has("/r/d/x")


def test_cache_config_variants():
    handle = MemoryCache(8)
    assert cache_config(None) == Disabled()
    assert cache_config(0) == Disabled()
    assert cache_config(2048) == ByteBudget(2048)
    assert cache_config(handle) == Existing(handle)
    assert build_cache(Existing(handle)) is handle
    assert build_cache(ByteBudget(2048)).max_bytes == 2048
    assert not build_cache(Disabled()).enabled


@pytest.mark.parametrize("bad", ["invalid", 0.5, True, object()])
def test_cache_config_rejects_wrong_kinds(bad):
    with pytest.raises(TypeError):
        cache_config(bad)


def test_cache_config_rejects_negative_budget():
    with pytest.raises(ValueError):
        cache_config(-1)


def redis_glob(pattern):
    """Compile a Redis MATCH pattern, honouring backslash escapes like the server does."""
    out, i = [], 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if ch == "*":
            out.append(".*")
        elif ch == "?":
            out.append(".")
        elif ch == "[":
            end = pattern.index("]", i + 1)
            out.append("[" + pattern[i + 1:end] + "]")
            i = end
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out), re.DOTALL)


class FakeRedis:
    """In-memory stand-in for the handful of redis.Redis calls RedisCache makes."""

    def __init__(self):
        self.data = {}
        self.expiry = {}

    def exists(self, key):
        return int(key in self.data)

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = bytes(value)
        if ex:
            self.expiry[key] = ex

    def delete(self, key):
        self.data.pop(key, None)

    def rename(self, src, dst):
        if src not in self.data:
            raise redis.ResponseError("no such key")
        self.data[dst] = self.data.pop(src)

    def scan_iter(self, match=None):
        rx = redis_glob(match or "*")
        for key in list(self.data):
            if rx.fullmatch(key):
                yield key.encode()


def test_redis_cache_contract_with_prefix_and_ttl():
    client = FakeRedis()
    c = RedisCache(client=client, prefix="t:", ttl_sec=60)
    assert isinstance(c, ContentCache)

    c.set("/r/a", b"hello")
    assert client.data["t:/r/a"] == b"hello"
    assert client.expiry["t:/r/a"] == 60
    assert c.has("/r/a")
    assert c.get("/r/a") == b"hello"

    c.rename("/r/a", "/r/b")
    assert not c.has("/r/a")
    assert c.get("/r/b") == b"hello"

    c.rename("/r/missing", "/r/c")  # no entry, nothing to move
    assert not c.has("/r/c")

    c.delete("/r/b")
    assert not c.has("/r/b")
    with pytest.raises(KeyError):
        c.get("/r/b")


def test_redis_cache_rename_prefix():
    client = FakeRedis()
    c = RedisCache(client=client, prefix="t:")
    c.set("/r/d/x", b"x")
    c.set("/r/dd", b"other")
    assert c.rename_prefix("/r/d/", "/r/e/") == 1
    assert c.get("/r/e/x") == b"x"
    assert c.has("/r/dd")


def test_redis_cache_requires_url_or_client():
    with pytest.raises(ValueError):
        RedisCache()


def test_redis_cache_rename_prefix_escapes_glob_characters():
    client = FakeRedis()
    c = RedisCache(client=client, prefix="t:")
    c.set("/r/d[1]/x", b"bracket")
    c.set("/r/d*/y", b"star")
    c.set("/r/d1/x", b"decoy")
    c.set("/r/dz/y", b"decoy")

    assert c.rename_prefix("/r/d[1]/", "/r/e1/") == 1
    assert c.get("/r/e1/x") == b"bracket"
    assert c.get("/r/d1/x") == b"decoy"

    assert c.rename_prefix("/r/d*/", "/r/e2/") == 1
    assert c.get("/r/e2/y") == b"star"
    assert c.get("/r/dz/y") == b"decoy"
