# tests/test_main.py
import logging
from pathlib import Path

from fastmcp import FastMCP

from cachedfs.config import Settings
from cachedfs.di import build_container
from cachedfs.logging import configure_logging, log_tool_call, redact_args
from cachedfs.services.cache import MemoryCache
from server import main as server_main
from server.main import create_app


def test_create_app_builds_stdio_host(tmp_path: Path):
    container = build_container(Settings(SANDBOX_ROOT=tmp_path, CACHE_MAX_BYTES=4096))
    assert isinstance(container.cache, MemoryCache)
    assert container.fs_service.cache is container.cache
    assert isinstance(create_app(container), FastMCP)


def test_tool_call_logging_redacts_and_summarizes(caplog):
    args = {"path": "a.txt", "owner": "jane@example.com", "content": "x" * 5000, "raw": b"abc"}
    safe = redact_args(args)
    assert safe["path"] == "a.txt"
    assert "jane@example.com" not in safe["owner"]
    assert safe["content"] == "<5000 chars>"
    assert safe["raw"] == "<3 bytes>"

    with caplog.at_level(logging.INFO):
        log_tool_call(logging.getLogger("test"), "fs_write", args)
    assert "fs_write" in caplog.text
    assert "x" * 300 not in caplog.text


def test_configure_logging_applies_level_when_already_configured(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "level", root.level)
    configure_logging("warning")
    assert root.level == logging.WARNING


def test_main_uses_log_level_from_settings(tmp_path: Path, monkeypatch):
    container = build_container(Settings(SANDBOX_ROOT=tmp_path, LOG_LEVEL="ERROR"))
    ran = []
    monkeypatch.setattr(server_main, "build_container", lambda: container)
    monkeypatch.setattr(FastMCP, "run", lambda self, **kw: ran.append(kw))
    root = logging.getLogger()
    monkeypatch.setattr(root, "level", root.level)

    server_main.main()
    assert root.level == logging.ERROR
    assert ran == [{"transport": "stdio"}]
