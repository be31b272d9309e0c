# cachedfs/config.py
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Filesystem sandbox
    SANDBOX_ROOT: Path = Path("./.sandbox")
    CANONICALIZE_SYMLINKS: bool = True   # reject symlinks that lead outside the root

    # Content cache
    CACHE_BACKEND: Literal["memory", "redis"] = "memory"
    CACHE_MAX_BYTES: int = 16_000_000    # memory backend budget; 0 disables caching

    # Redis (only for CACHE_BACKEND=redis)
    REDIS_URL: str | None = None
    REDIS_KEY_PREFIX: str = "cachedfs:"
    REDIS_TTL_SEC: int | None = None

    # HTTP MCP transport
    MCP_HTTP_HOST: str = "127.0.0.1"
    MCP_HTTP_PORT: int = 8080
    MCP_HTTP_PATH: str = "/mcp"

    # Security: Bearer token and allowed origins
    MCP_HTTP_BEARER_TOKEN: str = "change-me"         # set in .env for prod
    MCP_HTTP_ALLOWED_ORIGINS: str = "http://localhost, http://127.0.0.1"
    MCP_HTTP_ALLOW_NO_ORIGIN: bool = True            # allow non-browser clients

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
