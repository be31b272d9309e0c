# server/main.py
from typing import Optional

from fastmcp import FastMCP
from cachedfs.di import Container, build_container
from cachedfs.logging import configure_logging
from server.tools.files import register_file_tools

def create_app(container: Optional[Container] = None) -> FastMCP:
    """
    Build DI container, create FastMCP host, and register tools.
    Keep the server (protocol) separate from tool/service logic.
    """
    container = container or build_container()

    mcp = FastMCP("CachedFS", version="0.1.0")

    # Register tools (thin adapters)
    register_file_tools(mcp, container.fs_service)

    return mcp


def main():
    container = build_container()
    configure_logging(container.settings.LOG_LEVEL)
    app = create_app(container)
    # stdio transport: client (agent/IDE) launches this process and speaks JSON-RPC on stdin/stdout
    app.run(transport="stdio")


if __name__ == "__main__":
    main()
