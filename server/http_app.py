# server/http_app.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse

from cachedfs.config import Settings
from cachedfs.di import Container, build_container
from cachedfs.logging import configure_logging
from cachedfs.services.paths import ContainmentError

from server.registry import build_tool_registry, list_tools_payload, dispatch_tool_call

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2025-03-26"  # aligns with current spec draft dates


def _jsonrpc_error(id_: Any, code: int, message: str, data: Any | None = None) -> JSONResponse:
    body: Dict[str, Any] = {"jsonrpc": "2.0", "id": id_, "error": {"code": code, "message": message}}
    if data is not None:
        body["error"]["data"] = data
    return JSONResponse(body)

def _jsonrpc_result(id_: Any, result: Any) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": id_, "result": result})

def _content_block(result: Any) -> Dict[str, Any]:
    if isinstance(result, (dict, list)):
        return {"type": "json", "json": result}
    return {"type": "text", "text": str(result)}


def create_http_app(container: Optional[Container] = None) -> FastAPI:
    container = container or build_container()
    settings: Settings = container.settings
    registry = build_tool_registry(container)

    app = FastAPI(title="CachedFS MCP HTTP Server", version="0.1.0")

    # ---------- Security: Origin validation & Bearer token ----------

    def _origin_allowed(req: Request) -> bool:
        origin = req.headers.get("origin")
        if not origin:
            return settings.MCP_HTTP_ALLOW_NO_ORIGIN
        allowed = {o.strip().lower() for o in settings.MCP_HTTP_ALLOWED_ORIGINS.split(",") if o.strip()}
        return origin.lower() in allowed

    def _require_auth(req: Request):
        auth = req.headers.get("authorization", "")
        if not auth.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Missing Bearer token")
        token = auth.split(" ", 1)[1]
        if token != settings.MCP_HTTP_BEARER_TOKEN:
            raise HTTPException(status_code=401, detail="Invalid Bearer token")

    @app.middleware("http")
    async def origin_validation_mw(request: Request, call_next):
        # MCP spec requires Origin validation to prevent DNS rebinding
        if not _origin_allowed(request):
            return JSONResponse({"error": {"code": 403, "message": "Forbidden origin"}}, status_code=403)
        return await call_next(request)

    # ---------- MCP JSON-RPC endpoint (Streamable HTTP) ----------

    @app.post(settings.MCP_HTTP_PATH)
    async def mcp_endpoint(request: Request):
        _require_auth(request)

        try:
            payload = await request.json()
        except ValueError:
            return _jsonrpc_error(None, -32700, "Parse error")

        if not isinstance(payload, dict):
            # batches and bare values are not supported
            return _jsonrpc_error(None, -32600, "Invalid Request")

        id_ = payload.get("id")
        method = payload.get("method")
        params = payload.get("params", {})

        if method == "initialize":
            return _jsonrpc_result(id_, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": "cachedfs-mcp-http", "version": "0.1.0"},
            })

        if method == "tools/list":
            return _jsonrpc_result(id_, list_tools_payload(registry))

        if method == "tools/call":
            name = params.get("name")
            args = params.get("arguments", {})
            if name not in registry:
                return _jsonrpc_error(id_, -32601, f"Tool not found: {name}")
            try:
                result = dispatch_tool_call(registry, name, args)
            except (ContainmentError, TypeError, ValueError) as e:
                # disallowed path or malformed arguments: the caller's fault
                return _jsonrpc_error(id_, -32602, "Invalid params", str(e))
            except OSError as e:
                # filesystem failures are tool-level errors, reported in the result
                text = f"{type(e).__name__}: {e.strerror or e}"
                return _jsonrpc_result(id_, {"content": [{"type": "text", "text": text}], "isError": True})
            except Exception as e:
                logger.exception("tool %s failed", name)
                return _jsonrpc_error(id_, -32603, "Internal error", str(e))

            return _jsonrpc_result(id_, {"content": [_content_block(result)], "isError": False})

        return _jsonrpc_error(id_, -32601, f"Method not found: {method}")

    return app


def main():
    import uvicorn
    s = Settings()
    configure_logging(s.LOG_LEVEL)
    uvicorn.run(
        "server.http_app:create_http_app",
        factory=True,
        host=s.MCP_HTTP_HOST,
        port=s.MCP_HTTP_PORT,
        reload=False,
    )


if __name__ == "__main__":
    main()
