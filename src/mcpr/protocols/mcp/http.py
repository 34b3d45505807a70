"""HTTP transport — one JSON-RPC envelope per ``POST /mcp``.

Built on FastAPI and served by uvicorn.  JSON-RPC errors travel in the
response body with status 200; a body the codec rejects (not JSON, not a
request object, non-object params) gets a 400.  Notifications are
acknowledged with an empty 202.

Each ``/mcp`` call is dispatched on the worker thread pool, so a slow tool
never blocks the event loop or other requests.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from mcpr.protocols.errors import PARSE_ERROR, ProtocolError
from mcpr.protocols.mcp.codec import decode, encode
from mcpr.protocols.mcp.models import PROTOCOL_VERSION, JsonRpcResponse

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from mcpr.protocols.mcp.dispatcher import MCPDispatcher

logger = logging.getLogger(__name__)

_JSON = "application/json"


def _json_response(response: JsonRpcResponse, status_code: int = 200) -> Response:
    return Response(content=encode(response), status_code=status_code, media_type=_JSON)


def create_app(dispatcher: MCPDispatcher) -> FastAPI:
    """Build the FastAPI application exposing *dispatcher*.

    Endpoints: ``POST /mcp`` (JSON-RPC), ``GET /health`` and ``GET /``.
    """
    info = dispatcher.server_info
    app = FastAPI(title=info.name, version=info.version, docs_url=None, redoc_url=None)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        client = request.client.host if request.client else "unknown"
        logger.info(
            "[%s] %s %s -> %d (%.1f ms)",
            client,
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    @app.post("/mcp")
    async def mcp_endpoint(request: Request) -> Response:
        body = await request.body()
        if not body.strip():
            return _json_response(
                JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error: Empty request body"),
                status_code=400,
            )

        try:
            message = decode(body)
        except ProtocolError as exc:
            logger.warning("Rejected request body: %s", exc)
            return _json_response(
                JsonRpcResponse.failure(None, exc.code, exc.default_message, data=str(exc)),
                status_code=400,
            )

        response = await run_in_threadpool(dispatcher.handle, message)
        if response is None:
            return Response(status_code=202)

        if response.error is not None:
            logger.warning("JSON-RPC error %d: %s", response.error.code, response.error.message)
        return Response(content=dispatcher.encode(response), media_type=_JSON)

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "server": info.name,
            "version": info.version,
            "transport": "http",
        }

    @app.get("/")
    def server_info() -> dict[str, Any]:
        return {
            "name": info.name,
            "version": info.version,
            "mcp_version": PROTOCOL_VERSION,
            "transport": "http",
            "endpoint": "/mcp",
            "capabilities": dispatcher.registry.capabilities(),
        }

    return app


class HttpTransport:
    """Serves the :func:`create_app` application with uvicorn.

    Requires the ``uvicorn`` package (installed with ``mcpr``).
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 8080,
        *,
        log_level: str = "info",
    ) -> None:
        self.host = host
        self.port = port
        self._log_level = log_level
        self._server: Any = None  # uvicorn.Server

    def serve(self, dispatcher: MCPDispatcher) -> None:
        """Block serving HTTP until interrupted or :meth:`stop` is called."""
        import uvicorn

        config = uvicorn.Config(
            create_app(dispatcher),
            host=self.host,
            port=self.port,
            log_level=self._log_level,
        )
        self._server = uvicorn.Server(config)
        logger.info(
            "Starting MCP HTTP server on http://%s:%d/mcp (%s v%s)",
            self.host,
            self.port,
            dispatcher.server_info.name,
            dispatcher.server_info.version,
        )
        try:
            self._server.run()
        finally:
            self._server = None

    def stop(self) -> None:
        if self._server is not None:
            self._server.should_exit = True
