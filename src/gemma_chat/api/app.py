"""FastAPI application factory for the gemma-chat service.

Endpoints: /health, /api/sessions*, /api/chat, /api/clear and the static
front-end on /.
"""
from __future__ import annotations

import logging
import os
import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from chat_core import metrics
from chat_core.config import AggregatedConfig, get_config, project_path
from chat_core.errors import ChatError, InvalidMessageError
from chat_core.llm import ModelProvider
from chat_core.llm.factory import get_provider
from chat_core.logging_setup import configure_logging
from chat_core.sessions import SessionManager
from gemma_chat.api.routes.chat import router as chat_router
from gemma_chat.api.routes.sessions import router as sessions_router

logger = logging.getLogger("gemma_chat.api")


def _static_dir(cfg: AggregatedConfig) -> str:
    return str(project_path(cfg.server.static_dir))


def _route_label(request: Request) -> str:
    """Route template for metric labels; raw paths would grow unbounded."""
    route = request.scope.get("route")
    if route is not None and getattr(route, "path", None):
        return route.path
    if isinstance(request.scope.get("endpoint"), StaticFiles):
        return "static"
    return "unmatched"


def create_app(
    sessions: SessionManager | None = None,
    provider: ModelProvider | None = None,
    config: AggregatedConfig | None = None,
) -> FastAPI:
    cfg = config or get_config()
    configure_logging(cfg.logging)

    app = FastAPI(
        title="gemma-chat",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
    )
    app.state.sessions = sessions or SessionManager()
    app.state.provider = provider or get_provider()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ChatError)
    async def _chat_error(request: Request, exc: ChatError):  # noqa: D401
        logger.warning(
            "%s %s -> %d %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.error_type,
        )
        return JSONResponse(
            status_code=exc.status_code, content={"error": exc.message}
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(
        request: Request, exc: RequestValidationError
    ):
        # An unparseable chat body is a missing message, not a 422.
        if request.url.path == "/api/chat":
            return await _chat_error(request, InvalidMessageError())
        return await request_validation_exception_handler(request, exc)

    @app.get("/health")
    def health():  # noqa: D401
        return {"status": "OK"}

    app.include_router(sessions_router)
    app.include_router(chat_router)

    static_dir = _static_dir(cfg)

    @app.get("/", include_in_schema=False)
    def _root_index():  # noqa: D401
        index_path = os.path.join(static_dir, "index.html")
        if not os.path.exists(index_path):
            raise HTTPException(status_code=404, detail="index.html not found")
        return FileResponse(index_path)

    # Remaining front-end assets (css/js) are served from the same directory.
    if os.path.isdir(static_dir):
        app.mount("/", StaticFiles(directory=static_dir), name="ui")
    else:
        logger.warning("static directory %s not found", static_dir)

    @app.middleware("http")
    async def _metrics_mw(request: Request, call_next):  # noqa: D401
        start = time.time()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            duration_ms = (time.time() - start) * 1000.0
            # Routing has filled in the scope by now.
            labels = {
                "route": _route_label(request),
                "method": request.method,
            }
            metrics.inc("api_request_total", labels)
            metrics.observe("api_request_latency_ms", duration_ms, labels)
            if status >= 400:
                metrics.inc(
                    "api_request_errors_total", labels | {"status": status}
                )

    return app


app = create_app()


def main() -> None:  # pragma: no cover
    import uvicorn

    cfg = get_config()
    logger.info(
        "chat app starting: http://localhost:%d", cfg.server.port
    )
    logger.info(
        "make sure Ollama is running at %s; on first run fetch the model "
        "with: ollama pull %s",
        cfg.ollama.api_url,
        cfg.ollama.model,
    )
    uvicorn.run(app, host=cfg.server.host, port=cfg.server.port)


if __name__ == "__main__":  # pragma: no cover
    main()
