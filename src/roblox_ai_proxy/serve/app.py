"""FastAPI relay between the Roblox Studio plugin and LLM providers.

Endpoints:
- GET /
- POST /generate  { "messages": [...], "model": "...", "apiKey": "...", "context": "..." }
- POST /test
"""
from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from roblox_ai_proxy.common.config import Settings, get_settings
from roblox_ai_proxy.common.logging_setup import setup_logging
from roblox_ai_proxy.common.schema import ErrorResponse, GenerationRequest, GenerationResponse
from roblox_ai_proxy.relay import service
from roblox_ai_proxy.relay.credentials import has_fallback_key
from roblox_ai_proxy.relay.errors import RelayError

LOGGER = logging.getLogger("roblox_ai_proxy.serve.app")

AVAILABLE_ROUTES = ["GET /", "POST /generate", "POST /test"]

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error_json(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _validation_summary(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Roblox AI Proxy")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RelayError)
    async def _relay_error(request: Request, exc: RelayError) -> JSONResponse:
        level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        LOGGER.log(
            level,
            "%s %s -> %s %s (%s)",
            request.method,
            request.url.path,
            exc.status_code,
            exc.error,
            exc.details,
        )
        return _error_json(exc.status_code, exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = _validation_summary(exc)
        LOGGER.warning("%s %s -> 400 invalid body (%s)", request.method, request.url.path, details)
        return _error_json(400, ErrorResponse(error="Invalid request body.", details=details))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code in (404, 405):
            LOGGER.info("404 - Unknown route: %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Not Found",
                    "message": f"Route {request.method} {request.url.path} not found",
                    "availableRoutes": AVAILABLE_ROUTES,
                },
            )
        LOGGER.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.detail)
        return _error_json(exc.status_code, ErrorResponse(error=str(exc.detail)))

    @app.get("/")
    def health() -> dict[str, Any]:
        LOGGER.debug("GET / - Health check requested")
        return {
            "status": "ok",
            "message": "Roblox AI Proxy Server is running!",
            "running": True,
            "timestamp": _now(),
            "defaultModel": settings.default_model,
            "hasApiKey": has_fallback_key(settings),
            "fallbackProviders": list(settings.fallback_providers),
        }

    @app.post("/test")
    def echo(body: Any = Body(default=None)) -> dict[str, Any]:
        LOGGER.info("POST /test - Test endpoint hit")
        return {"message": "Test successful", "received": body, "timestamp": _now()}

    @app.post("/generate", response_model=GenerationResponse, responses=_ERROR_RESPONSES)
    def generate(body: GenerationRequest) -> GenerationResponse:
        return service.generate(body, settings)

    return app


setup_logging(get_settings().log_level)
app = create_app()
