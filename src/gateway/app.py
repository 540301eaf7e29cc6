"""FastAPI application factory.

- /api/v1/*  bearer JWT required
- /healthz, /metrics, /docs, /openapi.json  exempt from auth
- every error body is {"success": false, "error": <code>, "message": <text>}
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from src.gateway.middleware.auth import decode_token, extract_bearer_token
from src.shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ChatFilesError,
    NotFoundError,
    UnsupportedPreviewError,
    ValidationError,
)
from src.shared.request_context import request_scope

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

logger = logging.getLogger(__name__)

_EXEMPT_PATHS = frozenset(
    {
        "/healthz",
        "/metrics",
        "/docs",
        "/openapi.json",
        "/redoc",
    }
)

REQUEST_ID_HEADER = "X-Request-ID"

# Most specific first; ChatFilesError catches the rest (SignerError etc.)
_STATUS_BY_ERROR: tuple[tuple[type[ChatFilesError], int], ...] = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ValidationError, 400),
    (UnsupportedPreviewError, 415),
)


def error_body(code: str, message: str) -> dict[str, Any]:
    return {"success": False, "error": code, "message": message}


def status_for(exc: ChatFilesError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


def create_app(
    *,
    jwt_secret: str | None = None,
    cors_origins: list[str] | None = None,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        jwt_secret: JWT verification secret. Falls back to JWT_SECRET_KEY env var.
        cors_origins: Allowed CORS origins. Falls back to CORS_ORIGINS env var.
        lifespan: Async context manager factory for startup/shutdown lifecycle.
    """
    secret = jwt_secret or os.environ.get("JWT_SECRET_KEY", "")
    if not secret:
        msg = "JWT_SECRET_KEY must be provided via argument or environment variable"
        raise ValueError(msg)

    origins = cors_origins or [
        o.strip() for o in os.environ.get("CORS_ORIGINS", "").split(",") if o.strip()
    ]

    app = FastAPI(
        title="Chat Files API",
        description="Presigned upload and download URLs for chat attachments and profile images",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.jwt_secret = secret

    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "DELETE"],
            allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        )

    # -- Error handlers --

    @app.exception_handler(ChatFilesError)
    async def _chat_files_error(_: Request, exc: ChatFilesError) -> JSONResponse:
        status = status_for(exc)
        if status >= 500:
            logger.error("Request failed code=%s: %s", exc.code, exc)
        return JSONResponse(status_code=status, content=error_body(exc.code, str(exc)))

    @app.exception_handler(RequestValidationError)
    async def _request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content=error_body("BAD_REQUEST", str(detail)))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        code_map = {
            404: "NOT_FOUND",
            405: "METHOD_NOT_ALLOWED",
        }
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(
                code_map.get(exc.status_code, "HTTP_ERROR"),
                str(exc.detail or f"HTTP {exc.status_code}"),
            ),
        )

    # -- Request id + auth middleware --

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next: Any) -> Response:
        with request_scope(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            response = await _authenticate_and_call(request, call_next)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

    async def _authenticate_and_call(request: Request, call_next: Any) -> Response:
        if request.method == "OPTIONS" or request.url.path in _EXEMPT_PATHS:
            return await call_next(request)

        # Unknown paths return 404, not 401
        route_matched = any(route.matches(request.scope)[0] != Match.NONE for route in app.routes)
        if not route_matched:
            return await call_next(request)

        token = extract_bearer_token(request.headers.get("authorization", ""))
        if not token:
            return JSONResponse(
                status_code=401,
                content=error_body("AUTH_FAILED", "Missing or malformed Authorization header"),
            )
        try:
            payload = decode_token(token, secret=secret)
        except AuthenticationError as exc:
            return JSONResponse(status_code=401, content=error_body(exc.code, str(exc)))

        request.state.user_id = payload.user_id
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content=error_body("INTERNAL_ERROR", "Internal server error"),
            )

    # -- Exempt routes --

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", tags=["system"], include_in_schema=False)
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
