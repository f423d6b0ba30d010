from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from time import perf_counter
from typing import cast
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from structlog.contextvars import bind_contextvars, reset_contextvars

from backend.app.api.routes import router
from backend.app.dependencies import get_settings, get_telemetry
from backend.app.logging_config import configure_application_logging
from backend.app.models.article_contracts import ErrorResponse, PingResponse
from backend.app.services.errors import NewsProxyError

LOGGER = logging.getLogger("gmn_news.http")


def ping() -> PingResponse:
    return PingResponse()


@asynccontextmanager
async def app_lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_application_logging(settings)
    LOGGER.info(
        "gmn news api ready host=%s port=%s trusted_domain=%s",
        settings.host,
        settings.port,
        settings.trusted_domain,
    )
    yield


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


async def handle_news_proxy_error(request: Request, exc: Exception) -> Response:
    error = cast(NewsProxyError, exc)
    level = logging.WARNING if error.status_code < 500 else logging.ERROR
    LOGGER.log(
        level,
        "request failed status=%s error=%s detail=%s path=%s",
        error.status_code,
        error.public_message,
        error,
        request.url.path,
    )
    return _error_response(error.status_code, error.public_message)


async def handle_request_validation_error(request: Request, exc: Exception) -> Response:
    validation_error = cast(RequestValidationError, exc)
    LOGGER.warning(
        "request rejected invalid parameters path=%s errors=%s",
        request.url.path,
        len(validation_error.errors()),
    )
    return _error_response(400, "Invalid query parameters")


def create_app() -> FastAPI:
    app = FastAPI(title="GMN News API", version="1.0.0", lifespan=app_lifespan)
    settings = get_settings()

    async def request_context_middleware(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        telemetry = get_telemetry()
        incoming_request_id = request.headers.get("X-Request-ID")
        request_id = (
            incoming_request_id.strip()
            if isinstance(incoming_request_id, str) and incoming_request_id.strip()
            else str(uuid4())
        )
        context_tokens = bind_contextvars(
            http_request_id=request_id,
            http_method=request.method,
            http_path=request.url.path,
        )
        started_at = perf_counter()
        telemetry.emit(
            "http.request.start",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        except Exception as exc:
            telemetry.emit(
                "http.request.error",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                duration_ms=int((perf_counter() - started_at) * 1000),
                error_type=type(exc).__name__,
            )
            raise
        else:
            response.headers["X-Request-ID"] = request_id
            telemetry.emit(
                "http.request.finish",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                duration_ms=int((perf_counter() - started_at) * 1000),
                status_code=response.status_code,
            )
            return response
        finally:
            reset_contextvars(**context_tokens)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.middleware("http")(request_context_middleware)
    app.add_exception_handler(NewsProxyError, handle_news_proxy_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.include_router(router)
    app.add_api_route(
        "/ping",
        ping,
        methods=["GET"],
        response_model=PingResponse,
        tags=["system"],
        operation_id="ping",
    )

    return app


app = create_app()
