"""
FastAPI application for the evolvedash backend.

`create_app()` builds the app; its lifespan opens the service graph for the
project (database connection, spec store, feature registry, generator) and
closes it on shutdown.

Usage:
    uvicorn --factory evolvedash.api.app:create_app
"""

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from evolvedash import __version__
from evolvedash.api.routes import dashboard, features, spec, system
from evolvedash.core.config import DashConfig, load_config
from evolvedash.core.errors import (
    GeneratorError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from evolvedash.core.harness import GeneratorBackend
from evolvedash.core.services import open_services
from evolvedash.utils.project import resolve_project_dir

logger = logging.getLogger(__name__)


# Error codes for consistent error responses
class ErrorCode(str, Enum):
    """Standard error codes for API responses."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Server errors (5xx)
    SPEC_STORE_ERROR = "SPEC_STORE_ERROR"
    GENERATOR_ERROR = "GENERATOR_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error_code: ErrorCode
    message: str
    detail: str | None = None
    request_id: str | None = None


def _error_response(
    request: Request,
    http_status: int,
    error_code: ErrorCode,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        detail=detail if detail is not None else message,
        request_id=str(id(request)),
    )
    return JSONResponse(status_code=http_status, content=body.model_dump(mode="json"))


def _log_http_error(request: Request, http_status: int, message: str) -> None:
    log = logger.error if http_status >= 500 else logger.info
    log(
        "HTTP %d on %s %s: %s",
        http_status,
        request.method,
        request.url.path,
        message,
        extra={"request_id": id(request)},
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Rejected input: 400."""
    _log_http_error(request, status.HTTP_400_BAD_REQUEST, str(exc))
    return _error_response(
        request, status.HTTP_400_BAD_REQUEST, ErrorCode.VALIDATION_ERROR, str(exc)
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Unknown id: 404."""
    _log_http_error(request, status.HTTP_404_NOT_FOUND, str(exc))
    return _error_response(request, status.HTTP_404_NOT_FOUND, ErrorCode.NOT_FOUND, str(exc))


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Spec document unreadable or unwritable: 500."""
    _log_http_error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.SPEC_STORE_ERROR,
        "Spec document operation failed",
        str(exc),
    )


async def generator_error_handler(request: Request, exc: GeneratorError) -> JSONResponse:
    """Generator failure that escaped the orchestrator: 500."""
    _log_http_error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.GENERATOR_ERROR,
        "Generator failed",
        str(exc),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle FastAPI HTTPException with consistent error response format.

    Converts HTTPException to our standard error response format with error codes.
    """
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_code = ErrorCode.NOT_FOUND
    elif exc.status_code < 500:
        error_code = ErrorCode.INVALID_REQUEST
    else:
        error_code = ErrorCode.INTERNAL_ERROR

    detail_msg = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    _log_http_error(request, exc.status_code, detail_msg)
    return _error_response(request, exc.status_code, error_code, detail_msg)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle validation errors from Pydantic models and query parameters.

    Returns a clean JSON response without exposing internal implementation details.
    """
    logger.warning(
        "Validation error on %s %s: %s",
        request.method,
        request.url.path,
        exc.errors(),
        extra={"request_id": id(request)},
    )

    # Extract first error for user-friendly message
    first_error = exc.errors()[0] if exc.errors() else {}
    field = " -> ".join(str(loc) for loc in first_error.get("loc", []))
    error_msg = first_error.get("msg", "Invalid input")

    return _error_response(
        request,
        422,
        ErrorCode.VALIDATION_ERROR,
        "Request validation failed",
        f"{field}: {error_msg}" if field else error_msg,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all uncaught exceptions.

    Logs the full exception with traceback, but returns a clean error
    response to the client without exposing internal details.
    """
    logger.error(
        "Unhandled exception on %s %s: %s\n%s",
        request.method,
        request.url.path,
        str(exc),
        traceback.format_exc(),
        extra={"request_id": id(request)},
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_ERROR,
        "An internal server error occurred",
    )


def create_app(
    config: DashConfig | None = None,
    project_dir: Path | None = None,
    backend: GeneratorBackend | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Configuration (loaded for the project when omitted)
        project_dir: Project root (discovered from the working directory when omitted)
        backend: Generator backend overriding the configured one

    Returns:
        FastAPI app whose lifespan owns the service graph
    """
    project_dir = project_dir.resolve() if project_dir else resolve_project_dir()
    if config is None:
        config = load_config(project_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        with open_services(config, project_dir, backend=backend) as services:
            app.state.services = services
            yield
        logger.info("Services closed")

    app = FastAPI(
        title="evolvedash API",
        description="Backend for a dashboard that grows new components from feature requests",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(features.router, prefix="/api", tags=["features"])
    app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])
    app.include_router(spec.router, prefix="/api", tags=["spec"])
    app.include_router(system.router, prefix="/api", tags=["system"])

    app.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StoreError, store_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(GeneratorError, generator_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)

    return app
