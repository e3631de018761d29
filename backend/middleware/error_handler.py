"""
Global Error Handlers for Jordan Yells
Every error response has the shape {"error", "detail", "path", ...}.
"""

import logging
import traceback
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from exceptions import JordanYellsException
from config.settings import get_settings

logger = logging.getLogger(__name__)


def error_body(request: Request, code: str, detail: Any, **extra) -> Dict[str, Any]:
    return {"error": code, "detail": detail, "path": str(request.url.path), **extra}


def setup_error_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers on the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    @app.exception_handler(JordanYellsException)
    async def app_exception_handler(request: Request, exc: JordanYellsException) -> JSONResponse:
        logger.warning(
            f"Request failed: {exc.code} - {exc.message}",
            extra={
                "code": exc.code,
                "status_code": exc.status_code,
                "path": str(request.url.path),
                "method": request.method,
                "details": exc.details
            }
        )
        body = error_body(request, exc.code, exc.message)
        if exc.details:
            body["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.warning(
            f"HTTP error: {exc.status_code} - {exc.detail}",
            extra={
                "status_code": exc.status_code,
                "path": str(request.url.path),
                "method": request.method
            }
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(request, "HTTP_ERROR", exc.detail)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        formatted_errors = [
            {
                "field": ".".join(str(loc) for loc in error.get("loc", [])),
                "message": error.get("msg", "Validation error"),
                "type": error.get("type", "unknown")
            }
            for error in exc.errors()
        ]

        logger.warning(
            f"Validation error on {request.url.path}",
            extra={"path": str(request.url.path), "method": request.method, "errors": formatted_errors}
        )

        return JSONResponse(
            status_code=422,
            content=error_body(
                request, "VALIDATION_ERROR", "Request validation failed",
                validation_errors=formatted_errors
            )
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled exception: {type(exc).__name__} - {exc}",
            exc_info=True,
            extra={
                "path": str(request.url.path),
                "method": request.method,
                "exception_type": type(exc).__name__
            }
        )

        # Only show detailed error in debug mode
        detail = str(exc) if settings.DEBUG else "An unexpected error occurred"
        body = error_body(request, "INTERNAL_SERVER_ERROR", detail)
        if settings.DEBUG:
            body["traceback"] = traceback.format_exc()

        return JSONResponse(status_code=500, content=body)
