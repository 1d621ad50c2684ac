"""
Application error taxonomy and FastAPI exception handlers.

Every failure leaves the API as ``{"success": false, "error": <message>}``
with the status code of the raised error. Stack traces are logged, never
returned.
"""
import logging
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.requests import Request

from app.core.logging import get_request_id

logger = logging.getLogger(__name__)


class AppError(Exception):
    code = "app_error"
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code


class ValidationError(AppError, ValueError):
    code = "validation_error"
    status_code = 400


class AuthenticationError(AppError):
    code = "authentication_error"
    status_code = 401


class AuthorizationError(AppError):
    code = "forbidden"
    status_code = 403


class PlanLimitError(AuthorizationError):
    """Raised when the caller's plan does not allow another resource."""
    code = "plan_limit"


class NotFoundError(AppError, LookupError):
    code = "not_found"
    status_code = 404


class ConflictError(AppError):
    """Duplicate unique key or a lost compare-and-swap."""
    code = "conflict"
    status_code = 400


class InternalError(AppError):
    code = "internal_error"
    status_code = 500


def _extract_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or get_request_id() or str(uuid4())


def error_response(status_code: int, message: str, request_id: str) -> JSONResponse:
    response = JSONResponse(status_code=status_code, content={"success": False, "error": message})
    response.headers["x-request-id"] = request_id
    return response


async def app_error_handler(request: Request, exc: AppError):
    rid = _extract_request_id(request)
    log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        log_level,
        f"{exc.code}: {exc.message}",
        extra={"request_id": rid, "error_code": exc.code, "status": exc.status_code},
    )
    return error_response(exc.status_code, exc.message, rid)


async def http_error_handler(request: Request, exc: HTTPException):
    rid = _extract_request_id(request)
    message = exc.detail if exc.detail else "HTTP error"
    logger.warning(f"http error {exc.status_code}: {message}", extra={"request_id": rid})
    response = error_response(exc.status_code, str(message), rid)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_handler(request: Request, exc: RequestValidationError):
    rid = _extract_request_id(request)
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    logger.info(f"request validation failed: {message}", extra={"request_id": rid})
    return error_response(400, message, rid)


async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = _extract_request_id(request)
    logger.error("unhandled exception", exc_info=exc, extra={"request_id": rid})
    return error_response(500, "Server error", rid)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
