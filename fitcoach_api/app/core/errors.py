"""
Error taxonomy shared by services and routers.

Services raise the exceptions defined here instead of ``HTTPException``
so that they stay independent of the web layer.  The handlers
registered by :func:`register_exception_handlers` translate every
error into a JSON body with an ``error`` label and a human‑readable
``message`` (plus ``details`` for validation failures).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        error: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self.message = message or self.default_message
        if error is not None:
            self.error = error
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"
    default_message = "Request validation failed"


class AuthError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Access denied"
    default_message = "Authentication required"


class MissingTokenError(AuthError):
    default_message = "No token provided"


class InvalidTokenError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Invalid token"
    default_message = "Token verification failed"


class AuthenticationFailed(AuthError):
    error = "Authentication failed"
    default_message = "Invalid credentials"


class PermissionDenied(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"
    default_message = "Insufficient permissions"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"
    default_message = "Resource not found"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"
    default_message = "Resource conflict"


class InternalError(ServiceError):
    pass


def _validation_details(exc: RequestValidationError) -> List[Dict[str, Any]]:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        details.append(
            {
                "location": loc[0] if loc else "",
                "field": ".".join(loc[1:]),
                "message": err.get("msg", ""),
                "type": err.get("type", ""),
            }
        )
    return details


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(details=_validation_details(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        body = {"error": "Not Found", "message": f"Route {request.url.path} not found"}
    else:
        label = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        body = {"error": label, "message": label}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Only the generic label goes back to the caller.
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to ``app``."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
