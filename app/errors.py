"""
Alumni Portal – error taxonomy.

Every failure a user action can run into is a ``PortalError`` subclass that
carries the HTTP status it maps to. ``register_exception_handlers`` turns them
into ``{"error": reason}`` JSON payloads so no single endpoint failure can
take the application down.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

logger = logging.getLogger(__name__)


class PortalError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Please sign in to continue"


class PermissionDenied(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed"


class NotFound(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class EmptyContent(PortalError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Content cannot be empty"


class MissingRequiredField(PortalError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Please fill in all required fields"

    def __init__(self, *fields: str):
        self.fields = list(fields)
        message = None
        if fields:
            message = f"Missing required fields: {', '.join(fields)}"
        super().__init__(message)


class ConstraintViolation(PortalError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "The operation conflicts with existing data"


class TransportFailure(PortalError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage is unavailable, please try again later"


class ConfigurationError(PortalError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server is misconfigured"


def require_text(value, field: str) -> str:
    """Return ``value`` stripped, or raise ``MissingRequiredField``."""
    text = (value or "").strip()
    if not text:
        raise MissingRequiredField(field)
    return text


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        if isinstance(exc, ConfigurationError):
            logger.error("Configuration error on %s: %s", request.url.path, exc.message)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(OperationalError)
    @app.exception_handler(InterfaceError)
    async def storage_error_handler(request: Request, exc: Exception):
        logger.error("Storage failure on %s: %s", request.url.path, exc)
        failure = TransportFailure()
        return JSONResponse({"error": failure.message}, status_code=failure.status_code)
