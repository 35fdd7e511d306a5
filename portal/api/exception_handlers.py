"""Exception handlers for FastAPI application"""
import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from portal.exceptions import (
    AuthenticationRequired,
    AuthorizationDenied,
    Conflict,
    InvalidTransition,
    NotFound,
    PortalError,
    ValidationError,
)
from portal.lifecycle.error_codes import ErrorCodeDictionary

logger = logging.getLogger(__name__)

# Most specific class first; subclasses inherit their parent's status
STATUS_BY_EXCEPTION = (
    (AuthenticationRequired, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationDenied, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InvalidTransition, status.HTTP_409_CONFLICT),
    (Conflict, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
)


def status_for(exc: PortalError) -> int:
    for exc_class, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _error_response(request: Request, exc: PortalError, status_code: int, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": jsonable_encoder(exc.to_dict()),
            "path": str(request.url.path),
        },
        headers=headers,
    )


async def authentication_error_handler(request: Request, exc: AuthenticationRequired) -> JSONResponse:
    """Handle missing or invalid credentials"""
    return _error_response(
        request,
        exc,
        status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def authorization_error_handler(request: Request, exc: AuthorizationDenied) -> JSONResponse:
    """Handle capability, role and suspension refusals"""
    logger.info("Denied %s %s: %s", request.method, request.url.path, exc.error_code.code)
    return _error_response(request, exc, status.HTTP_403_FORBIDDEN)


async def transition_error_handler(request: Request, exc: InvalidTransition) -> JSONResponse:
    """Handle state machine precondition failures"""
    return _error_response(request, exc, status.HTTP_409_CONFLICT)


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Handle every other lifecycle error"""
    return _error_response(request, exc, status_for(exc))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors"""
    code = ErrorCodeDictionary.VALIDATION_003
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "code": code.code,
                "message": "Request validation failed",
                "remediation_steps": code.remediation_steps,
                "entity_id": None,
                "context": {"details": jsonable_encoder(exc.errors())},
            },
            "path": str(request.url.path),
        },
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Handle database integrity errors (e.g., unique constraint violations)"""
    error_message = str(exc.orig) if hasattr(exc, 'orig') else str(exc)
    logger.warning("Integrity error on %s: %s", request.url.path, error_message)

    if "unique" in error_message.lower() or "duplicate" in error_message.lower():
        return _error_response(
            request,
            Conflict(context={"details": error_message}),
            status.HTTP_409_CONFLICT,
        )

    return _error_response(
        request,
        ValidationError(
            message="Database constraint violation",
            error_code=ErrorCodeDictionary.VALIDATION_003,
            context={"details": error_message},
        ),
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


def register_exception_handlers(app) -> None:
    """Attach every handler to the application"""
    app.add_exception_handler(AuthenticationRequired, authentication_error_handler)
    app.add_exception_handler(AuthorizationDenied, authorization_error_handler)
    app.add_exception_handler(InvalidTransition, transition_error_handler)
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
