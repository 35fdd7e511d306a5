"""Custom exceptions for the portal lifecycle engine"""
from typing import Optional, Dict, Any

from portal.lifecycle.error_codes import ErrorCode, ErrorCodeDictionary


class PortalError(Exception):
    """Base exception for lifecycle errors"""

    default_code: ErrorCode = ErrorCodeDictionary.VALIDATION_003

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[ErrorCode] = None,
        entity_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code or self.default_code
        self.message = message or self.error_code.message
        self.entity_id = entity_id
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {
            "code": self.error_code.code,
            "message": self.message,
            "remediation_steps": self.error_code.remediation_steps,
            "entity_id": self.entity_id,
            "context": self.context,
        }


class AuthenticationRequired(PortalError):
    """Action needs a logged-in identity"""
    default_code = ErrorCodeDictionary.AUTH_001


class AuthorizationDenied(PortalError):
    """Identity present but the capability or role check failed"""
    default_code = ErrorCodeDictionary.AUTHZ_001


class NoCapability(AuthorizationDenied):
    """User holds no content capability at all and should request access"""
    default_code = ErrorCodeDictionary.AUTHZ_002


class AccountSuspended(AuthorizationDenied):
    """Suspended or rejected account; overrides any capability"""
    default_code = ErrorCodeDictionary.AUTHZ_003


class InvalidTransition(PortalError):
    """State machine precondition violated"""
    default_code = ErrorCodeDictionary.STATE_001


class ValidationError(PortalError):
    """Required field missing or malformed"""
    default_code = ErrorCodeDictionary.VALIDATION_001


class EmptyRequest(ValidationError):
    """Access request without any requested user types"""
    default_code = ErrorCodeDictionary.VALIDATION_002


class NotFound(PortalError):
    """Referenced entity does not exist (or is not visible to the caller)"""
    default_code = ErrorCodeDictionary.NOT_FOUND_001


class Conflict(PortalError):
    """Duplicate or already-satisfied request"""
    default_code = ErrorCodeDictionary.CONFLICT_003


class AlreadyGranted(Conflict):
    """Every requested user type is already held"""
    default_code = ErrorCodeDictionary.CONFLICT_001


class DuplicateRequest(Conflict):
    """A pending access request already covers the requested types"""
    default_code = ErrorCodeDictionary.CONFLICT_002


# Error code -> exception class, used by the HTTP client to rebuild errors
EXCEPTIONS_BY_CODE = {
    cls.default_code.code: cls
    for cls in (
        AuthenticationRequired,
        AuthorizationDenied,
        NoCapability,
        AccountSuspended,
        InvalidTransition,
        ValidationError,
        EmptyRequest,
        NotFound,
        Conflict,
        AlreadyGranted,
        DuplicateRequest,
    )
}
EXCEPTIONS_BY_CODE[ErrorCodeDictionary.AUTH_002.code] = AuthenticationRequired
EXCEPTIONS_BY_CODE[ErrorCodeDictionary.VALIDATION_003.code] = ValidationError
