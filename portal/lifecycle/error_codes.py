"""Error code dictionary - standardized error responses with remediation steps."""
from dataclasses import dataclass
from typing import ClassVar, Dict, List


@dataclass(frozen=True)
class ErrorCode:
    """
    Standardized error code with remediation.

    Attributes:
        code: Unique error code identifier (e.g., STATE_001)
        message: Human-readable error message
        remediation_steps: List of steps to resolve the error
    """

    code: str
    message: str
    remediation_steps: List[str]

    def to_dict(self) -> Dict[str, object]:
        """Convert error code to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "remediation_steps": self.remediation_steps,
        }


class ErrorCodeDictionary:
    """Catalog of every error the lifecycle engine can raise."""

    # Authentication (AUTH_*)
    AUTH_001: ClassVar[ErrorCode] = ErrorCode(
        code="AUTH_001",
        message="Authentication required",
        remediation_steps=[
            "Log in and retry with a bearer token",
            "If the token expired, log in again",
        ],
    )

    AUTH_002: ClassVar[ErrorCode] = ErrorCode(
        code="AUTH_002",
        message="Invalid email or password",
        remediation_steps=["Check the credentials and retry"],
    )

    # Authorization (AUTHZ_*)
    AUTHZ_001: ClassVar[ErrorCode] = ErrorCode(
        code="AUTHZ_001",
        message="You do not have permission to perform this action",
        remediation_steps=[
            "Ask an administrator for the required role",
            "Request the matching user type from your profile",
        ],
    )

    AUTHZ_002: ClassVar[ErrorCode] = ErrorCode(
        code="AUTHZ_002",
        message="Your account has no content capabilities yet",
        remediation_steps=[
            "Submit an access request for the user type you need",
            "Wait for an administrator to approve it",
        ],
    )

    AUTHZ_003: ClassVar[ErrorCode] = ErrorCode(
        code="AUTHZ_003",
        message="Your account is suspended or rejected",
        remediation_steps=["Contact a site administrator"],
    )

    # State machine (STATE_*)
    STATE_001: ClassVar[ErrorCode] = ErrorCode(
        code="STATE_001",
        message="Invalid state transition",
        remediation_steps=[
            "Only PENDING items can be approved or rejected",
            "Refresh the list; another reviewer may have acted already",
        ],
    )

    # Validation (VALIDATION_*)
    VALIDATION_001: ClassVar[ErrorCode] = ErrorCode(
        code="VALIDATION_001",
        message="Required fields are missing",
        remediation_steps=["Fill in every required field and resubmit"],
    )

    VALIDATION_002: ClassVar[ErrorCode] = ErrorCode(
        code="VALIDATION_002",
        message="Access request must name at least one user type",
        remediation_steps=["Select one or more user types to request"],
    )

    VALIDATION_003: ClassVar[ErrorCode] = ErrorCode(
        code="VALIDATION_003",
        message="Invalid field value",
        remediation_steps=["Check the field formats and retry"],
    )

    # Lookup (NOT_FOUND_*)
    NOT_FOUND_001: ClassVar[ErrorCode] = ErrorCode(
        code="NOT_FOUND_001",
        message="Resource not found",
        remediation_steps=["Verify the identifier", "The item may have been deleted"],
    )

    # Conflicts (CONFLICT_*)
    CONFLICT_001: ClassVar[ErrorCode] = ErrorCode(
        code="CONFLICT_001",
        message="All requested user types are already granted",
        remediation_steps=["Request only user types you do not hold yet"],
    )

    CONFLICT_002: ClassVar[ErrorCode] = ErrorCode(
        code="CONFLICT_002",
        message="A pending access request already covers these user types",
        remediation_steps=["Wait for the pending request to be reviewed"],
    )

    CONFLICT_003: ClassVar[ErrorCode] = ErrorCode(
        code="CONFLICT_003",
        message="A record with this value already exists",
        remediation_steps=["Use a different unique value (email, slug or key)"],
    )

    @classmethod
    def get(cls, code: str) -> ErrorCode:
        """
        Look up an error code by its identifier.

        Raises:
            KeyError: If the code is unknown
        """
        value = getattr(cls, code, None)
        if not isinstance(value, ErrorCode):
            raise KeyError(code)
        return value
