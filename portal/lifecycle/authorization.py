"""Capability-to-action authorization map.

Pure functions over a SessionContext. Nothing here touches the database, so
every rule can be checked without a request or a UI.

Action identifiers are dotted ``<target>.<verb>`` strings, e.g.
``home-tutors.create``, ``blogs.approve``, ``users.manage``.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from portal.db.enums import AccountStatus, Role, UserType
from portal.exceptions import (
    AccountSuspended,
    AuthenticationRequired,
    AuthorizationDenied,
    NoCapability,
)
from portal.lifecycle.kinds import SubmittableKind


class Decision(str, Enum):
    """Outcome of an authorization check"""
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    SUSPENDED = "suspended"
    NO_CAPABILITY = "no_capability"
    DENIED = "denied"


ADMIN_ROLES: FrozenSet[str] = frozenset({Role.SUPER_ADMIN.value, Role.ADMIN.value})
REVIEWER_ROLES: FrozenSet[str] = ADMIN_ROLES | {Role.AREA_MODERATOR.value}

# Account states that lose every mutating permission
BLOCKED_STATUSES: FrozenSet[AccountStatus] = frozenset(
    {AccountStatus.SUSPENDED, AccountStatus.REJECTED}
)

MUTATING_VERBS: FrozenSet[str] = frozenset(
    {"create", "update", "delete", "approve", "reject", "manage", "review"}
)

# Always allowed, even without a session
PUBLIC_ACTIONS: FrozenSet[str] = frozenset({"public.view"})

# Allowed for any logged-in identity
AUTHENTICATED_ACTIONS: FrozenSet[str] = frozenset(
    {"profile.view", "access_requests.create", "access_requests.view_own"}
)

_REVIEW_PERMISSIONS = {"*.approve", "*.reject", "*.view_pending", "*.view_all", "access_requests.review"}
_ADMIN_PERMISSIONS = _REVIEW_PERMISSIONS | {
    "*.create",
    "*.update",
    "*.delete",
    "users.manage",
    "upazilas.manage",
    "sliders.manage",
    "settings.manage",
}

# Permission definitions keyed by capability (user type or role value).
# Supports wildcards on either side of the dot ("*.create", "users.*").
PERMISSIONS: Dict[str, Set[str]] = {
    Role.SUPER_ADMIN.value: set(_ADMIN_PERMISSIONS),
    Role.ADMIN.value: set(_ADMIN_PERMISSIONS),
    Role.AREA_MODERATOR.value: set(_REVIEW_PERMISSIONS),
    # Role and user type share the same string value
    Role.CONTENT_VOLUNTEER.value: {
        f"{SubmittableKind.BLOGS.value}.create",
        f"{SubmittableKind.TOURIST_PLACES.value}.create",
    },
    UserType.HOME_TUTOR.value: {f"{SubmittableKind.HOME_TUTORS.value}.create"},
    UserType.TO_LET_OWNER.value: {f"{SubmittableKind.TO_LETS.value}.create"},
    UserType.BUSINESS_OWNER.value: {f"{SubmittableKind.BUSINESSES.value}.create"},
    UserType.GENERAL_USER.value: set(),
}


@dataclass(frozen=True)
class SessionContext:
    """
    Identity of the caller, passed explicitly to every authorization check.

    Built once per request (server) or once per login (client) and never
    mutated; a new context replaces it after login, refresh or logout.
    """

    user_id: int
    user_types: FrozenSet[str] = field(default_factory=frozenset)
    roles: FrozenSet[str] = field(default_factory=frozenset)
    approval_status: AccountStatus = AccountStatus.PENDING
    email: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "SessionContext":
        """Build a context from a User model (or any object with the same attributes)."""
        return cls(
            user_id=user.id,
            user_types=frozenset(user.user_types or []),
            roles=frozenset(user.roles or []),
            approval_status=AccountStatus(user.approval_status),
            email=getattr(user, "email", None),
        )

    @property
    def capabilities(self) -> FrozenSet[str]:
        """Union of user types and roles"""
        return self.user_types | self.roles

    @property
    def is_admin(self) -> bool:
        return bool(self.roles & ADMIN_ROLES)

    @property
    def is_reviewer(self) -> bool:
        return bool(self.roles & REVIEWER_ROLES)

    @property
    def is_blocked(self) -> bool:
        return self.approval_status in BLOCKED_STATUSES


def _matches(permission: str, action: str) -> bool:
    if permission == action:
        return True
    target, _, verb = action.partition(".")
    if permission.endswith(".*"):
        return target == permission[:-2]
    if permission.startswith("*."):
        return verb == permission[2:]
    return False


def has_permission(capabilities: Iterable[str], action: str) -> bool:
    """
    Check if any of the capabilities grants an action.

    Args:
        capabilities: User types and roles held
        action: Action to check (e.g. "blogs.create")

    Returns:
        True if some capability grants the action
    """
    for capability in capabilities:
        for permission in PERMISSIONS.get(capability, ()):
            if _matches(permission, action):
                return True
    return False


def _is_create_of_content(action: str) -> bool:
    target, _, verb = action.partition(".")
    return verb == "create" and target in {k.value for k in SubmittableKind}


def has_any_creation_capability(context: SessionContext) -> bool:
    """True if the identity may create at least one submittable kind."""
    return any(
        has_permission(context.capabilities, f"{kind.value}.create")
        for kind in SubmittableKind
    )


def decide(context: Optional[SessionContext], action: str) -> Decision:
    """
    Decide whether an identity may perform an action.

    Suspension overrides capability for every mutating action. A user whose
    capability set grants no content creation at all gets NO_CAPABILITY for
    content creation, so callers can prompt for an access request.
    """
    if action in PUBLIC_ACTIONS:
        return Decision.ALLOW
    if context is None:
        return Decision.UNAUTHENTICATED

    verb = action.partition(".")[2]
    if context.is_blocked and verb in MUTATING_VERBS:
        return Decision.SUSPENDED

    if action in AUTHENTICATED_ACTIONS:
        return Decision.ALLOW
    if has_permission(context.capabilities, action):
        return Decision.ALLOW

    if _is_create_of_content(action) and not has_any_creation_capability(context):
        return Decision.NO_CAPABILITY
    return Decision.DENIED


def decide_update(context: Optional[SessionContext], kind: SubmittableKind, owner_id: Optional[int]) -> Decision:
    """Owner or admin may update an item in any state."""
    if context is None:
        return Decision.UNAUTHENTICATED
    if context.is_blocked:
        return Decision.SUSPENDED
    if has_permission(context.capabilities, f"{kind.value}.update"):
        return Decision.ALLOW
    if owner_id is not None and owner_id == context.user_id:
        return Decision.ALLOW
    return Decision.DENIED


def is_allowed(context: Optional[SessionContext], action: str) -> bool:
    return decide(context, action) is Decision.ALLOW


def enforce(decision: Decision, action: str) -> None:
    """
    Turn a non-allow decision into the matching exception.

    Raises:
        AuthenticationRequired: No session
        AccountSuspended: Blocked account attempting a mutation
        NoCapability: No content capability at all
        AuthorizationDenied: Any other refusal
    """
    if decision is Decision.ALLOW:
        return
    context = {"action": action, "decision": decision.value}
    if decision is Decision.UNAUTHENTICATED:
        raise AuthenticationRequired(context=context)
    if decision is Decision.SUSPENDED:
        raise AccountSuspended(context=context)
    if decision is Decision.NO_CAPABILITY:
        raise NoCapability(context=context)
    raise AuthorizationDenied(
        message=f"Not allowed to perform '{action}'",
        context=context,
    )


def require(context: Optional[SessionContext], action: str) -> SessionContext:
    """
    Require that an identity may perform an action.

    Returns:
        The context, for chaining in route handlers

    Raises:
        AuthenticationRequired, AuthorizationDenied (or a subclass)
    """
    enforce(decide(context, action), action)
    return context


def get_allowed_actions(context: SessionContext) -> List[str]:
    """
    Get all permission patterns granted to an identity.

    Blocked identities keep only the non-mutating ones.
    """
    actions: Set[str] = set(AUTHENTICATED_ACTIONS) | set(PUBLIC_ACTIONS)
    for capability in context.capabilities:
        actions |= PERMISSIONS.get(capability, set())
    if context.is_blocked:
        actions = {a for a in actions if a.partition(".")[2] not in MUTATING_VERBS}
    return sorted(actions)
