"""Client-side session context.

A Session is created empty, started by a successful login or registration and
torn down by logout or by any 401 response. Authorization checks on the
client read ``session.context``; nothing else holds identity state.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from portal.db.enums import AccountStatus
from portal.lifecycle.authorization import SessionContext, decide, Decision

logger = logging.getLogger(__name__)


def context_from_payload(user: Dict[str, Any]) -> SessionContext:
    """Build a SessionContext from a camelCase user payload"""
    return SessionContext(
        user_id=int(user["id"]),
        user_types=frozenset(user.get("userTypes") or []),
        roles=frozenset(user.get("roles") or []),
        approval_status=AccountStatus(user.get("approvalStatus") or AccountStatus.PENDING.value),
        email=user.get("email"),
    )


class Session:
    """Bearer token plus the identity it stands for"""

    def __init__(self):
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.context: Optional[SessionContext] = None
        self._teardown_callbacks: List[Callable[[str], None]] = []

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def is_admin(self) -> bool:
        return self.context is not None and self.context.is_admin

    def start(self, token: str, user: Dict[str, Any]) -> SessionContext:
        """Initialize from a login/registration response"""
        self.token = token
        self.user = user
        self.context = context_from_payload(user)
        logger.debug("Session started for user %s", self.context.user_id)
        return self.context

    def refresh(self, user: Dict[str, Any]) -> SessionContext:
        """Replace the identity after re-reading the profile; the token is kept"""
        self.user = user
        self.context = context_from_payload(user)
        return self.context

    def clear(self, reason: str = "logout") -> None:
        """Tear down the session and notify listeners (e.g. to show a login prompt)"""
        was_active = self.token is not None
        self.token = None
        self.user = None
        self.context = None
        if was_active:
            logger.info("Session cleared (%s)", reason)
            for callback in list(self._teardown_callbacks):
                callback(reason)

    def on_teardown(self, callback: Callable[[str], None]) -> None:
        """Register a callback invoked with the reason whenever an active session ends"""
        self._teardown_callbacks.append(callback)

    def auth_headers(self) -> Dict[str, str]:
        if self.token is None:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def can(self, action: str) -> bool:
        """Local preview of an authorization decision; the server stays authoritative"""
        return decide(self.context, action) is Decision.ALLOW

    def decision(self, action: str) -> Decision:
        return decide(self.context, action)
