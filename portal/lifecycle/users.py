"""
User Service - registration, login and account review.

Account states follow ACCOUNT_LIFECYCLE: PENDING -> APPROVED | REJECTED,
APPROVED -> SUSPENDED. Suspension is permanent.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.auth import hash_password, verify_password
from portal.core.config import settings
from portal.db.enums import AccountStatus, ReviewStatus, Role, UserType
from portal.db.models import AccessRequest, User
from portal.exceptions import (
    AuthenticationRequired,
    Conflict,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from portal.lifecycle.access_requests import normalize_user_types
from portal.lifecycle.authorization import SessionContext, require
from portal.lifecycle.error_codes import ErrorCodeDictionary
from portal.lifecycle.event_logger import EventLogger
from portal.lifecycle.state_machine import ACCOUNT_LIFECYCLE
from portal.utils.database import get_or_404

logger = logging.getLogger(__name__)

ENTITY_TYPE = User.__tablename__


def normalize_roles(values: Optional[Iterable]) -> List[str]:
    """
    De-duplicate and validate role names.

    Raises:
        ValidationError: If a value is not a known role
    """
    valid = {r.value for r in Role}
    names = {
        value.value if isinstance(value, Role) else str(value).strip().upper()
        for value in values or ()
    }
    unknown = sorted(names - valid)
    if unknown:
        raise ValidationError(
            message=f"Unknown roles: {', '.join(unknown)}",
            context={"unknown_roles": unknown},
        )
    return sorted(names)


def _validate_credentials(email: Optional[str], password: Optional[str], full_name: Optional[str]) -> str:
    missing = [
        name
        for name, value in (("email", email), ("password", password), ("full_name", full_name))
        if not value or not str(value).strip()
    ]
    if missing:
        raise ValidationError(
            message=f"Missing required fields: {', '.join(missing)}",
            context={"missing_fields": missing},
        )
    if len(password) < settings.min_password_length:
        raise ValidationError(
            message=f"Password must be at least {settings.min_password_length} characters",
            error_code=ErrorCodeDictionary.VALIDATION_003,
            context={"field": "password"},
        )
    return email.strip().lower()


class UserService:
    """
    Service for user accounts.

    Handles:
    - Self-registration and admin-created accounts
    - Password login
    - Account approval, rejection and suspension
    """

    async def _ensure_email_free(self, db: AsyncSession, email: str) -> None:
        result = await db.execute(select(User.id).where(func.lower(User.email) == email))
        if result.first() is not None:
            raise Conflict(message="Email already registered", context={"email": email})

    async def register(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        full_name: str,
        phone: Optional[str] = None,
        user_types: Optional[Iterable] = None,
    ) -> Tuple[User, Optional[AccessRequest]]:
        """
        Self-registration.

        The account starts PENDING. GENERAL_USER is granted right away when
        selected; every other selected type becomes a PENDING access request.

        Returns:
            Tuple of (user, access request or None)

        Raises:
            ValidationError: Missing fields, short password or unknown user types
            Conflict: Email already registered
        """
        email = _validate_credentials(email, password, full_name)
        selected = normalize_user_types(user_types)
        await self._ensure_email_free(db, email)

        granted = [t for t in selected if t == UserType.GENERAL_USER.value]
        requested = [t for t in selected if t != UserType.GENERAL_USER.value]

        user = User(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name.strip(),
            phone=phone,
            user_types=granted,
            roles=[],
            approval_status=ACCOUNT_LIFECYCLE.initial,
        )
        db.add(user)
        await db.flush()
        EventLogger.log_creation(db, ENTITY_TYPE, user.id, user.approval_status.value, user.id)

        access_request = None
        if requested:
            access_request = AccessRequest(
                user_id=user.id,
                requested_user_types=requested,
                note="Requested at registration",
                status=ReviewStatus.PENDING,
            )
            db.add(access_request)
            await db.flush()
            EventLogger.log_creation(
                db, AccessRequest.__tablename__, access_request.id, ReviewStatus.PENDING.value, user.id
            )

        await db.commit()
        await db.refresh(user)
        if access_request is not None:
            await db.refresh(access_request)
        logger.info("Registered user %s (%s)", user.id, email)
        return user, access_request

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> User:
        """
        Check credentials and stamp last_login_at.

        Suspended accounts may still log in; the authorization map refuses
        their mutations.

        Raises:
            AuthenticationRequired: Unknown email or wrong password
        """
        normalized = (email or "").strip().lower()
        result = await db.execute(select(User).where(func.lower(User.email) == normalized))
        user = result.scalar_one_or_none()
        if user is None or not verify_password(password or "", user.password_hash):
            logger.warning("Failed login for %s", normalized)
            raise AuthenticationRequired(error_code=ErrorCodeDictionary.AUTH_002)

        user.last_login_at = datetime.now(timezone.utc)
        await db.commit()
        await db.refresh(user)
        return user

    async def create_user(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        email: str,
        password: str,
        full_name: str,
        phone: Optional[str] = None,
        user_types: Optional[Iterable] = None,
        roles: Optional[Iterable] = None,
        approval_status: AccountStatus = AccountStatus.APPROVED,
    ) -> User:
        """Admin-created account with explicit types and roles; approved by default."""
        require(context, "users.manage")
        return await self.create_account(
            db,
            email=email,
            password=password,
            full_name=full_name,
            phone=phone,
            user_types=user_types,
            roles=roles,
            approval_status=approval_status,
            actor_id=context.user_id,
        )

    async def create_account(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        full_name: str,
        phone: Optional[str] = None,
        user_types: Optional[Iterable] = None,
        roles: Optional[Iterable] = None,
        approval_status: AccountStatus = AccountStatus.APPROVED,
        actor_id: Optional[int] = None,
    ) -> User:
        """
        Insert an account without an authorization check.

        Used by create_user() and by the bootstrap CLI, which has no session.
        """
        email = _validate_credentials(email, password, full_name)
        types = normalize_user_types(user_types)
        role_names = normalize_roles(roles)
        await self._ensure_email_free(db, email)

        user = User(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name.strip(),
            phone=phone,
            user_types=types,
            roles=role_names,
            approval_status=AccountStatus(approval_status),
        )
        db.add(user)
        await db.flush()
        EventLogger.log_creation(db, ENTITY_TYPE, user.id, user.approval_status.value, actor_id)
        await db.commit()
        await db.refresh(user)
        return user

    async def get_profile(self, db: AsyncSession, context: Optional[SessionContext]) -> User:
        require(context, "profile.view")
        return await get_or_404(db, User, context.user_id, "User")

    async def list_users(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        status: Optional[AccountStatus] = None,
    ) -> List[User]:
        require(context, "users.manage")
        query = select(User)
        if status is not None:
            query = query.where(User.approval_status == status)
        result = await db.execute(query.order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def list_pending(self, db: AsyncSession, context: Optional[SessionContext]) -> List[User]:
        require(context, "users.manage")
        result = await db.execute(
            select(User)
            .where(User.approval_status == AccountStatus.PENDING)
            .order_by(User.created_at.asc(), User.id.asc())
        )
        return list(result.scalars().all())

    async def approve(self, db: AsyncSession, context: Optional[SessionContext], user_id: int) -> User:
        """PENDING -> APPROVED"""
        return await self._transition(db, context, user_id, AccountStatus.APPROVED, "approved")

    async def reject(self, db: AsyncSession, context: Optional[SessionContext], user_id: int) -> User:
        """PENDING -> REJECTED"""
        return await self._transition(db, context, user_id, AccountStatus.REJECTED, "rejected")

    async def suspend(self, db: AsyncSession, context: Optional[SessionContext], user_id: int) -> User:
        """APPROVED -> SUSPENDED; overrides every capability the user holds"""
        return await self._transition(db, context, user_id, AccountStatus.SUSPENDED, "suspended")

    async def _transition(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        user_id: int,
        target: AccountStatus,
        event: str,
    ) -> User:
        require(context, "users.manage")

        user = await get_or_404(db, User, user_id, "User")
        current = ACCOUNT_LIFECYCLE.parse(user.approval_status)
        ACCOUNT_LIFECYCLE.check(current, target, user_id)

        result = await db.execute(
            update(User)
            .where(
                User.id == user_id,
                User.approval_status.in_(list(ACCOUNT_LIFECYCLE.sources_for(target))),
            )
            .values(approval_status=target)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await db.rollback()
            row = await db.execute(select(User.approval_status).where(User.id == user_id))
            status = row.scalar_one_or_none()
            if status is None:
                raise NotFound(message="User not found", entity_id=user_id)
            ACCOUNT_LIFECYCLE.check(status, target, user_id)
            raise InvalidTransition(entity_id=user_id)

        transition = ACCOUNT_LIFECYCLE.transition(
            ENTITY_TYPE, user_id, current, target, actor_id=context.user_id
        )
        EventLogger.log_state_transition(db, transition, f"{ENTITY_TYPE}.{event}")
        await db.commit()
        await db.refresh(user)
        return user


user_service = UserService()
