"""
Access Request Service - users petition for additional user types.

Approval unions the requested types into the user's user_types in the same
transaction that moves the request out of PENDING.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal.db.enums import ReviewStatus, UserType
from portal.db.models import AccessRequest, User
from portal.exceptions import (
    AlreadyGranted,
    DuplicateRequest,
    EmptyRequest,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from portal.lifecycle.authorization import SessionContext, require
from portal.lifecycle.event_logger import EventLogger
from portal.lifecycle.state_machine import ACCESS_REQUEST_LIFECYCLE
from portal.utils.database import get_or_404

logger = logging.getLogger(__name__)

ENTITY_TYPE = AccessRequest.__tablename__


def normalize_user_types(values: Optional[Iterable]) -> List[str]:
    """
    De-duplicate and validate user type names.

    Raises:
        ValidationError: If a value is not a known user type
    """
    valid = {t.value for t in UserType}
    result: Set[str] = set()
    unknown = []
    for value in values or ():
        name = value.value if isinstance(value, UserType) else str(value).strip().upper()
        if name in valid:
            result.add(name)
        else:
            unknown.append(str(value))
    if unknown:
        raise ValidationError(
            message=f"Unknown user types: {', '.join(unknown)}",
            context={"unknown_user_types": unknown},
        )
    return sorted(result)


class AccessRequestService:
    """Create and review access requests."""

    async def request_access(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        requested_types: Optional[Iterable],
        note: Optional[str] = None,
    ) -> AccessRequest:
        """
        Create a PENDING access request for the caller.

        Raises:
            EmptyRequest: No user types requested
            AlreadyGranted: Every requested type is already held
            DuplicateRequest: Pending requests already cover the new types
        """
        require(context, "access_requests.create")

        requested = normalize_user_types(requested_types)
        if not requested:
            raise EmptyRequest()

        user = await get_or_404(db, User, context.user_id, "User")
        held = set(user.user_types or [])
        missing = set(requested) - held
        if not missing:
            raise AlreadyGranted(context={"requested_user_types": requested})

        pending = await db.execute(
            select(AccessRequest.requested_user_types).where(
                AccessRequest.user_id == user.id,
                AccessRequest.status == ReviewStatus.PENDING,
            )
        )
        covered: Set[str] = set()
        for types in pending.scalars().all():
            covered.update(types or [])
        if missing <= covered:
            raise DuplicateRequest(context={"requested_user_types": requested})

        access_request = AccessRequest(
            user_id=user.id,
            requested_user_types=requested,
            note=note,
            status=ACCESS_REQUEST_LIFECYCLE.initial,
        )
        db.add(access_request)
        await db.flush()
        EventLogger.log_creation(
            db, ENTITY_TYPE, access_request.id, access_request.status.value, user.id
        )
        await db.commit()
        await db.refresh(access_request)
        return access_request

    async def approve(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        request_id: int,
        admin_note: Optional[str] = None,
    ) -> AccessRequest:
        """PENDING -> APPROVED and grant the requested types (set union)."""
        return await self._review(db, context, request_id, ReviewStatus.APPROVED, admin_note)

    async def reject(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        request_id: int,
        admin_note: Optional[str] = None,
    ) -> AccessRequest:
        """PENDING -> REJECTED; the user's types are left untouched."""
        return await self._review(db, context, request_id, ReviewStatus.REJECTED, admin_note)

    async def _review(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        request_id: int,
        target: ReviewStatus,
        admin_note: Optional[str],
    ) -> AccessRequest:
        require(context, "access_requests.review")

        access_request = await get_or_404(db, AccessRequest, request_id, "Access request")
        current = ACCESS_REQUEST_LIFECYCLE.parse(access_request.status)
        ACCESS_REQUEST_LIFECYCLE.check(current, target, request_id)

        result = await db.execute(
            update(AccessRequest)
            .where(
                AccessRequest.id == request_id,
                AccessRequest.status.in_(list(ACCESS_REQUEST_LIFECYCLE.sources_for(target))),
            )
            .values(
                status=target,
                admin_note=admin_note,
                reviewed_by_id=context.user_id,
                reviewed_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await db.rollback()
            row = await db.execute(select(AccessRequest.status).where(AccessRequest.id == request_id))
            status = row.scalar_one_or_none()
            if status is None:
                raise NotFound(message="Access request not found", entity_id=request_id)
            ACCESS_REQUEST_LIFECYCLE.check(status, target, request_id)
            raise InvalidTransition(entity_id=request_id)

        payload = {"requested_user_types": list(access_request.requested_user_types or [])}
        if target == ReviewStatus.APPROVED:
            payload["granted_user_types"] = await self._grant(
                db, access_request.user_id, access_request.requested_user_types
            )

        transition = ACCESS_REQUEST_LIFECYCLE.transition(
            ENTITY_TYPE, request_id, current, target, actor_id=context.user_id, reason=admin_note
        )
        EventLogger.log_state_transition(
            db, transition, f"{ENTITY_TYPE}.{target.value.lower()}", payload
        )
        await db.commit()
        await db.refresh(access_request)
        return access_request

    async def _grant(self, db: AsyncSession, user_id: int, requested: Iterable[str]) -> List[str]:
        # Row lock where supported; populate_existing so the union starts from the committed value
        result = await db.execute(
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFound(message="User not found", entity_id=user_id)
        merged = sorted(set(user.user_types or []) | set(requested or []))
        user.user_types = merged
        return merged

    async def list_all(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        status: Optional[ReviewStatus] = None,
    ) -> List[AccessRequest]:
        """Every access request, newest first (reviewers only)."""
        require(context, "access_requests.view_all")
        query = select(AccessRequest)
        if status is not None:
            query = query.where(AccessRequest.status == status)
        result = await db.execute(
            query.order_by(AccessRequest.created_at.desc(), AccessRequest.id.desc())
        )
        return list(result.scalars().all())

    async def list_pending(self, db: AsyncSession, context: Optional[SessionContext]) -> List[AccessRequest]:
        """Review queue, oldest first."""
        require(context, "access_requests.view_pending")
        result = await db.execute(
            select(AccessRequest)
            .where(AccessRequest.status == ReviewStatus.PENDING)
            .order_by(AccessRequest.created_at.asc(), AccessRequest.id.asc())
        )
        return list(result.scalars().all())

    async def list_mine(self, db: AsyncSession, context: Optional[SessionContext]) -> List[AccessRequest]:
        require(context, "access_requests.view_own")
        result = await db.execute(
            select(AccessRequest)
            .where(AccessRequest.user_id == context.user_id)
            .order_by(AccessRequest.created_at.desc(), AccessRequest.id.desc())
        )
        return list(result.scalars().all())


access_request_service = AccessRequestService()
