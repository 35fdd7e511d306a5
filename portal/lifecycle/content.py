"""
Content Lifecycle Service - submit, review and maintain submittable content.

One service instance per SubmittableKind; all kinds share the same rules.
Routes call these methods and never touch status columns directly.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.config import settings
from portal.db.enums import ReviewStatus
from portal.db.models import Blog, Upazila
from portal.exceptions import InvalidTransition, NotFound, ValidationError
from portal.lifecycle.authorization import (
    SessionContext,
    decide_update,
    enforce,
    is_allowed,
    require,
)
from portal.lifecycle.event_logger import EventLogger
from portal.lifecycle.kinds import SubmittableKind, missing_required_fields
from portal.lifecycle.state_machine import CONTENT_LIFECYCLE
from portal.utils.database import get_or_404
from portal.utils.slugs import unique_slug

logger = logging.getLogger(__name__)

# Never writable through submit/update payloads
PROTECTED_FIELDS = frozenset(
    {
        "id",
        "status",
        "owner_id",
        "reviewed_by_id",
        "reviewed_at",
        "created_at",
        "updated_at",
        "published_at",
        "slug",
    }
)


class ContentService:
    """
    Service for the submittable content lifecycle.

    Handles:
    - Submission (always lands in PENDING)
    - Review (PENDING -> APPROVED | REJECTED, compare-and-set)
    - Owner/admin updates and admin deletion
    - Status-gated listing and lookup
    """

    def __init__(self, kind: SubmittableKind):
        self.kind = kind
        self.profile = kind.profile
        self.model = self.profile.model

    def _action(self, verb: str) -> str:
        return f"{self.kind.value}.{verb}"

    def _writable(self, data: Dict[str, Any]) -> Dict[str, Any]:
        columns = set(self.model.__table__.columns.keys())
        return {
            key: value
            for key, value in data.items()
            if key in columns and key not in PROTECTED_FIELDS
        }

    async def _check_upazila(self, db: AsyncSession, upazila_id: Optional[int]) -> None:
        if upazila_id is None:
            return
        if await db.get(Upazila, upazila_id) is None:
            raise NotFound(message="Upazila not found", entity_id=upazila_id)

    def _can_see_unpublished(self, context: Optional[SessionContext], item) -> bool:
        if context is None:
            return False
        if item.owner_id is not None and item.owner_id == context.user_id:
            return True
        return is_allowed(context, self._action("view_all"))

    async def submit(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        data: Dict[str, Any],
    ):
        """
        Create an item in PENDING, whoever the creator is.

        Raises:
            AuthenticationRequired, AuthorizationDenied, NoCapability, AccountSuspended
            ValidationError: If required fields are missing
            NotFound: If the referenced upazila does not exist
        """
        require(context, self._action("create"))

        missing = missing_required_fields(self.kind, data)
        if missing:
            raise ValidationError(
                message=f"Missing required fields: {', '.join(missing)}",
                context={"missing_fields": missing},
            )

        values = self._writable(data)
        await self._check_upazila(db, values.get("upazila_id"))

        item = self.model(
            **values,
            status=CONTENT_LIFECYCLE.initial,
            owner_id=context.user_id,
        )
        if self.model is Blog:
            item.slug = await unique_slug(db, Blog, values["title"], settings.max_slug_length)

        db.add(item)
        await db.flush()
        EventLogger.log_creation(
            db, self.profile.entity_type, item.id, item.status.value, context.user_id
        )
        await db.commit()
        await db.refresh(item)
        return item

    async def get(self, db: AsyncSession, context: Optional[SessionContext], item_id: int):
        """
        Get one item. Non-approved items exist only for their owner and reviewers.

        Raises:
            NotFound: If absent or not visible to the caller
        """
        item = await get_or_404(db, self.model, item_id, self.profile.label)
        if item.status != ReviewStatus.APPROVED and not self._can_see_unpublished(context, item):
            raise NotFound(message=f"{self.profile.label} not found", entity_id=item_id)
        return item

    async def get_by_slug(self, db: AsyncSession, context: Optional[SessionContext], slug: str):
        """Blog lookup by slug with the same visibility rule as get()."""
        if not hasattr(self.model, "slug"):
            raise NotFound(message=f"{self.profile.label} has no slug lookup")
        result = await db.execute(select(self.model).where(self.model.slug == slug))
        item = result.scalar_one_or_none()
        if item is None or (
            item.status != ReviewStatus.APPROVED and not self._can_see_unpublished(context, item)
        ):
            raise NotFound(message=f"{self.profile.label} not found", context={"slug": slug})
        return item

    @staticmethod
    def _coerce_filter(param: str, column, value):
        column_type = column.property.columns[0].type
        enum_class = getattr(column_type, "enum_class", None)
        try:
            if enum_class is not None:
                return value if isinstance(value, enum_class) else enum_class(str(value).upper())
            if column_type.python_type is int:
                return int(value)
        except (TypeError, ValueError):
            raise ValidationError(
                message=f"Invalid value for filter '{param}': {value}",
                context={"filter": param, "value": str(value)},
            )
        return value

    async def list(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        filters: Optional[Dict[str, Any]] = None,
        status: Optional[ReviewStatus] = None,
    ) -> List:
        """
        List items.

        Public callers only ever see APPROVED items; reviewers see every
        status and may narrow with ``status``.
        """
        query = select(self.model)
        if is_allowed(context, self._action("view_all")):
            if status is not None:
                query = query.where(self.model.status == status)
        else:
            query = query.where(self.model.status == ReviewStatus.APPROVED)

        for param, attribute in self.profile.filters.items():
            value = (filters or {}).get(param)
            if value is not None and value != "":
                column = getattr(self.model, attribute)
                query = query.where(column == self._coerce_filter(param, column, value))

        query = query.order_by(self.model.created_at.desc(), self.model.id.desc())
        result = await db.execute(query)
        return list(result.scalars().all())

    async def list_pending(self, db: AsyncSession, context: Optional[SessionContext]) -> List:
        """Review queue, oldest first."""
        require(context, self._action("view_pending"))
        result = await db.execute(
            select(self.model)
            .where(self.model.status == ReviewStatus.PENDING)
            .order_by(self.model.created_at.asc(), self.model.id.asc())
        )
        return list(result.scalars().all())

    async def list_owned(self, db: AsyncSession, context: Optional[SessionContext]) -> List:
        """Every item the caller submitted, in any status."""
        require(context, "profile.view")
        result = await db.execute(
            select(self.model)
            .where(self.model.owner_id == context.user_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        return list(result.scalars().all())

    async def approve(self, db: AsyncSession, context: Optional[SessionContext], item_id: int):
        """PENDING -> APPROVED. Blogs also get a publish timestamp if they have none."""
        return await self._review(db, context, item_id, ReviewStatus.APPROVED)

    async def reject(self, db: AsyncSession, context: Optional[SessionContext], item_id: int):
        """PENDING -> REJECTED."""
        return await self._review(db, context, item_id, ReviewStatus.REJECTED)

    async def _review(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        item_id: int,
        target: ReviewStatus,
    ):
        verb = "approve" if target == ReviewStatus.APPROVED else "reject"
        require(context, self._action(verb))

        item = await get_or_404(db, self.model, item_id, self.profile.label)
        current = CONTENT_LIFECYCLE.parse(item.status)
        CONTENT_LIFECYCLE.check(current, target, item_id)

        now = datetime.now(timezone.utc)
        values: Dict[str, Any] = {
            "status": target,
            "reviewed_by_id": context.user_id,
            "reviewed_at": now,
        }
        if self.model is Blog and target == ReviewStatus.APPROVED:
            values["published_at"] = func.coalesce(Blog.published_at, now)

        # Compare-and-set: a concurrent reviewer wins at most once
        result = await db.execute(
            update(self.model)
            .where(
                self.model.id == item_id,
                self.model.status.in_(list(CONTENT_LIFECYCLE.sources_for(target))),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await db.rollback()
            await self._raise_lost_race(db, item_id, target)

        transition = CONTENT_LIFECYCLE.transition(
            self.profile.entity_type, item_id, current, target, actor_id=context.user_id
        )
        EventLogger.log_state_transition(
            db, transition, f"{self.profile.entity_type}.{target.value.lower()}"
        )
        await db.commit()
        await db.refresh(item)
        return item

    async def _raise_lost_race(self, db: AsyncSession, item_id: int, target: ReviewStatus) -> None:
        row = await db.execute(select(self.model.status).where(self.model.id == item_id))
        status = row.scalar_one_or_none()
        if status is None:
            raise NotFound(message=f"{self.profile.label} not found", entity_id=item_id)
        CONTENT_LIFECYCLE.check(status, target, item_id)
        raise InvalidTransition(
            entity_id=item_id,
            context={"current_status": CONTENT_LIFECYCLE.parse(status).value},
        )

    async def update(
        self,
        db: AsyncSession,
        context: Optional[SessionContext],
        item_id: int,
        data: Dict[str, Any],
    ):
        """
        Update fields from any state, by the owner or an admin.

        Status is left untouched: an approved item stays approved after an edit.

        Raises:
            AuthorizationDenied: Neither owner nor admin
            ValidationError: A required field is blanked
        """
        item = await get_or_404(db, self.model, item_id, self.profile.label)
        enforce(decide_update(context, self.kind, item.owner_id), self._action("update"))

        values = self._writable(data)
        blanked = [
            name
            for name in self.profile.required_fields
            if name in values
            and (values[name] is None or (isinstance(values[name], str) and not values[name].strip()))
        ]
        if blanked:
            raise ValidationError(
                message=f"Required fields cannot be empty: {', '.join(blanked)}",
                context={"missing_fields": blanked},
            )
        if "upazila_id" in values:
            await self._check_upazila(db, values["upazila_id"])

        for key, value in values.items():
            setattr(item, key, value)

        await db.commit()
        await db.refresh(item)
        logger.info(
            "%s#%s updated by user %s (%s)",
            self.profile.entity_type,
            item_id,
            context.user_id,
            ", ".join(sorted(values)) or "no fields",
        )
        return item

    async def delete(self, db: AsyncSession, context: Optional[SessionContext], item_id: int) -> None:
        """Admin-only hard delete from any state."""
        require(context, self._action("delete"))
        item = await get_or_404(db, self.model, item_id, self.profile.label)
        EventLogger.log_deletion(
            db,
            self.profile.entity_type,
            item_id,
            CONTENT_LIFECYCLE.parse(item.status).value,
            context.user_id,
        )
        await db.delete(item)
        await db.commit()

    async def count_by_status(self, db: AsyncSession) -> Dict[str, int]:
        """Per-status counts for the admin dashboard."""
        result = await db.execute(
            select(self.model.status, func.count(self.model.id)).group_by(self.model.status)
        )
        counts = {status.value: 0 for status in ReviewStatus}
        for status, count in result.all():
            counts[CONTENT_LIFECYCLE.parse(status).value] = count
        return counts


_SERVICES = {kind: ContentService(kind) for kind in SubmittableKind}


def get_content_service(kind: SubmittableKind) -> ContentService:
    """Shared stateless service instance for a kind"""
    return _SERVICES[kind]
