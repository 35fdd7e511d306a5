"""Admin console routes"""
from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.dependencies import get_current_context
from portal.core.database import get_db
from portal.db.enums import AccountStatus, ReviewStatus
from portal.db.models import AccessRequest, User
from portal.lifecycle.authorization import SessionContext, require
from portal.lifecycle.content import get_content_service
from portal.lifecycle.kinds import SubmittableKind

router = APIRouter(prefix="/admin", tags=["admin"])


async def _count_by(db: AsyncSession, column, states) -> dict:
    result = await db.execute(select(column, func.count()).group_by(column))
    counts = {state.value: 0 for state in states}
    for state, count in result.all():
        counts[states(state).value] = count
    return counts


@router.get("/stats")
async def get_stats(
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
):
    """
    Dashboard counts.

    Returns:
        {"content": {kind: {status: n}}, "users": {status: n},
         "accessRequests": {status: n}, "pendingTotal": n}
    """
    require(context, "admin.view_all")

    content = {}
    for kind in SubmittableKind:
        content[kind.value] = await get_content_service(kind).count_by_status(db)

    users = await _count_by(db, User.approval_status, AccountStatus)
    access_requests = await _count_by(db, AccessRequest.status, ReviewStatus)

    pending_total = (
        sum(counts[ReviewStatus.PENDING.value] for counts in content.values())
        + users[AccountStatus.PENDING.value]
        + access_requests[ReviewStatus.PENDING.value]
    )
    return {
        "content": content,
        "users": users,
        "accessRequests": access_requests,
        "pendingTotal": pending_total,
    }
