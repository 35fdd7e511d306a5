"""Access request routes"""
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.dependencies import get_access_request_service, get_current_context
from portal.core.database import get_db
from portal.db.enums import ReviewStatus
from portal.lifecycle.access_requests import AccessRequestService
from portal.lifecycle.authorization import SessionContext
from portal.schemas.users import AccessRequestCreate, AccessRequestResponse, AccessRequestReview

router = APIRouter(prefix="/access-requests", tags=["access-requests"])


@router.post("", response_model=AccessRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_access_request(
    request: AccessRequestCreate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: AccessRequestService = Depends(get_access_request_service),
):
    """
    Ask for additional user types.

    Raises:
        EmptyRequest: 422 when no types are named
        AlreadyGranted / DuplicateRequest: 409
    """
    return await service.request_access(db, context, request.requested_user_types, request.note)


@router.get("", response_model=List[AccessRequestResponse])
async def list_access_requests(
    review_status: Optional[ReviewStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: AccessRequestService = Depends(get_access_request_service),
):
    return await service.list_all(db, context, review_status)


@router.get("/pending", response_model=List[AccessRequestResponse])
async def list_pending_access_requests(
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: AccessRequestService = Depends(get_access_request_service),
):
    return await service.list_pending(db, context)


@router.get("/my-requests", response_model=List[AccessRequestResponse])
async def list_my_access_requests(
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: AccessRequestService = Depends(get_access_request_service),
):
    return await service.list_mine(db, context)


@router.patch("/{request_id}/approve", response_model=AccessRequestResponse)
async def approve_access_request(
    request_id: int,
    review: Optional[AccessRequestReview] = Body(None),
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: AccessRequestService = Depends(get_access_request_service),
):
    """PENDING -> APPROVED; the requested types are unioned into the user's types"""
    admin_note = review.admin_note if review else None
    return await service.approve(db, context, request_id, admin_note)


@router.patch("/{request_id}/reject", response_model=AccessRequestResponse)
async def reject_access_request(
    request_id: int,
    review: Optional[AccessRequestReview] = Body(None),
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: AccessRequestService = Depends(get_access_request_service),
):
    admin_note = review.admin_note if review else None
    return await service.reject(db, context, request_id, admin_note)
