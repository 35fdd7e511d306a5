"""User administration routes"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.dependencies import (
    get_access_request_service,
    get_current_context,
    get_user_service,
)
from portal.core.database import get_db
from portal.db.enums import AccountStatus
from portal.lifecycle.access_requests import AccessRequestService
from portal.lifecycle.authorization import SessionContext, get_allowed_actions
from portal.lifecycle.users import UserService
from portal.schemas.users import (
    AccessRequestCreate,
    AccessRequestResponse,
    ProfileResponse,
    UserCreate,
    UserResponse,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileResponse)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: UserService = Depends(get_user_service),
):
    user = await service.get_profile(db, context)
    profile = ProfileResponse.model_validate(user)
    profile.allowed_actions = get_allowed_actions(context)
    return profile


@router.get("", response_model=List[UserResponse])
async def list_users(
    approval_status: Optional[AccountStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: UserService = Depends(get_user_service),
):
    return await service.list_users(db, context, approval_status)


@router.get("/pending", response_model=List[UserResponse])
async def list_pending_users(
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: UserService = Depends(get_user_service),
):
    return await service.list_pending(db, context)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: UserCreate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: UserService = Depends(get_user_service),
):
    """Create an account with explicit user types and roles (admin only)"""
    return await service.create_user(
        db,
        context,
        email=request.email,
        password=request.password,
        full_name=request.full_name,
        phone=request.phone,
        user_types=request.user_types,
        roles=request.roles,
        approval_status=request.approval_status,
    )


@router.post(
    "/request-access",
    response_model=AccessRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_access(
    request: AccessRequestCreate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: AccessRequestService = Depends(get_access_request_service),
):
    """Same as POST /access-requests"""
    return await service.request_access(db, context, request.requested_user_types, request.note)


@router.patch("/{user_id}/approve", response_model=UserResponse)
async def approve_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: UserService = Depends(get_user_service),
):
    return await service.approve(db, context, user_id)


@router.patch("/{user_id}/reject", response_model=UserResponse)
async def reject_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: UserService = Depends(get_user_service),
):
    return await service.reject(db, context, user_id)


@router.patch("/{user_id}/suspend", response_model=UserResponse)
async def suspend_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
    service: UserService = Depends(get_user_service),
):
    """APPROVED -> SUSPENDED. There is no reactivation."""
    return await service.suspend(db, context, user_id)
