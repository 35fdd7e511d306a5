"""Authentication routes"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.dependencies import get_current_context, get_user_service
from portal.core.auth import create_user_token
from portal.core.database import get_db
from portal.lifecycle.authorization import SessionContext, get_allowed_actions
from portal.lifecycle.users import UserService
from portal.schemas.users import (
    AccessRequestResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
):
    """
    Register a new account.

    The account starts PENDING. Selected capability types other than
    GENERAL_USER are filed as an access request for an administrator.
    """
    user, access_request = await service.register(
        db,
        email=request.email,
        password=request.password,
        full_name=request.full_name,
        phone=request.phone,
        user_types=request.user_types,
    )
    return RegisterResponse(
        access_token=create_user_token(user),
        user=UserResponse.model_validate(user),
        access_request=(
            AccessRequestResponse.model_validate(access_request) if access_request else None
        ),
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
):
    """
    Login with email and password.

    Raises:
        AuthenticationRequired: 401 if credentials are invalid
    """
    user = await service.authenticate(db, request.email, request.password)
    logger.info("User %s logged in", user.id)
    return TokenResponse(
        access_token=create_user_token(user),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=ProfileResponse)
async def get_current_user_info(
    context: SessionContext = Depends(get_current_context),
    db: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
):
    """Current account plus the permission patterns it holds"""
    user = await service.get_profile(db, context)
    profile = ProfileResponse.model_validate(user)
    profile.allowed_actions = get_allowed_actions(context)
    return profile
