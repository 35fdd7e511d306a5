"""Pydantic schemas for accounts, authentication and access requests"""
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, validator

from portal.db.enums import AccountStatus, ReviewStatus, Role, UserType
from portal.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Self-registration request"""
    email: EmailStr
    password: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = None
    user_types: List[UserType] = Field(default_factory=list)

    @validator("email")
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(CamelModel):
    """Login credentials"""
    email: EmailStr
    password: str


class UserResponse(CamelModel):
    """Account as returned to its owner and to administrators"""
    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    user_types: List[str] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)
    approval_status: AccountStatus
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ProfileResponse(UserResponse):
    """Own profile plus the permission patterns currently granted"""
    allowed_actions: List[str] = Field(default_factory=list)


class AccessRequestResponse(CamelModel):
    """Access request with its review outcome"""
    id: int
    user_id: int
    requested_user_types: List[str]
    note: Optional[str] = None
    status: ReviewStatus
    admin_note: Optional[str] = None
    reviewed_by_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class RegisterResponse(CamelModel):
    """Registration result; the account is PENDING until approved"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    access_request: Optional[AccessRequestResponse] = None


class TokenResponse(CamelModel):
    """Login result"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class UserCreate(CamelModel):
    """Administrator-created account"""
    email: EmailStr
    password: str = Field(..., min_length=1)
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = None
    user_types: List[UserType] = Field(default_factory=list)
    roles: List[Role] = Field(default_factory=list)
    approval_status: AccountStatus = AccountStatus.APPROVED


class AccessRequestCreate(CamelModel):
    """Petition for additional user types"""
    requested_user_types: List[UserType] = Field(default_factory=list)
    note: Optional[str] = None


class AccessRequestReview(CamelModel):
    """Body of approve/reject calls"""
    admin_note: Optional[str] = None
