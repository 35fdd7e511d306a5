"""Authentication utilities: password hashing, JWT tokens and request identity"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.config import settings
from portal.core.database import get_db
from portal.db.models import User
from portal.exceptions import AuthenticationRequired
from portal.lifecycle.authorization import SessionContext

logger = logging.getLogger(__name__)

# Missing credentials are reported through AuthenticationRequired, not FastAPI's 403
security = HTTPBearer(auto_error=False)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash"""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify JWT token.

    Raises:
        AuthenticationRequired: If the token is malformed, forged or expired
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise AuthenticationRequired(message="Invalid authentication credentials")


def create_user_token(user: User) -> str:
    """Access token for a user; identity is re-read from the database on every request"""
    return create_access_token(data={"sub": str(user.id), "email": user.email})


async def _load_context(token: str, db: AsyncSession) -> SessionContext:
    payload = decode_access_token(token)
    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise AuthenticationRequired(message="Invalid authentication credentials")

    user = await db.get(User, user_id)
    if user is None:
        logger.warning("Token presented for missing user %s", user_id)
        raise AuthenticationRequired(message="User no longer exists")
    return SessionContext.from_user(user)


async def get_optional_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Optional[SessionContext]:
    """
    Identity of the caller, or None for anonymous requests.

    A present but invalid token is still an error: callers holding a stale
    token must re-authenticate rather than silently browse as the public.
    """
    if credentials is None:
        return None
    return await _load_context(credentials.credentials, db)


async def get_current_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> SessionContext:
    """
    Identity of the caller.

    Raises:
        AuthenticationRequired: If no valid bearer token is present
    """
    if credentials is None:
        raise AuthenticationRequired()
    return await _load_context(credentials.credentials, db)
