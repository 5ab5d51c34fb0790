"""
Authentication endpoints
"""

import logging
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel.ext.asyncio.session import AsyncSession
from astrosocial.db.database import get_db
from astrosocial.schemas.auth import AuthResponse
from astrosocial.schemas.user import UserCreate
from astrosocial.core.security import create_access_token
from astrosocial.core.config import settings
from astrosocial.crud.user import create_user, get_user_by_email_or_username
from astrosocial.core.exceptions import CustomHTTPException
from astrosocial.core.error_codes import INVALID_CREDENTIALS, ACCOUNT_INACTIVE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_response(user) -> dict:
    scopes = ["user"]
    if user.is_admin:
        scopes.append("admin")

    return {
        "access_token": create_access_token(user.id, scopes),
        "token_type": "bearer",
        "expires_at": datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "user": user
    }


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    user = await create_user(db, user_in)
    return _token_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """OAuth2 password flow; the username field accepts a username or an email"""
    user = await get_user_by_email_or_username(db, form_data.username)
    if not user or not user.verify_password(form_data.password):
        logger.warning(f"Failed login attempt for: {form_data.username}")
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            error_code=INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account deactivated. Please contact support",
            error_code=ACCOUNT_INACTIVE,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _token_response(user)
