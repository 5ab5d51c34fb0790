"""
Guards shared by the user routes. Each one either returns or raises, so
listing them on a route forms the ordered chain the request has to pass.
"""

from typing import Optional
from werkzeug.datastructures import LanguageAccept
from werkzeug.http import parse_accept_header
from fastapi import Depends, Header, Path, status
from sqlmodel.ext.asyncio.session import AsyncSession
from astrosocial.core.config import settings
from astrosocial.db.database import get_db
from astrosocial.models.user import User
from astrosocial.core.security import get_current_active_user
from astrosocial.core.exceptions import CustomHTTPException
from astrosocial.core.error_codes import USER_NOT_FOUND, NOT_AUTHORIZED
from astrosocial.crud.user import get_user_by_id


async def check_permissions(
    user_id: int = Path(..., description="The id of the user"),
    current_user: User = Depends(get_current_active_user)
) -> User:
    """Only the account owner or an admin may act on /{user_id}/..."""
    if current_user.id != user_id and not current_user.is_admin:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to act on this user",
            error_code=NOT_AUTHORIZED,
        )
    return current_user


async def check_if_exists(
    user_id: int = Path(..., description="The id of the user"),
    db: AsyncSession = Depends(get_db)
) -> User:
    user = await get_user_by_id(db, user_id)
    if not user:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
            error_code=USER_NOT_FOUND,
        )
    return user


def get_language(accept_language: Optional[str] = Header(None)) -> str:
    """Pick the best supported language from the Accept-Language header"""
    if not accept_language:
        return settings.DEFAULT_LANGUAGE
    accepted = parse_accept_header(accept_language, LanguageAccept)
    return accepted.best_match(settings.LANGUAGES, default=settings.DEFAULT_LANGUAGE)
