"""
User CRUD operations:
- Account creation and lookup
- Name search
- Profile, password, username and avatar updates
- Account deletion
"""
import logging
from typing import List, Optional
from fastapi import status, UploadFile
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, col
from sqlmodel.ext.asyncio.session import AsyncSession
from astrosocial.models.user import User
from astrosocial.models.follow import UserFollow
from astrosocial.schemas.user import UserCreate, UserUpdate
from astrosocial.utils.file_handling import save_avatar, delete_avatar
from astrosocial.core.exceptions import CustomHTTPException
from astrosocial.core.error_codes import (
    EMAIL_ALREADY_REGISTERED,
    USERNAME_TAKEN,
    INVALID_CREDENTIALS,
    PASSWORD_MUST_NOT_BE_THE_SAME,
    DATABASE_INTEGRITY_ERROR,
    USER_DELETE_ERROR,
)

logger = logging.getLogger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _check_password(user: User, password: str) -> None:
    if not user.verify_password(password):
        logger.warning(f"Invalid password supplied for user {user.id}")
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
            error_code=INVALID_CREDENTIALS
        )


async def _commit(session: AsyncSession, user: User) -> User:
    user_id = user.id
    try:
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user
    except IntegrityError as e:
        await session.rollback()
        logger.error(f"Integrity error while saving user {user_id}: {str(e)}")
        raise CustomHTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username or email already in use",
            error_code=DATABASE_INTEGRITY_ERROR
        )


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.exec(select(User).where(User.id == user_id))
    return result.first()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """Case-insensitive email lookup"""
    result = await session.exec(select(User).where(func.lower(User.email) == email.lower()))
    return result.first()


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    """Case-insensitive username lookup"""
    result = await session.exec(select(User).where(func.lower(User.username) == username.lower()))
    return result.first()


async def get_user_by_email_or_username(session: AsyncSession, identifier: str) -> Optional[User]:
    """Retrieve user by email or username"""
    if "@" in identifier:
        return await get_user_by_email(session, identifier)
    return await get_user_by_username(session, identifier)


async def create_user(session: AsyncSession, user_in: UserCreate) -> User:
    if await get_user_by_email(session, user_in.email):
        raise CustomHTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
            error_code=EMAIL_ALREADY_REGISTERED
        )
    if await get_user_by_username(session, user_in.username):
        raise CustomHTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already taken",
            error_code=USERNAME_TAKEN
        )

    db_user = User(**user_in.model_dump(exclude={"password"}), hashed_password="")
    db_user.set_password(user_in.password.get_secret_value())
    db_user = await _commit(session, db_user)
    logger.info(f"Created user {db_user.id} ({db_user.username})")
    return db_user


async def search_users(
    session: AsyncSession,
    *,
    name: str,
    offset: int = 0,
    limit: int = 20
) -> List[User]:
    """Substring match on username, first name, last name or "first last", case-insensitive"""
    pattern = f"%{_escape_like(name.strip())}%"
    full_name = func.coalesce(User.firstname, "") + " " + func.coalesce(User.lastname, "")

    stmt = (
        select(User)
        .where(User.is_active == True)  # noqa: E712
        .where(
            or_(
                col(User.username).ilike(pattern, escape="\\"),
                col(User.firstname).ilike(pattern, escape="\\"),
                col(User.lastname).ilike(pattern, escape="\\"),
                full_name.ilike(pattern, escape="\\"),
            )
        )
        .order_by(User.username)
        .offset(offset)
        .limit(limit)
    )
    result = await session.exec(stmt)
    return list(result.all())


async def update_user(session: AsyncSession, user: User, user_update: UserUpdate) -> User:
    """Apply only the fields present in the request body"""
    update_data = user_update.model_dump(exclude_unset=True)

    new_email = update_data.get("email")
    if new_email and new_email.lower() != user.email.lower():
        existing = await get_user_by_email(session, new_email)
        if existing and existing.id != user.id:
            raise CustomHTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered",
                error_code=EMAIL_ALREADY_REGISTERED
            )

    for field, value in update_data.items():
        setattr(user, field, value)

    return await _commit(session, user)


async def update_password(session: AsyncSession, user: User, old_password: str, new_password: str) -> User:
    _check_password(user, old_password)

    if old_password == new_password:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="New password cannot be the same as current password",
            error_code=PASSWORD_MUST_NOT_BE_THE_SAME
        )

    user.set_password(new_password)
    user = await _commit(session, user)
    logger.info(f"Password updated for user {user.id}")
    return user


async def update_username(session: AsyncSession, user: User, username: str, password: str) -> User:
    _check_password(user, password)

    existing = await get_user_by_username(session, username)
    if existing and existing.id != user.id:
        raise CustomHTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already taken",
            error_code=USERNAME_TAKEN
        )

    user.username = username
    user = await _commit(session, user)
    logger.info(f"Username updated for user {user.id}: {username}")
    return user


async def update_avatar(session: AsyncSession, user: User, file: UploadFile) -> User:
    """
    Store a new avatar image
    - Uploads the new file first
    - Points avatar_url at it
    - Removes the previously stored file once the change is committed
    """
    previous_url = user.avatar_url
    new_url = await save_avatar(file, user.id)
    user.avatar_url = new_url

    try:
        user = await _commit(session, user)
    except CustomHTTPException:
        await delete_avatar(new_url)
        raise

    if previous_url:
        await delete_avatar(previous_url)
    return user


async def delete_user(session: AsyncSession, user: User, password: str) -> None:
    """Delete the account, its follow edges and its stored avatar"""
    _check_password(user, password)

    user_id = user.id
    avatar_url = user.avatar_url

    try:
        result = await session.exec(
            select(UserFollow).where(
                or_(UserFollow.follower_id == user_id, UserFollow.followed_id == user_id)
            )
        )
        for follow_entry in result.all():
            await session.delete(follow_entry)
        # Edges must be gone before the user row they reference
        await session.flush()

        await session.delete(user)
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logger.error(f"Failed to delete user {user_id}: {str(e)}")
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete user",
            error_code=USER_DELETE_ERROR
        )

    if avatar_url:
        await delete_avatar(avatar_url)
    logger.info(f"Deleted user {user_id}")
