"""
User endpoints
- Profile retrieval and name search
- Profile, password, username and avatar updates
- Account deletion
- Follow graph
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlmodel.ext.asyncio.session import AsyncSession
from astrosocial.db.database import get_db
from astrosocial.models.user import User
from astrosocial.schemas.user import (
    UserRead,
    UserUpdate,
    PasswordUpdate,
    UsernameUpdate,
    UserDelete,
    MessageResponse,
    AvatarResponse,
)
from astrosocial.core.security import get_current_active_user
from astrosocial.core.limiter import (
    rate_limit,
    UPDATE_PROFILE,
    UPDATE_PASSWORD,
    UPDATE_USERNAME,
    UPDATE_AVATAR,
)
from astrosocial.api.deps import check_permissions, check_if_exists, get_language
from astrosocial.crud import user as user_crud
from astrosocial.crud import follow as follow_crud
from astrosocial.utils.date import format_date

logger = logging.getLogger(__name__)

# Every route requires a bearer token; ids only match digit sequences
router = APIRouter(
    prefix="/user",
    tags=["User"],
    dependencies=[Depends(get_current_active_user)],
)


@router.get(
    "/{user_id:int}",
    response_model=UserRead,
    dependencies=[Depends(check_if_exists)],
)
async def get_user_info(
    user: User = Depends(check_if_exists),
    language: str = Depends(get_language)
):
    """
    Get information about a user by id
    - member_since is rendered in the language negotiated from Accept-Language
    """
    user_data = UserRead.model_validate(user)
    user_data.member_since = format_date(user.created_at, language)
    return user_data


@router.get("/search", response_model=List[UserRead])
async def search_user_by_name(
    name: str = Query(..., min_length=1, description="The name of the searched user"),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """Search active users by username, first name or last name"""
    return await user_crud.search_users(db, name=name, offset=offset, limit=limit)


@router.patch(
    "/{user_id:int}/update",
    response_model=UserRead,
    dependencies=[
        Depends(rate_limit(UPDATE_PROFILE)),
        Depends(check_permissions),
        Depends(check_if_exists),
    ],
)
async def update(
    user_update: UserUpdate,
    user: User = Depends(check_if_exists),
    db: AsyncSession = Depends(get_db)
):
    """
    Update profile fields of a user
    - Every field is optional, only the ones sent are written
    """
    return await user_crud.update_user(db, user, user_update)


@router.patch(
    "/{user_id:int}/update/password",
    response_model=MessageResponse,
    dependencies=[
        Depends(rate_limit(UPDATE_PASSWORD)),
        Depends(check_permissions),
        Depends(check_if_exists),
    ],
)
async def update_password(
    payload: PasswordUpdate,
    user: User = Depends(check_if_exists),
    db: AsyncSession = Depends(get_db)
):
    await user_crud.update_password(db, user, payload.old_password, payload.new_password)
    return {"message": "Password updated successfully"}


@router.patch(
    "/{user_id:int}/update/username",
    response_model=MessageResponse,
    dependencies=[
        Depends(rate_limit(UPDATE_USERNAME)),
        Depends(check_permissions),
        Depends(check_if_exists),
    ],
)
async def update_username(
    payload: UsernameUpdate,
    user: User = Depends(check_if_exists),
    db: AsyncSession = Depends(get_db)
):
    """Change the username; the current password must be supplied"""
    updated_user = await user_crud.update_username(db, user, payload.username, payload.password)
    return {"message": f"Username updated to {updated_user.username}"}


@router.put(
    "/{user_id:int}/update/avatar",
    response_model=AvatarResponse,
    dependencies=[
        Depends(rate_limit(UPDATE_AVATAR)),
        Depends(check_permissions),
        Depends(check_if_exists),
    ],
)
async def update_avatar(
    file: UploadFile = File(..., description="jpg, png, gif or webp image"),
    user: User = Depends(check_if_exists),
    db: AsyncSession = Depends(get_db)
):
    """
    Upload a new avatar
    - Only jpg/png/gif/webp images up to MAX_AVATAR_SIZE
    - Replaces and removes the previously stored avatar
    """
    updated_user = await user_crud.update_avatar(db, user, file)
    return {"message": "Avatar updated successfully", "avatar_url": updated_user.avatar_url}


@router.delete(
    "/{user_id:int}/delete",
    response_model=MessageResponse,
    dependencies=[
        Depends(check_permissions),
        Depends(check_if_exists),
    ],
)
async def delete(
    payload: UserDelete,
    user: User = Depends(check_if_exists),
    db: AsyncSession = Depends(get_db)
):
    user_id = user.id
    await user_crud.delete_user(db, user, payload.password)
    return {"message": f"User {user_id} deleted successfully"}


@router.post(
    "/{user_id:int}/follow/{to_follow_id:int}",
    response_model=MessageResponse,
    dependencies=[
        Depends(check_permissions),
        Depends(check_if_exists),
    ],
)
async def follow(
    to_follow_id: int,
    user: User = Depends(check_if_exists),
    db: AsyncSession = Depends(get_db)
):
    """Make user_id follow to_follow_id; following twice is a no-op"""
    created = await follow_crud.follow_user(db, user, to_follow_id)
    if not created:
        return {"message": "Already following this user"}
    return {"message": f"Successfully followed user {to_follow_id}"}


@router.delete(
    "/{user_id:int}/unfollow/{to_unfollow_id:int}",
    response_model=MessageResponse,
    dependencies=[
        Depends(check_permissions),
        Depends(check_if_exists),
    ],
)
async def unfollow(
    to_unfollow_id: int,
    user: User = Depends(check_if_exists),
    db: AsyncSession = Depends(get_db)
):
    removed = await follow_crud.unfollow_user(db, user, to_unfollow_id)
    if not removed:
        return {"message": "No existing follow relationship"}
    return {"message": f"Successfully unfollowed user {to_unfollow_id}"}


@router.get(
    "/{user_id:int}/followers",
    response_model=List[UserRead],
    dependencies=[Depends(check_if_exists)],
)
async def get_followers(
    user: User = Depends(check_if_exists),
    db: AsyncSession = Depends(get_db)
):
    return await follow_crud.get_followers(db, user.id)


@router.get(
    "/{user_id:int}/following",
    response_model=List[UserRead],
    dependencies=[Depends(check_if_exists)],
)
async def get_following(
    user: User = Depends(check_if_exists),
    db: AsyncSession = Depends(get_db)
):
    return await follow_crud.get_following(db, user.id)
