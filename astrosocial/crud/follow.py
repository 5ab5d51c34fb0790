import logging
from typing import List, Optional
from fastapi import status
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from astrosocial.models.follow import UserFollow
from astrosocial.models.user import User
from astrosocial.crud.user import get_user_by_id
from astrosocial.core.exceptions import CustomHTTPException
from astrosocial.core.error_codes import CANNOT_FOLLOW_SELF, USER_NOT_FOUND

logger = logging.getLogger(__name__)


async def _get_target(session: AsyncSession, follower: User, target_id: int, action: str) -> User:
    if follower.id == target_id:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot {action} yourself",
            error_code=CANNOT_FOLLOW_SELF
        )

    target = await get_user_by_id(session, target_id)
    if not target:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {target_id} not found",
            error_code=USER_NOT_FOUND
        )
    return target


async def get_follow(session: AsyncSession, follower_id: int, followed_id: int) -> Optional[UserFollow]:
    result = await session.exec(
        select(UserFollow).where(
            UserFollow.follower_id == follower_id,
            UserFollow.followed_id == followed_id
        )
    )
    return result.first()


async def follow_user(session: AsyncSession, follower: User, followed_id: int) -> bool:
    """Create the edge follower -> followed; returns False when it already existed"""
    await _get_target(session, follower, followed_id, "follow")
    follower_id = follower.id

    if await get_follow(session, follower_id, followed_id):
        return False

    session.add(UserFollow(follower_id=follower_id, followed_id=followed_id))
    try:
        await session.commit()
    except IntegrityError:
        # A concurrent request created the same edge first
        await session.rollback()
        return False

    logger.info(f"User {follower_id} followed user {followed_id}")
    return True


async def unfollow_user(session: AsyncSession, follower: User, followed_id: int) -> bool:
    """Remove the edge follower -> followed; returns False when there was none"""
    await _get_target(session, follower, followed_id, "unfollow")
    follower_id = follower.id

    follow_entry = await get_follow(session, follower_id, followed_id)
    if not follow_entry:
        return False

    await session.delete(follow_entry)
    await session.commit()
    logger.info(f"User {follower_id} unfollowed user {followed_id}")
    return True


async def get_followers(session: AsyncSession, user_id: int) -> List[User]:
    """Get all users following a given user"""
    result = await session.exec(
        select(User)
        .join(UserFollow, User.id == UserFollow.follower_id)
        .where(UserFollow.followed_id == user_id)
        .order_by(User.username)
    )
    return list(result.all())


async def get_following(session: AsyncSession, user_id: int) -> List[User]:
    """Get all users that a given user is following"""
    result = await session.exec(
        select(User)
        .join(UserFollow, User.id == UserFollow.followed_id)
        .where(UserFollow.follower_id == user_id)
        .order_by(User.username)
    )
    return list(result.all())
