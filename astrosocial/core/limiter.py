"""
Per-operation rate-limit guards built on the limits library.

Guards count hits per (operation, authenticated caller) so they can run as
ordinary route dependencies, ahead of the permission and existence checks.
"""

import logging
import time

from fastapi import Depends, Request, status
from limits import parse
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter

from astrosocial.core.config import settings
from astrosocial.core.exceptions import CustomHTTPException
from astrosocial.core.error_codes import RATE_LIMITED
from astrosocial.core.security import get_current_active_user
from astrosocial.models.user import User

logger = logging.getLogger(__name__)

storage = storage_from_string(settings.RATE_LIMIT_STORAGE_URI)
limiter = FixedWindowRateLimiter(storage)

UPDATE_PROFILE = "update_profile"
UPDATE_PASSWORD = "update_password"
UPDATE_USERNAME = "update_username"
UPDATE_AVATAR = "update_avatar"

RATE_LIMITS = {
    UPDATE_PROFILE: settings.RATE_LIMIT_UPDATE_PROFILE,
    UPDATE_PASSWORD: settings.RATE_LIMIT_UPDATE_PASSWORD,
    UPDATE_USERNAME: settings.RATE_LIMIT_UPDATE_USERNAME,
    UPDATE_AVATAR: settings.RATE_LIMIT_UPDATE_AVATAR,
}


def rate_limit(operation: str):
    """Build the guard enforcing the configured limit for ``operation``"""
    limit_item = parse(RATE_LIMITS[operation])

    async def check_rate_limit(
        request: Request,
        current_user: User = Depends(get_current_active_user)
    ) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return

        caller = str(current_user.id)
        if limiter.hit(limit_item, operation, caller):
            return

        reset_time, _ = limiter.get_window_stats(limit_item, operation, caller)
        retry_after = max(int(reset_time - time.time()), 1)
        logger.warning(
            f"Rate limit exceeded for user {caller} on {request.url.path}: {limit_item}"
        )
        raise CustomHTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Rate limit exceeded: {limit_item}. Try again in {retry_after} seconds",
            error_code=RATE_LIMITED,
            headers={"Retry-After": str(retry_after)},
        )

    check_rate_limit.__name__ = f"rate_limit_{operation}"
    return check_rate_limit
