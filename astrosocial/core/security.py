from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fastapi.security import OAuth2PasswordBearer, SecurityScopes
from fastapi import Depends, HTTPException, status, Security
from sqlmodel.ext.asyncio.session import AsyncSession
from astrosocial.core.config import settings
from astrosocial.core.exceptions import CustomHTTPException
from astrosocial.core.error_codes import INVALID_TOKEN, ACCOUNT_INACTIVE
from astrosocial.models.user import User
from astrosocial.db.database import get_db
from astrosocial.crud.user import get_user_by_id

# OAuth2 scheme with scopes
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    scopes={
        "user": "Regular user access",
        "admin": "Admin privileges"
    }
)

def create_access_token(
    user_id: int,
    scopes: Optional[list[str]] = None,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[Dict[str, Any]] = None
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    payload = {
        "sub": str(user_id),
        "exp": int(expire.timestamp()),
        "iat": int(now.timestamp()),
        "type": "access",
        "scopes": scopes or ["user"],
    }

    if additional_claims:
        payload.update(additional_claims)

    try:
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error encoding JWT: {str(e)}"
        )

def verify_token(token: str, expected_type: Optional[str] = None) -> dict:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
        if expected_type and payload.get("type") != expected_type:
            raise JWTError("Invalid token type")
        int(payload["sub"])
        return payload
    except (JWTError, KeyError, TypeError, ValueError) as e:
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate credentials: {e}",
            error_code=INVALID_TOKEN,
            headers={"WWW-Authenticate": "Bearer"},
        )

async def get_current_user(
    security_scopes: SecurityScopes,
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    if security_scopes.scopes:
        authenticate_value = f'Bearer scope="{security_scopes.scope_str}"'
    else:
        authenticate_value = "Bearer"

    payload = verify_token(token, expected_type="access")
    user = await get_user_by_id(db, int(payload["sub"]))
    if not user:
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User no longer exists",
            error_code=INVALID_TOKEN,
            headers={"WWW-Authenticate": authenticate_value},
        )

    token_scopes = payload.get("scopes", [])
    for scope in security_scopes.scopes:
        if scope not in token_scopes:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
                headers={"WWW-Authenticate": authenticate_value},
            )

    return user

async def get_current_active_user(
    current_user: User = Security(get_current_user, scopes=["user"])
) -> User:
    if not current_user.is_active:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
            error_code=ACCOUNT_INACTIVE
        )
    return current_user
