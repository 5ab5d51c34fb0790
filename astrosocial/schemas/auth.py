from datetime import datetime
from pydantic import BaseModel
from astrosocial.schemas.user import UserRead

class Token(BaseModel):
    """Bearer token response"""
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime

class AuthResponse(Token):
    user: UserRead
