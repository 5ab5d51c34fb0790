from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field
from passlib.context import CryptContext

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserBase(SQLModel):
    """Profile fields a user can edit through the update endpoint"""
    firstname: Optional[str] = Field(default=None, max_length=100)
    lastname: Optional[str] = Field(default=None, max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=500)
    bio: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Short introduction shown on the profile"
    )
    city: Optional[str] = Field(default=None, max_length=100)
    zipcode: Optional[str] = Field(default=None, max_length=20)

    # Social handles
    twitter: Optional[str] = Field(default=None, max_length=100)
    instagram: Optional[str] = Field(default=None, max_length=100)
    facebook: Optional[str] = Field(default=None, max_length=100)
    tiktok: Optional[str] = Field(default=None, max_length=100)
    astrobin: Optional[str] = Field(default=None, max_length=100)


class User(UserBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True, max_length=30)
    email: str = Field(index=True, unique=True, max_length=255)
    hashed_password: str

    is_active: bool = Field(default=True)
    is_admin: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column_kwargs={"onupdate": datetime.utcnow}
    )

    def set_password(self, password: str):
        """Hash and store password securely"""
        if len(password) < 8:
            raise ValueError("Password must be at least 8 characters")
        self.hashed_password = pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify password against stored hash"""
        return pwd_context.verify(password, self.hashed_password)
