from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr, field_validator

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


class UserRead(BaseModel):
    """Public representation of a user returned by every user endpoint"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    city: Optional[str] = None
    zipcode: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    tiktok: Optional[str] = None
    astrobin: Optional[str] = None
    is_admin: bool = False
    created_at: datetime
    updated_at: datetime
    member_since: Optional[str] = Field(
        default=None,
        description="Account creation date rendered in the caller's language"
    )


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: SecretStr = Field(..., min_length=8)
    firstname: Optional[str] = Field(None, max_length=100)
    lastname: Optional[str] = Field(None, max_length=100)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: SecretStr):
        pwd = v.get_secret_value()
        if not any(c.isdigit() for c in pwd):
            raise ValueError("Password must contain at least one digit")
        return v


class UserUpdate(BaseModel):
    """Every field is optional; only the ones sent are written"""
    firstname: Optional[str] = Field(None, max_length=100)
    lastname: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    avatar_url: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    zipcode: Optional[str] = Field(None, max_length=20)
    twitter: Optional[str] = Field(None, max_length=100)
    instagram: Optional[str] = Field(None, max_length=100)
    facebook: Optional[str] = Field(None, max_length=100)
    tiktok: Optional[str] = Field(None, max_length=100)
    astrobin: Optional[str] = Field(None, max_length=100)

    @field_validator("email")
    @classmethod
    def email_not_null(cls, v):
        # Omitting email keeps it; sending null would blank a required column
        if v is None:
            raise ValueError("Email cannot be null")
        return v


class PasswordUpdate(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class UsernameUpdate(BaseModel):
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=1)


class UserDelete(BaseModel):
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    message: str


class AvatarResponse(MessageResponse):
    avatar_url: str
