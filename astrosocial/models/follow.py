from datetime import datetime

from sqlmodel import SQLModel, Field


class UserFollow(SQLModel, table=True):
    """Directed follow edge: follower_id follows followed_id"""

    follower_id: int = Field(
        foreign_key="user.id",
        primary_key=True,
        index=True  # For faster following queries
    )
    followed_id: int = Field(
        foreign_key="user.id",
        primary_key=True,
        index=True  # For faster follower queries
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
