"""create_user_and_userfollow

Revision ID: 3b1f6c2a9d47
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision = "3b1f6c2a9d47"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("firstname", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("lastname", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("avatar_url", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column("bio", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column("city", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("zipcode", sqlmodel.sql.sqltypes.AutoString(length=20), nullable=True),
        sa.Column("twitter", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("instagram", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("facebook", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("tiktok", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("astrobin", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column("username", sqlmodel.sql.sqltypes.AutoString(length=30), nullable=False),
        sa.Column("email", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column("hashed_password", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_username"), "user", ["username"], unique=True)
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)

    op.create_table(
        "userfollow",
        sa.Column("follower_id", sa.Integer(), nullable=False),
        sa.Column("followed_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["follower_id"], ["user.id"]),
        sa.ForeignKeyConstraint(["followed_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("follower_id", "followed_id"),
    )
    op.create_index(op.f("ix_userfollow_follower_id"), "userfollow", ["follower_id"], unique=False)
    op.create_index(op.f("ix_userfollow_followed_id"), "userfollow", ["followed_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_userfollow_followed_id"), table_name="userfollow")
    op.drop_index(op.f("ix_userfollow_follower_id"), table_name="userfollow")
    op.drop_table("userfollow")
    op.drop_index(op.f("ix_user_email"), table_name="user")
    op.drop_index(op.f("ix_user_username"), table_name="user")
    op.drop_table("user")
