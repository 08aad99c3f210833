"""Initial schema: builds, users, bot settings

Revision ID: 001
Revises:
Create Date: 2025-01-01
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Builds
    op.create_table(
        "builds",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("activity_type", sa.String(64), nullable=False),
        sa.Column("command_alias", sa.String(128), nullable=False),
        sa.Column("tier", sa.String(16), server_default="T8"),
        sa.Column("img_url", sa.String(2048), nullable=True),
        sa.Column("estimated_cost", sa.String(128), nullable=True),
        sa.Column("equipment", sa.JSON, nullable=False),
        sa.Column("alternatives", sa.JSON, nullable=True),
        sa.Column("is_meta", sa.Boolean, server_default=sa.false()),
        sa.Column("tags", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_builds_activity_type", "builds", ["activity_type"])
    op.create_index("ix_builds_command_alias", "builds", ["command_alias"], unique=True)

    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("username", sa.String(128), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(256), nullable=False),
        sa.Column("is_admin", sa.Boolean, server_default=sa.false()),
    )

    # Bot settings (single row)
    op.create_table(
        "bot_settings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("token", sa.String(256), nullable=True),
        sa.Column("client_id", sa.String(64), nullable=True),
        sa.Column("guild_id", sa.String(64), nullable=True),
        sa.Column("prefix", sa.String(16), server_default="/"),
    )


def downgrade() -> None:
    op.drop_table("bot_settings")
    op.drop_table("users")
    op.drop_index("ix_builds_command_alias", "builds")
    op.drop_index("ix_builds_activity_type", "builds")
    op.drop_table("builds")
