"""Initial schema: users and questions

Revision ID: 202610180001
Revises:
Create Date: 2026-10-18 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610180001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = sa.Enum(
    "student",
    "tutor",
    name="user_role",
)

user_status_enum = sa.Enum(
    "active",
    "inactive",
    "suspended",
    name="user_status",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=128), nullable=True),
        sa.Column("role", user_role_enum, nullable=False, server_default="student"),
        sa.Column("expertise", sa.JSON(), nullable=False),
        sa.Column("status", user_status_enum, nullable=False, server_default="active"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "questions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("topic", sa.String(length=128), nullable=False),
        sa.Column("student_id", sa.String(length=36), nullable=False),
        sa.Column("assigned_to_id", sa.String(length=36), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="unassigned"),
        sa.Column("resolution", sa.Text(), nullable=True),
        sa.Column("rating", sa.JSON(), nullable=True),
        sa.Column("comments", sa.JSON(), nullable=False),
        sa.Column("reopen_history", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_questions_student_id", "questions", ["student_id"])
    op.create_index("ix_questions_assigned_to_id", "questions", ["assigned_to_id"])
    op.create_index("ix_questions_status", "questions", ["status"])


def downgrade() -> None:
    op.drop_index("ix_questions_status", table_name="questions")
    op.drop_index("ix_questions_assigned_to_id", table_name="questions")
    op.drop_index("ix_questions_student_id", table_name="questions")
    op.drop_table("questions")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    user_status_enum.drop(op.get_bind(), checkfirst=True)
    user_role_enum.drop(op.get_bind(), checkfirst=True)
