"""initial schema: users, categories, tasks and task_tags

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-06-01 10:00:00.000000+08:00

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, comment="Creation timestamp"
        ),
        sa.Column(
            "updated_at", sa.DateTime(), nullable=False, comment="Last update timestamp"
        ),
    ]


def upgrade() -> None:
    """Upgrade schema - Create users, categories, tasks and task_tags tables."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False, comment="Primary key"),
        sa.Column("username", sa.String(length=50), nullable=False, comment="Login name"),
        sa.Column("email", sa.String(length=100), nullable=False, comment="Email address"),
        sa.Column(
            "password_hash", sa.String(length=255), nullable=False, comment="bcrypt hash"
        ),
        sa.Column("first_name", sa.String(length=50), nullable=True, comment="First name"),
        sa.Column("last_name", sa.String(length=50), nullable=True, comment="Last name"),
        sa.Column(
            "is_active",
            sa.Boolean(),
            nullable=False,
            server_default=sa.true(),
            comment="Active flag",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    # Create categories table
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), nullable=False, comment="Primary key"),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="Category owner user ID"),
        sa.Column("name", sa.String(length=100), nullable=False, comment="Category name"),
        sa.Column(
            "description",
            sa.String(length=500),
            nullable=True,
            comment="Category description",
        ),
        sa.Column(
            "color",
            sa.String(length=7),
            nullable=False,
            server_default="#6366f1",
            comment="Display color as #RRGGBB",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "name", name="uq_categories_user_name"),
    )
    op.create_index(op.f("ix_categories_id"), "categories", ["id"], unique=False)
    op.create_index(
        op.f("ix_categories_user_id"), "categories", ["user_id"], unique=False
    )

    # Create tasks table
    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), nullable=False, comment="Primary key"),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="Owner user ID"),
        sa.Column("title", sa.String(length=200), nullable=False, comment="Task title"),
        sa.Column(
            "description", sa.String(length=1000), nullable=True, comment="Task description"
        ),
        sa.Column(
            "completed",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
            comment="Done flag",
        ),
        sa.Column(
            "priority",
            sa.String(length=10),
            nullable=False,
            server_default="medium",
            comment="low / medium / high",
        ),
        sa.Column(
            "due_date", sa.DateTime(timezone=True), nullable=True, comment="Due date"
        ),
        sa.Column(
            "progress",
            sa.Integer(),
            nullable=False,
            server_default="0",
            comment="Percent done",
        ),
        sa.Column("category_id", sa.Integer(), nullable=True, comment="Optional category"),
        sa.Column(
            "assigned_to", sa.Integer(), nullable=True, comment="Optional assignee user ID"
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "progress >= 0 AND progress <= 100", name="ck_tasks_progress_range"
        ),
        sa.CheckConstraint(
            "priority IN ('low', 'medium', 'high')", name="ck_tasks_priority"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["assigned_to"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tasks_id"), "tasks", ["id"], unique=False)
    op.create_index(op.f("ix_tasks_user_id"), "tasks", ["user_id"], unique=False)
    op.create_index(op.f("ix_tasks_category_id"), "tasks", ["category_id"], unique=False)
    op.create_index(op.f("ix_tasks_assigned_to"), "tasks", ["assigned_to"], unique=False)
    # Default listing is the owner's tasks newest first
    op.create_index(
        "ix_tasks_user_created", "tasks", ["user_id", "created_at"], unique=False
    )

    # Create task_tags table
    op.create_table(
        "task_tags",
        sa.Column("id", sa.Integer(), nullable=False, comment="Primary key"),
        sa.Column("task_id", sa.Integer(), nullable=False, comment="Owning task"),
        sa.Column("tag_name", sa.String(length=50), nullable=False, comment="Tag text"),
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, comment="Creation timestamp"
        ),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("task_id", "tag_name", name="uq_task_tags_task_tag"),
    )
    op.create_index(op.f("ix_task_tags_id"), "task_tags", ["id"], unique=False)
    op.create_index(op.f("ix_task_tags_task_id"), "task_tags", ["task_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema - Drop all tables."""
    op.drop_index(op.f("ix_task_tags_task_id"), table_name="task_tags")
    op.drop_index(op.f("ix_task_tags_id"), table_name="task_tags")
    op.drop_table("task_tags")

    op.drop_index("ix_tasks_user_created", table_name="tasks")
    op.drop_index(op.f("ix_tasks_assigned_to"), table_name="tasks")
    op.drop_index(op.f("ix_tasks_category_id"), table_name="tasks")
    op.drop_index(op.f("ix_tasks_user_id"), table_name="tasks")
    op.drop_index(op.f("ix_tasks_id"), table_name="tasks")
    op.drop_table("tasks")

    op.drop_index(op.f("ix_categories_user_id"), table_name="categories")
    op.drop_index(op.f("ix_categories_id"), table_name="categories")
    op.drop_table("categories")

    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")
