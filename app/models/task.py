# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Task and TaskTag models.

A task is owned by exactly one user (user_id never changes after creation).
Category and assignee are non-owning references that fall back to NULL when the
referenced row disappears. Tags have no lifecycle of their own: they are
written and deleted only through their task.
"""
import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Rank used when sorting by priority
PRIORITY_RANK = {
    TaskPriority.LOW.value: 1,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.HIGH.value: 3,
}


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True, comment="Primary key")
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owner user ID",
    )
    title = Column(String(200), nullable=False, comment="Task title")
    description = Column(String(1000), nullable=True, comment="Task description")
    completed = Column(Boolean, nullable=False, default=False, comment="Done flag")
    priority = Column(
        String(10),
        nullable=False,
        default=TaskPriority.MEDIUM.value,
        comment="low / medium / high",
    )
    due_date = Column(DateTime(timezone=True), nullable=True, comment="Due date")
    progress = Column(Integer, nullable=False, default=0, comment="Percent done")
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Optional category",
    )
    assigned_to = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Optional assignee user ID",
    )
    created_at = Column(
        DateTime, nullable=False, default=datetime.now, comment="Creation timestamp"
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.now,
        onupdate=datetime.now,
        comment="Last update timestamp",
    )

    tags = relationship(
        "TaskTag",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TaskTag.id",
    )

    __table_args__ = (
        CheckConstraint(
            "progress >= 0 AND progress <= 100", name="ck_tasks_progress_range"
        ),
        CheckConstraint(
            "priority IN ('low', 'medium', 'high')", name="ck_tasks_priority"
        ),
        Index("ix_tasks_user_created", "user_id", "created_at"),
    )


class TaskTag(Base):
    __tablename__ = "task_tags"

    id = Column(Integer, primary_key=True, index=True, comment="Primary key")
    task_id = Column(
        Integer,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning task",
    )
    tag_name = Column(String(50), nullable=False, comment="Tag text")
    created_at = Column(
        DateTime, nullable=False, default=datetime.now, comment="Creation timestamp"
    )

    task = relationship("Task", back_populates="tags")

    __table_args__ = (
        UniqueConstraint("task_id", "tag_name", name="uq_task_tags_task_tag"),
    )
