# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Category model for grouping a user's tasks.

Category names are unique per owner. A category cannot be deleted while any
task still points at it; the service layer enforces that guard.
"""
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)

from app.db.base import Base


class Category(Base):
    """Named, colored bucket owned by a single user."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, comment="Primary key")
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Category owner user ID",
    )
    name = Column(String(100), nullable=False, comment="Category name")
    description = Column(String(500), nullable=True, comment="Category description")
    color = Column(
        String(7),
        nullable=False,
        default="#6366f1",
        comment="Display color as #RRGGBB",
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

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_categories_user_name"),
    )
