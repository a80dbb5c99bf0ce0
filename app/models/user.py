# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
User database model.

Users are never hard-deleted: deactivation flips is_active and leaves owned
tasks and categories in place.
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.db.base import Base


class User(Base):
    """Account that owns tasks and categories and can be assigned tasks."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, comment="Primary key")
    username = Column(
        String(50), nullable=False, unique=True, index=True, comment="Login name"
    )
    email = Column(
        String(100), nullable=False, unique=True, index=True, comment="Email address"
    )
    password_hash = Column(String(255), nullable=False, comment="bcrypt hash")
    first_name = Column(String(50), nullable=True, comment="First name")
    last_name = Column(String(50), nullable=True, comment="Last name")
    is_active = Column(Boolean, nullable=False, default=True, comment="Active flag")
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

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
