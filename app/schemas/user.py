# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import EmailStr, Field, model_validator

from app.schemas.common import CamelModel

USERNAME_PATTERN = r"^[a-zA-Z0-9]+$"


class UserRegister(CamelModel):
    """Registration request"""

    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)


class UserLogin(CamelModel):
    """Login request"""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(CamelModel):
    """Profile update; username and email may change but never to null"""

    username: Optional[str] = Field(
        None, min_length=3, max_length=50, pattern=USERNAME_PATTERN
    )
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)

    @model_validator(mode="after")
    def reject_null_identity(self):
        for field in ("username", "email"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class PasswordChange(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class UserResponse(CamelModel):
    """Public view of a user; never carries the password hash"""

    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class UserSummary(CamelModel):
    """Entry of the assignable-users list"""

    id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class AuthData(CamelModel):
    user: UserResponse
    token: str


class TokenData(CamelModel):
    token: str


class UserStats(CamelModel):
    """Task statistics for one user"""

    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    overdue_tasks: int = 0
    high_priority_tasks: int = 0
    medium_priority_tasks: int = 0
    low_priority_tasks: int = 0
    tasks_last_7_days: int = 0
    tasks_last_30_days: int = 0
    completion_rate: int = Field(0, description="Rounded percent of completed tasks")
