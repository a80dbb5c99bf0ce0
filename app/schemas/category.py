# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Category schemas for API request/response validation
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field, model_validator

from app.schemas.common import CamelModel

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CategoryCreate(CamelModel):
    """Request model for creating a category"""

    name: str = Field(..., min_length=1, max_length=100, description="Category name")
    description: Optional[str] = Field(None, max_length=500)
    color: Optional[str] = Field(
        None, pattern=HEX_COLOR_PATTERN, description="Hex color, e.g. #3b82f6"
    )


class CategoryUpdate(CamelModel):
    """Request model for a partial category update"""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)

    @model_validator(mode="after")
    def reject_null_name_or_color(self):
        for field in ("name", "color"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class CategoryResponse(CamelModel):
    """Category with the number of tasks filed under it"""

    id: int
    name: str
    description: Optional[str] = None
    color: str
    task_count: int = 0
    created_at: datetime
    updated_at: datetime
