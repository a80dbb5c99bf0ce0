# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Task schemas for API request/response validation.

Update payloads are partial: only keys present in the request body are applied
(see TaskUpdate.changes()).
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, StringConstraints, field_validator, model_validator

from app.core.config import settings
from app.models.task import TaskPriority
from app.schemas.common import MAX_ID, MAX_PAGE, CamelModel

TagName = Annotated[str, StringConstraints(min_length=1, max_length=50)]

# Columns that may not be cleared with an explicit null
NON_NULLABLE_UPDATE_FIELDS = ("title", "completed", "priority", "progress", "tags")


class TaskSortField(str, Enum):
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"
    PRIORITY = "priority"
    DUE_DATE = "due_date"
    PROGRESS = "progress"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _dedupe_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    return list(dict.fromkeys(tags))


class TaskCreate(CamelModel):
    """Request model for creating a task."""

    title: str = Field(..., min_length=1, max_length=200, description="Task title")
    description: Optional[str] = Field(None, max_length=1000)
    priority: TaskPriority = Field(TaskPriority.MEDIUM)
    due_date: datetime = Field(..., description="Due date (ISO 8601)")
    progress: int = Field(0, ge=0, le=100, description="Percent complete")
    category_id: Optional[int] = Field(None, gt=0, le=MAX_ID)
    assigned_to: Optional[int] = Field(None, gt=0, le=MAX_ID)
    tags: List[TagName] = Field(
        default_factory=list, max_length=settings.MAX_TAGS_PER_TASK
    )

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v: List[str]) -> List[str]:
        return _dedupe_tags(v)


class TaskUpdate(CamelModel):
    """Request model for a partial task update."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    completed: Optional[bool] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    category_id: Optional[int] = Field(None, gt=0, le=MAX_ID)
    assigned_to: Optional[int] = Field(None, gt=0, le=MAX_ID)
    tags: Optional[List[TagName]] = Field(
        None, max_length=settings.MAX_TAGS_PER_TASK
    )

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _dedupe_tags(v)

    @model_validator(mode="after")
    def reject_null_for_required_columns(self):
        for field in NON_NULLABLE_UPDATE_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        """Column assignments for the fields present in the request, tags excluded."""
        data = self.model_dump(exclude_unset=True, exclude={"id", "tags"})
        if "priority" in data and data["priority"] is not None:
            data["priority"] = TaskPriority(data["priority"]).value
        return data

    def has_changes(self) -> bool:
        return bool(self.model_fields_set - {"id"})


class TaskBulkItem(TaskUpdate):
    """One entry of a bulk update: the task id plus its partial fields."""

    id: int = Field(..., gt=0, le=MAX_ID, description="Task ID")


class TaskBulkUpdate(CamelModel):
    """Request model for a bulk update."""

    tasks: List[TaskBulkItem] = Field(
        ..., min_length=1, max_length=settings.MAX_BULK_UPDATE_ITEMS
    )


class TaskQueryParams(CamelModel):
    """Filters, sorting and paging for the task list."""

    page: int = Field(1, ge=1, le=MAX_PAGE)
    limit: int = Field(10, ge=1, le=100)
    completed: Optional[bool] = None
    priority: Optional[TaskPriority] = None
    category_id: Optional[int] = Field(None, gt=0, le=MAX_ID)
    assigned_to: Optional[int] = Field(None, gt=0, le=MAX_ID)
    search: Optional[str] = Field(None, min_length=1, max_length=100)
    sort_by: TaskSortField = TaskSortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class TagResponse(CamelModel):
    """A tag attached to a task."""

    name: str
    created_at: Optional[datetime] = None


class TaskResponse(CamelModel):
    """Task joined with its category, assignee and tags."""

    id: int
    title: str
    description: Optional[str] = None
    completed: bool
    priority: TaskPriority
    due_date: Optional[datetime] = None
    progress: int
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    assigned_to: Optional[int] = None
    assigned_username: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    tags: List[TagResponse] = Field(default_factory=list)
