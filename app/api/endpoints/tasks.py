# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Task API endpoints.

All routes act on the authenticated user's own tasks; a task owned by anyone
else answers 404 exactly like a missing one.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_db
from app.core.security import get_current_user
from app.models.task import TaskPriority
from app.models.user import User
from app.schemas.common import (
    MAX_ID,
    MAX_PAGE,
    DataResponse,
    ListResponse,
    MessageResponse,
    PaginationInfo,
)
from app.schemas.task import (
    SortOrder,
    TaskBulkUpdate,
    TaskCreate,
    TaskQueryParams,
    TaskResponse,
    TaskSortField,
    TaskUpdate,
)
from app.services import task_query, task_service

router = APIRouter()


def get_task_query_params(
    page: int = Query(1, ge=1, le=MAX_PAGE, description="Page number (1-based)"),
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    completed: Optional[bool] = Query(None),
    priority: Optional[TaskPriority] = Query(None),
    category_id: Optional[int] = Query(None, alias="categoryId", gt=0, le=MAX_ID),
    assigned_to: Optional[int] = Query(None, alias="assignedTo", gt=0, le=MAX_ID),
    search: Optional[str] = Query(None, min_length=1, max_length=100),
    sort_by: TaskSortField = Query(TaskSortField.CREATED_AT, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
) -> TaskQueryParams:
    return TaskQueryParams(
        page=page,
        limit=limit,
        completed=completed,
        priority=priority,
        category_id=category_id,
        assigned_to=assigned_to,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("", response_model=ListResponse[TaskResponse])
def list_tasks(
    params: TaskQueryParams = Depends(get_task_query_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List the current user's tasks with filtering, sorting and pagination.
    """
    tasks, total = task_query.list_tasks(db, current_user.id, params)
    return ListResponse(
        data=tasks,
        pagination=PaginationInfo.build(params.page, params.limit, total),
    )


@router.get("/{task_id}", response_model=DataResponse[TaskResponse])
def get_task(
    task_id: int = Path(..., gt=0, le=MAX_ID, description="Task ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return DataResponse(data=task_query.get_task(db, current_user.id, task_id))


@router.post(
    "", response_model=DataResponse[TaskResponse], status_code=status.HTTP_201_CREATED
)
def create_task(
    task_create: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = task_service.create_task(db, current_user.id, task_create)
    return DataResponse(message="Task created successfully", data=task)


# Declared before PUT /{task_id} so "bulk" is never parsed as an id
@router.put("/bulk", response_model=ListResponse[TaskResponse])
def bulk_update_tasks(
    bulk_update: TaskBulkUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update up to 50 tasks in one transaction; any foreign id aborts the batch.
    """
    tasks: List[TaskResponse] = task_service.bulk_update_tasks(
        db, current_user.id, bulk_update
    )
    return ListResponse(data=tasks)


@router.put("/{task_id}", response_model=DataResponse[TaskResponse])
def update_task(
    task_update: TaskUpdate,
    task_id: int = Path(..., gt=0, le=MAX_ID, description="Task ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Partially update a task. A present "tags" list replaces all tags.
    """
    task = task_service.update_task(db, current_user.id, task_id, task_update)
    return DataResponse(message="Task updated successfully", data=task)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int = Path(..., gt=0, le=MAX_ID, description="Task ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task_service.delete_task(db, current_user.id, task_id)
    return MessageResponse(message="Task deleted successfully")


@router.patch("/{task_id}/toggle", response_model=DataResponse[TaskResponse])
def toggle_task(
    task_id: int = Path(..., gt=0, le=MAX_ID, description="Task ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = task_service.toggle_task(db, current_user.id, task_id)
    return DataResponse(message="Task status toggled successfully", data=task)
