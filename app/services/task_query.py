# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Read side of tasks: owner-scoped filtering, sorting and paging.

Every statement built here starts from a query already restricted to the
owner's tasks, so a task that exists but belongs to someone else is
indistinguishable from one that does not exist.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Query, Session

from app.core.exceptions import NotFoundException
from app.models.category import Category
from app.models.task import PRIORITY_RANK, Task
from app.models.user import User
from app.schemas.task import SortOrder, TaskQueryParams, TaskResponse, TaskSortField
from app.services.task_tags import load_tags

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"

_SORT_COLUMNS = {
    TaskSortField.CREATED_AT: Task.created_at,
    TaskSortField.UPDATED_AT: Task.updated_at,
    TaskSortField.TITLE: Task.title,
    TaskSortField.DUE_DATE: Task.due_date,
    TaskSortField.PROGRESS: Task.progress,
    TaskSortField.PRIORITY: case(PRIORITY_RANK, value=Task.priority, else_=0),
}


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the text matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _filters(owner_id: int, params: TaskQueryParams) -> list:
    conditions = [Task.user_id == owner_id]
    if params.completed is not None:
        conditions.append(Task.completed == params.completed)
    if params.priority is not None:
        conditions.append(Task.priority == params.priority.value)
    if params.category_id is not None:
        conditions.append(Task.category_id == params.category_id)
    if params.assigned_to is not None:
        conditions.append(Task.assigned_to == params.assigned_to)
    if params.search:
        pattern = f"%{escape_like(params.search)}%"
        conditions.append(
            or_(
                Task.title.ilike(pattern, escape=LIKE_ESCAPE),
                Task.description.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
    return conditions


def _joined_query(db: Session, owner_id: int) -> Query:
    return (
        db.query(Task, Category.name, Category.color, User.username)
        .outerjoin(Category, Task.category_id == Category.id)
        .outerjoin(User, Task.assigned_to == User.id)
        .filter(Task.user_id == owner_id)
    )


def _to_responses(db: Session, rows: Sequence[Tuple]) -> List[TaskResponse]:
    tags = load_tags(db, [row[0].id for row in rows])
    return [
        TaskResponse(
            id=task.id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            priority=task.priority,
            due_date=task.due_date,
            progress=task.progress,
            category_id=task.category_id,
            category_name=category_name,
            category_color=category_color,
            assigned_to=task.assigned_to,
            assigned_username=assigned_username,
            created_at=task.created_at,
            updated_at=task.updated_at,
            tags=tags.get(task.id, []),
        )
        for task, category_name, category_color, assigned_username in rows
    ]


def list_tasks(
    db: Session, owner_id: int, params: TaskQueryParams
) -> Tuple[List[TaskResponse], int]:
    """
    List one page of the owner's tasks.

    Args:
        db: Database session
        owner_id: Authenticated user ID
        params: Validated filters, sort and paging

    Returns:
        (tasks on the requested page, total number of matches)
    """
    conditions = _filters(owner_id, params)

    total = db.query(func.count(Task.id)).filter(*conditions).scalar() or 0

    sort_column = _SORT_COLUMNS[params.sort_by]
    primary = sort_column.asc() if params.sort_order == SortOrder.ASC else sort_column.desc()

    rows = (
        _joined_query(db, owner_id)
        .filter(*conditions)
        .order_by(primary, Task.id.asc())
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    logger.debug(
        "Listed %d of %d tasks for user %s (page=%s, limit=%s)",
        len(rows),
        total,
        owner_id,
        params.page,
        params.limit,
    )
    return _to_responses(db, rows), total


def get_tasks_by_ids(
    db: Session, owner_id: int, task_ids: Sequence[int]
) -> List[TaskResponse]:
    """Joined rows for the given IDs, in the order the IDs were given."""
    if not task_ids:
        return []
    rows = _joined_query(db, owner_id).filter(Task.id.in_(list(task_ids))).all()
    by_id = {row[0].id: row for row in rows}
    ordered = [by_id[task_id] for task_id in dict.fromkeys(task_ids) if task_id in by_id]
    return _to_responses(db, ordered)


def find_task(db: Session, owner_id: int, task_id: int) -> Optional[TaskResponse]:
    row = _joined_query(db, owner_id).filter(Task.id == task_id).first()
    if row is None:
        return None
    return _to_responses(db, [row])[0]


def get_task(db: Session, owner_id: int, task_id: int) -> TaskResponse:
    """
    Get one of the owner's tasks joined with category, assignee and tags.

    Raises:
        NotFoundException: Task missing or owned by another user
    """
    task = find_task(db, owner_id, task_id)
    if task is None:
        raise NotFoundException("Task not found")
    return task
