# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Task mutations: create, partial update, delete, completion toggle and bulk
update.

Each operation is one transaction; a failure anywhere rolls back every
statement it issued, tags included.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import not_, update
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException, ValidationException
from app.db.session import transaction
from app.models.category import Category
from app.models.task import Task
from app.models.user import User
from app.schemas.task import (
    TaskBulkUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from app.services.task_query import get_task, get_tasks_by_ids
from app.services.task_tags import replace_task_tags

logger = logging.getLogger(__name__)


def _get_owned_task(
    db: Session, owner_id: int, task_id: int, detail: str = "Task not found"
) -> Task:
    task = db.query(Task).filter(Task.id == task_id, Task.user_id == owner_id).first()
    if task is None:
        raise NotFoundException(detail)
    return task


def _validate_references(
    db: Session,
    owner_id: int,
    category_id: Optional[int],
    assigned_to: Optional[int],
) -> None:
    """Category must belong to the owner; assignee must be an active user."""
    if category_id is not None:
        owned = (
            db.query(Category.id)
            .filter(Category.id == category_id, Category.user_id == owner_id)
            .first()
        )
        if owned is None:
            raise ValidationException("Category not found")
    if assigned_to is not None:
        assignee = (
            db.query(User.id)
            .filter(User.id == assigned_to, User.is_active == True)  # noqa: E712
            .first()
        )
        if assignee is None:
            raise ValidationException("Assigned user not found")


def _apply_update(db: Session, owner_id: int, task: Task, payload: TaskUpdate) -> None:
    changes = payload.changes()
    _validate_references(
        db, owner_id, changes.get("category_id"), changes.get("assigned_to")
    )
    for field, value in changes.items():
        setattr(task, field, value)
    if "tags" in payload.model_fields_set:
        replace_task_tags(db, task.id, payload.tags)
    # Tags-only updates leave the task row clean, so stamp it explicitly
    task.updated_at = datetime.now()


def create_task(db: Session, owner_id: int, payload: TaskCreate) -> TaskResponse:
    """
    Create a task with its tags.

    Args:
        db: Database session
        owner_id: Authenticated user ID
        payload: Validated task data

    Returns:
        The stored task joined with category, assignee and tags
    """
    _validate_references(db, owner_id, payload.category_id, payload.assigned_to)

    with transaction(db):
        task = Task(
            user_id=owner_id,
            title=payload.title,
            description=payload.description,
            priority=payload.priority.value,
            due_date=payload.due_date,
            progress=payload.progress,
            category_id=payload.category_id,
            assigned_to=payload.assigned_to,
            completed=False,
        )
        db.add(task)
        db.flush()
        if payload.tags:
            replace_task_tags(db, task.id, payload.tags)
        task_id = task.id

    logger.info("User %s created task %s", owner_id, task_id)
    return get_task(db, owner_id, task_id)


def update_task(
    db: Session, owner_id: int, task_id: int, payload: TaskUpdate
) -> TaskResponse:
    """
    Apply the fields present in the payload to one of the owner's tasks.

    Raises:
        ValidationException: Nothing to update, or a bad category/assignee
        NotFoundException: Task missing or owned by another user
    """
    if not payload.has_changes():
        raise ValidationException("No fields to update")

    with transaction(db):
        task = _get_owned_task(db, owner_id, task_id)
        _apply_update(db, owner_id, task, payload)

    logger.info("User %s updated task %s", owner_id, task_id)
    return get_task(db, owner_id, task_id)


def delete_task(db: Session, owner_id: int, task_id: int) -> None:
    """Delete one of the owner's tasks; its tags are removed by cascade."""
    with transaction(db):
        task = _get_owned_task(db, owner_id, task_id)
        db.delete(task)

    logger.info("User %s deleted task %s", owner_id, task_id)


def toggle_task(db: Session, owner_id: int, task_id: int) -> TaskResponse:
    """
    Flip the completion flag with a single owner-scoped UPDATE.

    Raises:
        NotFoundException: No owned task matched
    """
    with transaction(db):
        result = db.execute(
            update(Task)
            .where(Task.id == task_id, Task.user_id == owner_id)
            .values(completed=not_(Task.completed), updated_at=datetime.now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundException("Task not found")

    # The UPDATE bypassed the identity map
    db.expire_all()
    return get_task(db, owner_id, task_id)


def bulk_update_tasks(
    db: Session, owner_id: int, payload: TaskBulkUpdate
) -> List[TaskResponse]:
    """
    Apply several partial updates all-or-nothing.

    Items carrying only an id are skipped. The first id that is missing or
    owned by someone else aborts the whole batch.

    Returns:
        The updated tasks, in request order
    """
    updated_ids: List[int] = []
    with transaction(db):
        for item in payload.tasks:
            task = _get_owned_task(
                db, owner_id, item.id, detail=f"Task with id {item.id} not found"
            )
            if not item.has_changes():
                continue
            _apply_update(db, owner_id, task, item)
            updated_ids.append(item.id)

    logger.info(
        "User %s bulk-updated %d of %d tasks",
        owner_id,
        len(updated_ids),
        len(payload.tasks),
    )
    return get_tasks_by_ids(db, owner_id, updated_ids)
