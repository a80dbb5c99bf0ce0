# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Category service for managing a user's task categories.

Category names are unique per owner. A category cannot be deleted while any
task still refers to it.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    ConflictException,
    NotFoundException,
    ValidationException,
)
from app.db.session import transaction
from app.models.category import Category
from app.models.task import Task
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate

logger = logging.getLogger(__name__)


def _get_owned_category(db: Session, owner_id: int, category_id: int) -> Category:
    category = (
        db.query(Category)
        .filter(Category.id == category_id, Category.user_id == owner_id)
        .first()
    )
    if category is None:
        raise NotFoundException("Category not found")
    return category


def _name_taken(
    db: Session, owner_id: int, name: str, exclude_id: Optional[int] = None
) -> bool:
    query = db.query(Category.id).filter(
        Category.user_id == owner_id, Category.name == name
    )
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    return query.first() is not None


def _task_count(db: Session, owner_id: int, category_id: int) -> int:
    return (
        db.query(func.count(Task.id))
        .filter(Task.category_id == category_id, Task.user_id == owner_id)
        .scalar()
        or 0
    )


def _to_response(category: Category, task_count: int) -> CategoryResponse:
    response = CategoryResponse.model_validate(category)
    response.task_count = task_count
    return response


def list_categories(db: Session, owner_id: int) -> List[CategoryResponse]:
    """
    List the owner's categories ordered by name, each with its task count.

    Args:
        db: Database session
        owner_id: Authenticated user ID

    Returns:
        Categories with task_count filled in
    """
    rows = (
        db.query(Category, func.count(Task.id))
        .outerjoin(
            Task, and_(Task.category_id == Category.id, Task.user_id == owner_id)
        )
        .filter(Category.user_id == owner_id)
        .group_by(Category.id)
        .order_by(Category.name.asc())
        .all()
    )
    return [_to_response(category, count) for category, count in rows]


def create_category(
    db: Session, owner_id: int, payload: CategoryCreate
) -> CategoryResponse:
    """
    Create a category.

    Raises:
        ConflictException: The owner already has a category with this name
    """
    if _name_taken(db, owner_id, payload.name):
        raise ConflictException("Category with this name already exists")

    with transaction(db):
        category = Category(
            user_id=owner_id,
            name=payload.name,
            description=payload.description,
            color=payload.color or settings.DEFAULT_CATEGORY_COLOR,
        )
        db.add(category)

    db.refresh(category)
    logger.info("User %s created category %s", owner_id, category.id)
    return _to_response(category, 0)


def update_category(
    db: Session, owner_id: int, category_id: int, payload: CategoryUpdate
) -> CategoryResponse:
    """
    Apply the fields present in the payload to one of the owner's categories.

    Raises:
        ValidationException: No fields present
        NotFoundException: Category missing or owned by another user
        ConflictException: New name collides with another of the owner's categories
    """
    changes = payload.changes()
    if not changes:
        raise ValidationException("No fields to update")

    with transaction(db):
        category = _get_owned_category(db, owner_id, category_id)
        if "name" in changes and _name_taken(
            db, owner_id, changes["name"], exclude_id=category.id
        ):
            raise ConflictException("Category with this name already exists")
        for field, value in changes.items():
            setattr(category, field, value)
        category.updated_at = datetime.now()

    db.refresh(category)
    logger.info("User %s updated category %s", owner_id, category_id)
    return _to_response(category, _task_count(db, owner_id, category_id))


def delete_category(db: Session, owner_id: int, category_id: int) -> None:
    """
    Delete one of the owner's categories.

    Raises:
        NotFoundException: Category missing or owned by another user
        ConflictException: Tasks still reference the category
    """
    with transaction(db):
        category = _get_owned_category(db, owner_id, category_id)
        if _task_count(db, owner_id, category_id) > 0:
            raise ConflictException(
                "Cannot delete category with existing tasks. "
                "Please reassign or delete tasks first."
            )
        db.delete(category)

    logger.info("User %s deleted category %s", owner_id, category_id)
