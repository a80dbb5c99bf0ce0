# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from app.schemas.common import MAX_ID, DataResponse, ListResponse, MessageResponse
from app.services import category_service

router = APIRouter()


@router.get("", response_model=ListResponse[CategoryResponse])
def list_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List the current user's categories ordered by name, with task counts.
    """
    return ListResponse(data=category_service.list_categories(db, current_user.id))


@router.post(
    "",
    response_model=DataResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    category_create: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    category = category_service.create_category(db, current_user.id, category_create)
    return DataResponse(message="Category created successfully", data=category)


@router.put("/{category_id}", response_model=DataResponse[CategoryResponse])
def update_category(
    category_update: CategoryUpdate,
    category_id: int = Path(..., gt=0, le=MAX_ID, description="Category ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    category = category_service.update_category(
        db, current_user.id, category_id, category_update
    )
    return DataResponse(message="Category updated successfully", data=category)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: int = Path(..., gt=0, le=MAX_ID, description="Category ID"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Delete a category; refused with 409 while any task still uses it.
    """
    category_service.delete_category(db, current_user.id, category_id)
    return MessageResponse(message="Category deleted successfully")
