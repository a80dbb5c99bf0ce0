# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import get_db
from app.core import security
from app.models.user import User
from app.schemas.common import DataResponse, ListResponse, MessageResponse
from app.schemas.user import (
    PasswordChange,
    UserResponse,
    UserStats,
    UserSummary,
    UserUpdate,
)
from app.services.user import user_service

router = APIRouter()


@router.get("", response_model=ListResponse[UserSummary])
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    """Active users, for picking an assignee"""
    users = user_service.get_active_users(db)
    return ListResponse(data=[UserSummary.model_validate(u) for u in users])


@router.get("/profile", response_model=DataResponse[UserResponse])
def read_current_user(current_user: User = Depends(security.get_current_user)):
    """Get current user information"""
    return DataResponse(data=UserResponse.model_validate(current_user))


@router.put("/profile", response_model=DataResponse[UserResponse])
def update_current_user(
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    """Update current user information"""
    user = user_service.update_current_user(db=db, user=current_user, obj_in=user_update)
    return DataResponse(
        message="Profile updated successfully", data=UserResponse.model_validate(user)
    )


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    password_change: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    user_service.change_password(db=db, user=current_user, obj_in=password_change)
    return MessageResponse(message="Password changed successfully")


@router.delete("/profile", response_model=MessageResponse)
def deactivate_current_user(
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    """Deactivate the account; tasks and categories are kept"""
    user_service.deactivate(db=db, user=current_user)
    return MessageResponse(message="Account deactivated successfully")


@router.get("/stats", response_model=DataResponse[UserStats])
def read_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(security.get_current_user),
):
    return DataResponse(data=user_service.get_stats(db=db, user=current_user))
