# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from app.core import security
from app.core.exceptions import (
    AuthenticationException,
    ConflictException,
    ValidationException,
)
from app.db.session import transaction
from app.models.task import Task, TaskPriority
from app.models.user import User
from app.schemas.user import PasswordChange, UserRegister, UserStats, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    User service class
    """

    def _find_clash(
        self,
        db: Session,
        username: Optional[str],
        email: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> Optional[User]:
        conditions = []
        if username:
            conditions.append(User.username == username)
        if email:
            conditions.append(User.email == email)
        if not conditions:
            return None
        query = db.query(User).filter(or_(*conditions))
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first()

    def _raise_clash(self, clash: User, username: Optional[str]) -> None:
        if username and clash.username == username:
            raise ConflictException("User with this username already exists")
        raise ConflictException("User with this email already exists")

    def register(self, db: Session, *, obj_in: UserRegister) -> User:
        """
        Create a new active user

        Raises:
            ConflictException: Username or email already registered
        """
        clash = self._find_clash(db, obj_in.username, obj_in.email)
        if clash:
            self._raise_clash(clash, obj_in.username)

        with transaction(db):
            db_obj = User(
                username=obj_in.username,
                email=obj_in.email,
                password_hash=security.get_password_hash(obj_in.password),
                first_name=obj_in.first_name,
                last_name=obj_in.last_name,
                is_active=True,
            )
            db.add(db_obj)

        db.refresh(db_obj)
        logger.info("Registered user %s (%s)", db_obj.id, db_obj.username)
        return db_obj

    def login(self, db: Session, *, email: str, password: str) -> User:
        """
        Check credentials

        Raises:
            AuthenticationException: Unknown email or wrong password
            AccountDeactivatedException: Account has been deactivated
        """
        user = security.authenticate_user(db, email, password)
        if user is None:
            logger.info("Failed login attempt for %s", email)
            raise AuthenticationException("Invalid email or password")
        return user

    def update_current_user(
        self, db: Session, *, user: User, obj_in: UserUpdate
    ) -> User:
        """
        Update profile fields present in the request

        Args:
            db: Database session
            user: Current user object
            obj_in: Partial profile update
        """
        changes = obj_in.changes()
        if not changes:
            raise ValidationException("No fields to update")

        clash = self._find_clash(
            db, changes.get("username"), changes.get("email"), exclude_id=user.id
        )
        if clash:
            self._raise_clash(clash, changes.get("username"))

        with transaction(db):
            for field, value in changes.items():
                setattr(user, field, value)
            user.updated_at = datetime.now()

        db.refresh(user)
        return user

    def change_password(
        self, db: Session, *, user: User, obj_in: PasswordChange
    ) -> None:
        """
        Replace the password hash after verifying the current password

        Raises:
            ValidationException: Current password does not match
        """
        if not security.verify_password(obj_in.current_password, user.password_hash):
            raise ValidationException("Current password is incorrect")

        with transaction(db):
            user.password_hash = security.get_password_hash(obj_in.new_password)
            user.updated_at = datetime.now()
        logger.info("User %s changed password", user.id)

    def deactivate(self, db: Session, *, user: User) -> None:
        """Soft-delete: the account can no longer sign in, its data stays"""
        with transaction(db):
            user.is_active = False
            user.updated_at = datetime.now()
        logger.info("User %s deactivated", user.id)

    def get_active_users(self, db: Session) -> List[User]:
        """
        Get all active users, ordered by username

        Args:
            db: Database session

        Returns:
            List of active users
        """
        return (
            db.query(User)
            .filter(User.is_active == True)  # noqa: E712
            .order_by(User.username.asc())
            .all()
        )

    def get_stats(self, db: Session, *, user: User) -> UserStats:
        """
        Aggregate task statistics for the user's own tasks
        """
        now = datetime.now()

        def count_if(condition):
            return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

        row = (
            db.query(
                func.count(Task.id),
                count_if(Task.completed == True),  # noqa: E712
                count_if(
                    (Task.completed == False)  # noqa: E712
                    & (Task.due_date.isnot(None))
                    & (Task.due_date < now)
                ),
                count_if(Task.priority == TaskPriority.HIGH.value),
                count_if(Task.priority == TaskPriority.MEDIUM.value),
                count_if(Task.priority == TaskPriority.LOW.value),
                count_if(Task.created_at >= now - timedelta(days=7)),
                count_if(Task.created_at >= now - timedelta(days=30)),
            )
            .filter(Task.user_id == user.id)
            .one()
        )
        total, completed, overdue, high, medium, low, last_7, last_30 = (
            int(value or 0) for value in row
        )

        return UserStats(
            total_tasks=total,
            completed_tasks=completed,
            pending_tasks=total - completed,
            overdue_tasks=overdue,
            high_priority_tasks=high,
            medium_priority_tasks=medium,
            low_priority_tasks=low,
            tasks_last_7_days=last_7,
            tasks_last_30_days=last_30,
            completion_rate=round(completed * 100 / total) if total else 0,
        )


user_service = UserService()
