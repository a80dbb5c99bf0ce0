# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    ConflictException,
    NotFoundException,
    TransientStoreException,
    ValidationException,
    translate_store_error,
)
from app.models.category import Category
from app.models.user import User
from app.schemas.category import CategoryCreate, CategoryUpdate
from app.services import category_service
from tests.factories import make_category, make_task


@pytest.mark.unit
class TestCategoryService:
    """Test category service functions"""

    def test_create_uses_default_color(self, test_db: Session, test_user: User):
        category = category_service.create_category(
            test_db, test_user.id, CategoryCreate(name="Home")
        )

        assert category.color == "#6366f1"
        assert category.task_count == 0

    def test_duplicate_name_conflicts(self, test_db: Session, test_user: User):
        make_category(test_db, test_user, "Work")

        with pytest.raises(ConflictException):
            category_service.create_category(
                test_db, test_user.id, CategoryCreate(name="Work")
            )

    def test_same_name_for_different_owners(
        self, test_db: Session, test_user: User, other_user: User
    ):
        make_category(test_db, other_user, "Work")

        category = category_service.create_category(
            test_db, test_user.id, CategoryCreate(name="Work")
        )

        assert category.name == "Work"

    def test_list_ordered_by_name_with_task_counts(
        self, test_db: Session, test_user: User, other_user: User
    ):
        work = make_category(test_db, test_user, "Work")
        make_category(test_db, test_user, "Errands")
        make_category(test_db, other_user, "Hidden")
        make_task(test_db, test_user, category_id=work.id)
        make_task(test_db, test_user, category_id=work.id)

        categories = category_service.list_categories(test_db, test_user.id)

        assert [c.name for c in categories] == ["Errands", "Work"]
        assert [c.task_count for c in categories] == [0, 2]

    def test_partial_update(self, test_db: Session, test_user: User):
        category = make_category(test_db, test_user, "Work", "#3b82f6")
        before = category.updated_at

        updated = category_service.update_category(
            test_db, test_user.id, category.id, CategoryUpdate(color="#ff0000")
        )

        assert updated.name == "Work"
        assert updated.color == "#ff0000"
        assert updated.updated_at > before

    def test_update_name_collision(self, test_db: Session, test_user: User):
        make_category(test_db, test_user, "Work")
        home = make_category(test_db, test_user, "Home")

        with pytest.raises(ConflictException):
            category_service.update_category(
                test_db, test_user.id, home.id, CategoryUpdate(name="Work")
            )

    def test_rename_to_own_name_is_allowed(self, test_db: Session, test_user: User):
        work = make_category(test_db, test_user, "Work")

        updated = category_service.update_category(
            test_db, test_user.id, work.id, CategoryUpdate(name="Work")
        )

        assert updated.name == "Work"

    def test_empty_update_rejected(self, test_db: Session, test_user: User):
        work = make_category(test_db, test_user, "Work")

        with pytest.raises(ValidationException):
            category_service.update_category(
                test_db, test_user.id, work.id, CategoryUpdate()
            )

    def test_foreign_category_not_found(
        self, test_db: Session, test_user: User, other_user: User
    ):
        theirs = make_category(test_db, other_user, "Work")

        with pytest.raises(NotFoundException):
            category_service.update_category(
                test_db, test_user.id, theirs.id, CategoryUpdate(name="Mine")
            )
        with pytest.raises(NotFoundException):
            category_service.delete_category(test_db, test_user.id, theirs.id)

    def test_delete_guarded_while_referenced(self, test_db: Session, test_user: User):
        work = make_category(test_db, test_user, "Work")
        task = make_task(test_db, test_user, category_id=work.id)

        with pytest.raises(ConflictException) as exc_info:
            category_service.delete_category(test_db, test_user.id, work.id)
        assert "existing tasks" in exc_info.value.detail

        test_db.delete(task)
        test_db.commit()
        category_service.delete_category(test_db, test_user.id, work.id)

        assert test_db.query(Category).count() == 0

    def test_store_outage_rolls_back(self, test_db: Session, test_user: User, mocker):
        outage = OperationalError("COMMIT", {}, Exception("connection lost"))
        mocker.patch.object(test_db, "commit", side_effect=outage)
        rollback = mocker.spy(test_db, "rollback")

        with pytest.raises(OperationalError) as exc_info:
            category_service.create_category(
                test_db, test_user.id, CategoryCreate(name="Home")
            )

        assert rollback.call_count >= 1
        assert isinstance(translate_store_error(exc_info.value), TransientStoreException)
