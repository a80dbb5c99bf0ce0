# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException
from app.models.user import User
from app.schemas.common import MAX_ID, MAX_PAGE
from app.schemas.task import SortOrder, TaskQueryParams, TaskSortField
from app.services import task_query
from tests.factories import make_category, make_task, make_user


@pytest.mark.unit
class TestEscapeLike:
    def test_wildcards_are_escaped(self):
        assert task_query.escape_like("50%_off\\") == "50\\%\\_off\\\\"

    def test_plain_text_unchanged(self):
        assert task_query.escape_like("groceries") == "groceries"


@pytest.mark.unit
class TestTaskQueryParams:
    @pytest.mark.parametrize(
        "fields",
        [
            {"page": MAX_PAGE + 1},
            {"category_id": MAX_ID + 1},
            {"assigned_to": 0},
            {"search": ""},
        ],
    )
    def test_out_of_range_values_rejected(self, fields: dict):
        with pytest.raises(ValidationError):
            TaskQueryParams(**fields)

    def test_largest_page_offset_fits_an_integer(self):
        params = TaskQueryParams(page=MAX_PAGE, limit=100)

        assert params.offset <= MAX_ID


@pytest.mark.unit
class TestListTasks:
    """Test the owner-scoped task listing"""

    def test_only_owner_tasks_are_listed(
        self, test_db: Session, test_user: User, other_user: User
    ):
        make_task(test_db, test_user, "Mine")
        make_task(test_db, other_user, "Theirs")

        tasks, total = task_query.list_tasks(test_db, test_user.id, TaskQueryParams())

        assert total == 1
        assert [t.title for t in tasks] == ["Mine"]

    def test_pagination(self, test_db: Session, test_user: User):
        for i in range(25):
            make_task(test_db, test_user, f"Task {i}")

        first, total = task_query.list_tasks(
            test_db, test_user.id, TaskQueryParams(page=1, limit=10)
        )
        last, _ = task_query.list_tasks(
            test_db, test_user.id, TaskQueryParams(page=3, limit=10)
        )

        assert total == 25
        assert len(first) == 10
        assert len(last) == 5

    def test_filters_are_conjunctive(self, test_db: Session, test_user: User):
        make_task(test_db, test_user, "A", priority="high", completed=True)
        make_task(test_db, test_user, "B", priority="high", completed=False)
        make_task(test_db, test_user, "C", priority="low", completed=True)

        tasks, total = task_query.list_tasks(
            test_db,
            test_user.id,
            TaskQueryParams(priority="high", completed=True),
        )

        assert total == 1
        assert tasks[0].title == "A"

    def test_filter_by_category_and_assignee(
        self, test_db: Session, test_user: User, other_user: User
    ):
        category = make_category(test_db, test_user)
        make_task(
            test_db,
            test_user,
            "Match",
            category_id=category.id,
            assigned_to=other_user.id,
        )
        make_task(test_db, test_user, "Category only", category_id=category.id)

        tasks, _ = task_query.list_tasks(
            test_db,
            test_user.id,
            TaskQueryParams(category_id=category.id, assigned_to=other_user.id),
        )

        assert [t.title for t in tasks] == ["Match"]
        assert tasks[0].assigned_username == "otheruser"

    def test_search_matches_title_or_description_case_insensitive(
        self, test_db: Session, test_user: User
    ):
        make_task(test_db, test_user, "Buy MILK")
        make_task(test_db, test_user, "Errands", description="get milk and bread")
        make_task(test_db, test_user, "Call mom")

        tasks, total = task_query.list_tasks(
            test_db, test_user.id, TaskQueryParams(search="milk")
        )

        assert total == 2
        assert {t.title for t in tasks} == {"Buy MILK", "Errands"}

    def test_search_wildcards_match_literally(self, test_db: Session, test_user: User):
        make_task(test_db, test_user, "50% discount")
        make_task(test_db, test_user, "500 items")

        tasks, _ = task_query.list_tasks(
            test_db, test_user.id, TaskQueryParams(search="50%")
        )
        underscore, _ = task_query.list_tasks(
            test_db, test_user.id, TaskQueryParams(search="_")
        )

        assert [t.title for t in tasks] == ["50% discount"]
        assert underscore == []

    def test_sort_by_priority_uses_rank(self, test_db: Session, test_user: User):
        make_task(test_db, test_user, "medium", priority="medium")
        make_task(test_db, test_user, "high", priority="high")
        make_task(test_db, test_user, "low", priority="low")

        ascending, _ = task_query.list_tasks(
            test_db,
            test_user.id,
            TaskQueryParams(sort_by=TaskSortField.PRIORITY, sort_order=SortOrder.ASC),
        )
        descending, _ = task_query.list_tasks(
            test_db,
            test_user.id,
            TaskQueryParams(sort_by=TaskSortField.PRIORITY, sort_order=SortOrder.DESC),
        )

        assert [t.title for t in ascending] == ["low", "medium", "high"]
        assert [t.title for t in descending] == ["high", "medium", "low"]

    def test_ties_break_on_id(self, test_db: Session, test_user: User):
        same_due = datetime.now() + timedelta(days=1)
        ids = [
            make_task(test_db, test_user, f"T{i}", due_date=same_due).id
            for i in range(3)
        ]

        tasks, _ = task_query.list_tasks(
            test_db,
            test_user.id,
            TaskQueryParams(sort_by=TaskSortField.DUE_DATE, sort_order=SortOrder.DESC),
        )

        assert [t.id for t in tasks] == ids

    def test_rows_carry_category_and_tags(self, test_db: Session, test_user: User):
        category = make_category(test_db, test_user, "Work", "#3b82f6")
        make_task(test_db, test_user, "Tagged", category_id=category.id, tags=["x", "y"])

        tasks, _ = task_query.list_tasks(test_db, test_user.id, TaskQueryParams())

        assert tasks[0].category_name == "Work"
        assert tasks[0].category_color == "#3b82f6"
        assert [tag.name for tag in tasks[0].tags] == ["x", "y"]


@pytest.mark.unit
class TestGetTask:
    def test_get_own_task(self, test_db: Session, test_user: User):
        task = make_task(test_db, test_user, "Mine")

        assert task_query.get_task(test_db, test_user.id, task.id).title == "Mine"

    def test_foreign_task_is_not_found(self, test_db: Session, test_user: User):
        stranger = make_user(test_db, "stranger", "stranger@example.com")
        task = make_task(test_db, stranger, "Theirs")

        with pytest.raises(NotFoundException):
            task_query.get_task(test_db, test_user.id, task.id)

    def test_missing_task_is_not_found(self, test_db: Session, test_user: User):
        with pytest.raises(NotFoundException) as exc_info:
            task_query.get_task(test_db, test_user.id, 12345)

        assert exc_info.value.detail == "Task not found"
