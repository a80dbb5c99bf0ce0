# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Models package

Importing this package registers every table on app.db.base.Base.
"""
from app.models.category import Category
from app.models.task import PRIORITY_RANK, Task, TaskPriority, TaskTag
from app.models.user import User

__all__ = [
    "User",
    "Category",
    "Task",
    "TaskTag",
    "TaskPriority",
    "PRIORITY_RANK",
]
