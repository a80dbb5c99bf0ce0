# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Tag rows belonging to tasks.

Tags have no identity of their own: writing a task's tags always replaces the
whole set.
"""
from collections import defaultdict
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from app.models.task import TaskTag
from app.schemas.task import TagResponse


def load_tags(db: Session, task_ids: Iterable[int]) -> Dict[int, List[TagResponse]]:
    """
    Fetch the tags of several tasks with one query.

    Args:
        db: Database session
        task_ids: Task IDs to look up

    Returns:
        Mapping of task ID to its tags in insertion order; tasks without tags
        are absent from the mapping
    """
    ids = list(task_ids)
    if not ids:
        return {}

    rows = (
        db.query(TaskTag)
        .filter(TaskTag.task_id.in_(ids))
        .order_by(TaskTag.task_id, TaskTag.id)
        .all()
    )
    tags: Dict[int, List[TagResponse]] = defaultdict(list)
    for row in rows:
        tags[row.task_id].append(
            TagResponse(name=row.tag_name, created_at=row.created_at)
        )
    return dict(tags)


def replace_task_tags(db: Session, task_id: int, tag_names: List[str]) -> None:
    """
    Delete every tag of the task and insert the given names.

    Must run inside the caller's transaction. Duplicate names collapse to one.
    """
    db.query(TaskTag).filter(TaskTag.task_id == task_id).delete()
    for name in dict.fromkeys(tag_names):
        db.add(TaskTag(task_id=task_id, tag_name=name))
    db.flush()
