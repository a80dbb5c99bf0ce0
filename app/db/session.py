# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(database_url: str) -> Dict[str, Any]:
    """
    Pool configuration for the given URL.

    Server databases get a bounded QueuePool whose checkout timeout is short so
    that pool exhaustion fails fast instead of queueing requests. SQLite uses
    SQLAlchemy's default pool and only needs cross-thread access enabled.
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }


def enable_sqlite_foreign_keys(target_engine: Engine) -> None:
    """SQLite ignores ON DELETE rules unless foreign keys are switched on per connection."""

    if target_engine.dialect.name != "sqlite":
        return

    @event.listens_for(target_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

engine = create_engine(SQLALCHEMY_DATABASE_URL, **_engine_kwargs(SQLALCHEMY_DATABASE_URL))
enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def transaction(db: Session) -> Generator[Session, None, None]:
    """
    Run a block of statements as one unit of work.

    Commits when the block finishes and rolls back on any exception, so a
    task is never visible with only part of its tags written.

    Usage:
        with transaction(db):
            db.add(task)
            db.flush()
            replace_task_tags(db, task, tags)
    """
    try:
        yield db
        db.commit()
    except Exception as e:
        logger.debug("Rolling back transaction after %s", type(e).__name__)
        db.rollback()
        raise
