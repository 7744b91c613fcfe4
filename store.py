import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, List, NamedTuple, Optional

from sqlalchemy import case, func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, col, select

from errors import StorageFailure
from models import Task

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Marks an update field the caller did not supply.
UNSET = _Unset()


# SQLite INTEGER range; larger ids cannot name a row.
MAX_ID = 2**63 - 1
MIN_ID = -(2**63)


def _valid_id(task_id: int) -> bool:
    return MIN_ID <= task_id <= MAX_ID


class TaskStats(NamedTuple):
    total: int
    completed: int
    pending: int


def utcnow() -> datetime:
    """Current UTC time, timezone-aware"""
    return datetime.now(timezone.utc)


class TaskStore:
    """
    Durable task storage on top of a SQLAlchemy engine.

    Every operation runs in its own session and commits before returning.
    Create and update hand back the row re-read after the commit, so the
    caller always sees what was stored. SQLAlchemy faults are logged and
    raised as StorageFailure; nothing is retried.
    """

    def __init__(self, engine: Engine, clock: Callable[[], datetime] = utcnow) -> None:
        self._engine = engine
        self._clock = clock
        self._closed = False

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        try:
            with Session(self._engine) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("Database error during %s", operation)
            raise StorageFailure(f"{operation}: {exc}") from exc

    def create_schema(self) -> None:
        """Create the tasks table if it does not exist"""
        SQLModel.metadata.create_all(self._engine, tables=[Task.__table__])

    def count(self) -> int:
        with self._session("count") as session:
            return session.exec(select(func.count(col(Task.id)))).one()

    def list_all(self) -> List[Task]:
        """All tasks, newest first"""
        query = select(Task).order_by(col(Task.created_at).desc(), col(Task.id).desc())
        with self._session("list_all") as session:
            return list(session.exec(query).all())

    def get_by_id(self, task_id: int) -> Optional[Task]:
        if not _valid_id(task_id):
            return None
        with self._session("get_by_id") as session:
            return session.get(Task, task_id)

    def create(self, text: str) -> Task:
        """
        Insert a new task

        Args:
            text: Trimmed, non-empty task text

        Returns:
            The stored task, refreshed after commit
        """
        now = self._clock()
        task = Task(text=text, completed=False, created_at=now, updated_at=now)
        with self._session("create") as session:
            session.add(task)
            session.commit()
            session.refresh(task)
            logger.debug("Created task id=%s", task.id)
            return task

    def update(self, task_id: int, text=UNSET, completed=UNSET) -> Optional[Task]:
        """
        Apply a partial update

        Args:
            task_id: Task ID
            text: New text (trimmed before storing), or UNSET to keep it
            completed: New completion flag, or UNSET to keep it

        Returns:
            The updated task re-read after commit, or None if no such task
        """
        if not _valid_id(task_id):
            return None
        with self._session("update") as session:
            task = session.get(Task, task_id)
            if task is None:
                return None

            if text is not UNSET:
                task.text = text.strip()
            if completed is not UNSET:
                task.completed = bool(completed)

            # Refreshed on every update, even when nothing else changed.
            task.updated_at = self._clock()

            session.add(task)
            session.commit()
            session.refresh(task)
            logger.debug("Updated task id=%s", task_id)
            return task

    def delete(self, task_id: int) -> bool:
        """Hard-delete a task; False if it did not exist"""
        if not _valid_id(task_id):
            return False
        with self._session("delete") as session:
            task = session.get(Task, task_id)
            if task is None:
                return False
            session.delete(task)
            session.commit()
            logger.debug("Deleted task id=%s", task_id)
            return True

    def stats(self) -> TaskStats:
        """Total, completed and pending counts from one aggregate query"""
        query = select(
            func.count(col(Task.id)),
            func.coalesce(func.sum(case((col(Task.completed) == True, 1), else_=0)), 0),  # noqa: E712
        )
        with self._session("stats") as session:
            total, completed = session.exec(query).one()
        return TaskStats(total=total, completed=completed, pending=total - completed)

    def close(self) -> None:
        """Release pooled connections; safe to call more than once"""
        if self._closed:
            return
        self._engine.dispose()
        self._closed = True
        logger.info("Database connection closed")
