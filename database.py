import logging
from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import create_engine

from config import Settings
from store import TaskStore

logger = logging.getLogger(__name__)

SAMPLE_TASKS = [
    "Learn React",
    "Build a task app",
    "Connect to database",
]

DIALECT_NAMES = {
    "sqlite": "SQLite",
    "postgresql": "PostgreSQL",
    "mysql": "MySQL",
}


def build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for the configured database"""
    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        # The pool may hand a connection to a thread other than the one that opened it.
        connect_args["check_same_thread"] = False
    return create_engine(settings.database_url, echo=settings.db_echo, connect_args=connect_args)


def seed_sample_tasks(store: TaskStore) -> int:
    """Insert the sample tasks into an empty table; returns how many were added"""
    if store.count() > 0:
        return 0
    for text in SAMPLE_TASKS:
        store.create(text)
    logger.info("Sample tasks added")
    return len(SAMPLE_TASKS)


def open_store(settings: Settings) -> TaskStore:
    """
    Open the task store: connect, ensure the table, seed if empty

    Raises:
        Exception: Any failure creating the table; startup must not continue
    """
    store = TaskStore(build_engine(settings))
    try:
        store.create_schema()
    except Exception:
        logger.exception("Error creating tasks table")
        store.close()
        raise
    logger.info("Connected to %s database at %s", describe_backend(store.engine), database_path(store.engine))
    logger.info("Tasks table ready")
    seed_sample_tasks(store)
    return store


def describe_backend(engine: Engine) -> str:
    name = engine.dialect.name
    return DIALECT_NAMES.get(name, name)


def database_path(engine: Engine):
    return engine.url.database


def get_store(request: Request) -> TaskStore:
    """Get the task store - used as FastAPI dependency"""
    return request.app.state.store
