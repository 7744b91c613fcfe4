from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional


class Task(SQLModel, table=True):
    """Task model for todo items"""
    __tablename__ = "tasks"
    # AUTOINCREMENT keeps ids of deleted rows from being handed out again.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    text: str = Field(nullable=False)
    completed: bool = Field(default=False)
    created_at: datetime
    updated_at: datetime
