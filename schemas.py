from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime


class TaskCreate(BaseModel):
    """Schema for creating a new task"""
    text: Optional[str] = None


class TaskUpdate(BaseModel):
    """
    Schema for updating a task

    Both fields are optional. Whether a field was sent is read from
    `model_fields_set`, so `completed: false` counts as supplied.
    """
    text: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("text", "completed", mode="before")
    @classmethod
    def reject_null(cls, value):
        # Validators only run for supplied fields; an explicit null is an error.
        if value is None:
            raise ValueError("must not be null")
        return value


class TaskResponse(BaseModel):
    """Schema for task response"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    completed: bool
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class StatsResponse(BaseModel):
    """Aggregate task counts"""
    total: int
    completed: int
    pending: int


class HealthResponse(BaseModel):
    """Health check payload"""
    status: str
    timestamp: datetime
    database: str
    db_path: Optional[str] = Field(default=None, serialization_alias="dbPath")
