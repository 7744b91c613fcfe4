from fastapi import APIRouter, Depends, Response, status
from typing import List
from datetime import datetime, timezone
from database import get_store, describe_backend, database_path
from errors import NotFoundError, ValidationError
from schemas import TaskCreate, TaskUpdate, TaskResponse, StatsResponse, HealthResponse
from middleware.origin import verify_origin_middleware
from store import TaskStore, UNSET

router = APIRouter(dependencies=[Depends(verify_origin_middleware)])


@router.get("/tasks", response_model=List[TaskResponse])
async def list_tasks(store: TaskStore = Depends(get_store)):
    """
    Get all tasks, newest first

    Args:
        store: Task store

    Returns:
        List of tasks
    """
    return store.list_all()


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(task_data: TaskCreate, store: TaskStore = Depends(get_store)):
    """
    Create a new task

    Args:
        task_data: Task creation data
        store: Task store

    Returns:
        The created task
    """
    text = task_data.text.strip() if task_data.text is not None else ""
    if not text:
        raise ValidationError("Task text is required")

    return store.create(text)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, store: TaskStore = Depends(get_store)):
    """Get task details"""
    task = store.get_by_id(task_id)

    if task is None:
        raise NotFoundError("Task not found")

    return task


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(task_id: int, task_data: TaskUpdate, store: TaskStore = Depends(get_store)):
    """
    Update a task

    Only fields present in the body change; `updatedAt` is refreshed
    even when the body is empty.

    Args:
        task_id: Task ID
        task_data: Task update data
        store: Task store

    Returns:
        The updated task
    """
    supplied = task_data.model_fields_set

    text = UNSET
    if "text" in supplied:
        text = task_data.text.strip()
        if not text:
            raise ValidationError("Task text cannot be empty")

    completed = task_data.completed if "completed" in supplied else UNSET

    task = store.update(task_id, text=text, completed=completed)

    if task is None:
        raise NotFoundError("Task not found")

    return task


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, store: TaskStore = Depends(get_store)):
    """Delete a task"""
    if not store.delete(task_id):
        raise NotFoundError("Task not found")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(store: TaskStore = Depends(get_store)):
    """Get task statistics"""
    stats = store.stats()
    return StatsResponse(total=stats.total, completed=stats.completed, pending=stats.pending)


@router.get("/health", response_model=HealthResponse)
async def health_check(store: TaskStore = Depends(get_store)):
    """Health check endpoint"""
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        database=describe_backend(store.engine),
        db_path=database_path(store.engine),
    )
