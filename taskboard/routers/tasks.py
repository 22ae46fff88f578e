from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..access import TaskAccess
from ..deps import get_principal, get_task_access
from ..schemas.task import Task as TaskSchema, TaskCreate, TaskStatusChange, TaskUpdate
from ..security import Principal

router = APIRouter()


def _get_update_data(task_update: TaskUpdate) -> dict:
    return task_update.model_dump(exclude_unset=True)


@router.get("/tasks", response_model=List[TaskSchema])
def list_tasks(
    principal: Principal = Depends(get_principal),
    access: TaskAccess = Depends(get_task_access),
):
    """All of the caller's tasks, most recently updated first."""
    return access.list_tasks(principal)


@router.post("/tasks", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    principal: Principal = Depends(get_principal),
    access: TaskAccess = Depends(get_task_access),
):
    """Create a new task for the caller."""
    return access.create_task(principal, task.title, task.description)


@router.get("/tasks/{task_id}", response_model=TaskSchema)
def get_task(
    task_id: str,
    principal: Principal = Depends(get_principal),
    access: TaskAccess = Depends(get_task_access),
):
    return access.get_task(principal, task_id)


@router.put("/tasks/{task_id}", response_model=TaskSchema)
@router.patch("/tasks/{task_id}", response_model=TaskSchema)
def update_task(
    task_id: str,
    task_update: TaskUpdate,
    principal: Principal = Depends(get_principal),
    access: TaskAccess = Depends(get_task_access),
):
    """Edit title and/or description of a task."""
    return access.update_task(principal, task_id, _get_update_data(task_update))


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    principal: Principal = Depends(get_principal),
    access: TaskAccess = Depends(get_task_access),
):
    access.delete_task(principal, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/tasks/{task_id}/status", response_model=TaskSchema)
def change_task_status(
    task_id: str,
    payload: TaskStatusChange,
    principal: Principal = Depends(get_principal),
    access: TaskAccess = Depends(get_task_access),
):
    """Set any of the four statuses, from any current status."""
    return access.change_task_status(principal, task_id, payload.status)


@router.post("/tasks/{task_id}/advance", response_model=TaskSchema)
def advance_task_status(
    task_id: str,
    principal: Principal = Depends(get_principal),
    access: TaskAccess = Depends(get_task_access),
):
    """Move a task to the next status in the board's cycle."""
    return access.advance_task_status(principal, task_id)
