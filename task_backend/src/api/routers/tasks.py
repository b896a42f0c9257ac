from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status

from ..repositories import Repository, get_repository
from ..schemas import (
    ErrorEnvelope,
    MessageEnvelope,
    TaskEnvelope,
    TaskListEnvelope,
    TaskMessageEnvelope,
    TaskOut,
    ValidationErrorEnvelope,
)
from ..services import TaskService

router = APIRouter(tags=["tasks"])

_NOT_FOUND = {404: {"model": MessageEnvelope, "description": "Task not found"}}
_INVALID = {400: {"model": ValidationErrorEnvelope, "description": "Validation error"}}
_FAILED = {500: {"model": ErrorEnvelope, "description": "Store failure"}}


def _get_service(repo: Repository = Depends(get_repository)) -> TaskService:
    """
    Dependency building a TaskService over the configured repository.
    """
    return TaskService(repo)


def _out(task: Dict[str, Any]) -> Dict[str, Any]:
    return TaskOut.model_validate(task).model_dump()


# PUBLIC_INTERFACE
@router.get(
    "/tasks",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="Return every task as a JSON array. An empty store returns an empty array.",
    responses={**_FAILED},
)
def list_tasks(service: TaskService = Depends(_get_service)) -> List[Dict[str, Any]]:
    return [_out(t) for t in service.list_tasks()]


# PUBLIC_INTERFACE
@router.post(
    "/createTask",
    response_model=TaskEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description=(
        "Create a task. 'title' is required (max 255 chars), 'description' is optional, "
        "'completed' accepts true/false/1/0 and defaults to false."
    ),
    responses={**_INVALID, **_FAILED},
)
def create_task(payload: Any = Body(default=None), service: TaskService = Depends(_get_service)) -> Dict[str, Any]:
    """
    Create a new Task.
    """
    task = service.create_task(payload)
    return {"task": _out(task), "status": status.HTTP_201_CREATED}


# PUBLIC_INTERFACE
@router.get(
    "/tasks/{task_id}",
    response_model=TaskEnvelope,
    summary="Get Task",
    description="Get a single task by ID.",
    responses={**_NOT_FOUND, **_FAILED},
)
def get_task(task_id: int, service: TaskService = Depends(_get_service)) -> Dict[str, Any]:
    return {"task": _out(service.get_task(task_id)), "status": status.HTTP_200_OK}


# PUBLIC_INTERFACE
@router.put(
    "/updateTask/{task_id}",
    response_model=TaskMessageEnvelope,
    summary="Update Task",
    description="Replace title and description of a task. The completion flag is not changed.",
    responses={**_INVALID, **_NOT_FOUND, **_FAILED},
)
def update_task(
    task_id: int,
    payload: Any = Body(default=None),
    service: TaskService = Depends(_get_service),
) -> Dict[str, Any]:
    task = service.update_task(task_id, payload)
    return {"message": "Task updated successfully", "task": _out(task), "status": status.HTTP_200_OK}


# PUBLIC_INTERFACE
@router.get(
    "/showCompletedTasks",
    response_model=TaskListEnvelope,
    summary="List Completed Tasks",
    responses={**_NOT_FOUND, **_FAILED},
)
def show_completed_tasks(service: TaskService = Depends(_get_service)) -> Dict[str, Any]:
    return {"completedTasks": [_out(t) for t in service.list_completed()], "status": status.HTTP_200_OK}


# PUBLIC_INTERFACE
@router.get(
    "/showPendingTasks",
    response_model=TaskListEnvelope,
    summary="List Pending Tasks",
    responses={**_NOT_FOUND, **_FAILED},
)
def show_pending_tasks(service: TaskService = Depends(_get_service)) -> Dict[str, Any]:
    return {"completedTasks": [_out(t) for t in service.list_pending()], "status": status.HTTP_200_OK}


# PUBLIC_INTERFACE
@router.patch(
    "/markAsCompleted/{task_id}",
    response_model=TaskMessageEnvelope,
    summary="Mark Task Completed",
    responses={**_NOT_FOUND, **_FAILED},
)
def mark_as_completed(task_id: int, service: TaskService = Depends(_get_service)) -> Dict[str, Any]:
    task = service.mark_completed(task_id)
    return {"message": "Task marked as completed", "task": _out(task), "status": status.HTTP_200_OK}


# PUBLIC_INTERFACE
@router.patch(
    "/markAsPending/{task_id}",
    response_model=TaskMessageEnvelope,
    summary="Mark Task Pending",
    responses={**_NOT_FOUND, **_FAILED},
)
def mark_as_pending(task_id: int, service: TaskService = Depends(_get_service)) -> Dict[str, Any]:
    task = service.mark_pending(task_id)
    return {"message": "Task marked as pending", "task": _out(task), "status": status.HTTP_200_OK}
