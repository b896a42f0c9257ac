from __future__ import annotations

import logging
from typing import Any, Callable, List, TypeVar

from .errors import PersistenceError, TaskNotFoundError, TaskServiceError
from .models import TaskEntity
from .repositories import Repository
from .schemas import TaskCreate, TaskUpdate, decode

logger = logging.getLogger(__name__)

T = TypeVar("T")

TASK_NOT_FOUND = "Task not found"
TASKS_NOT_FOUND = "Tasks not found"


# PUBLIC_INTERFACE
class TaskService:
    """
    Operations over Task records.

    Every call into the repository goes through `_store`, so a failing store
    surfaces as PersistenceError and never as a raw driver exception. Lookups
    of unknown ids raise TaskNotFoundError; rejected input raises
    TaskValidationError.
    """

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    def _store(self, op: Callable[..., T], *args: Any) -> T:
        try:
            return op(*args)
        except TaskServiceError:
            raise
        except Exception as exc:
            logger.exception("Task store operation %s failed", getattr(op, "__name__", op))
            raise PersistenceError(str(exc)) from exc

    def _find(self, task_id: int) -> TaskEntity:
        task = self._store(self._repo.get, task_id)
        if task is None:
            logger.debug("Task %s not found", task_id)
            raise TaskNotFoundError(TASK_NOT_FOUND)
        return task

    def _set_completed(self, task_id: int, completed: bool) -> TaskEntity:
        task = self._find(task_id)
        task["completed"] = completed
        saved = self._store(self._repo.save, task)
        logger.info("Task %s marked as %s", task_id, "completed" if completed else "pending")
        return saved

    def list_tasks(self) -> List[TaskEntity]:
        """All tasks ordered by id. An empty store yields an empty list."""
        return self._store(self._repo.all)

    def create_task(self, payload: Any) -> TaskEntity:
        data = decode(TaskCreate, payload)
        task = self._store(self._repo.create, data)
        logger.info("Created task %s", task["id"])
        return task

    def get_task(self, task_id: int) -> TaskEntity:
        return self._find(task_id)

    def update_task(self, task_id: int, payload: Any) -> TaskEntity:
        """
        Overwrite title and description of an existing task.

        The id is resolved before the body is validated, so an unknown id is
        reported as not found even when the body is also invalid. The
        completed flag is left untouched.
        """
        task = self._find(task_id)
        data = decode(TaskUpdate, payload)
        task["title"] = data.title
        task["description"] = data.description
        saved = self._store(self._repo.save, task)
        logger.info("Updated task %s", task_id)
        return saved

    def _list_by_state(self, completed: bool) -> List[TaskEntity]:
        tasks = self._store(self._repo.where, completed)
        if not tasks:
            raise TaskNotFoundError(TASKS_NOT_FOUND)
        return tasks

    def list_completed(self) -> List[TaskEntity]:
        return self._list_by_state(True)

    def list_pending(self) -> List[TaskEntity]:
        return self._list_by_state(False)

    def mark_completed(self, task_id: int) -> TaskEntity:
        return self._set_completed(task_id, True)

    def mark_pending(self, task_id: int) -> TaskEntity:
        return self._set_completed(task_id, False)
