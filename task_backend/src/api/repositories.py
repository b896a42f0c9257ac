from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from functools import lru_cache
from threading import RLock
from typing import List, Optional

from .models import TaskEntity
from .schemas import TaskCreate
from .settings import get_settings


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for task storage backends."""

    @abstractmethod
    def create(self, data: TaskCreate) -> TaskEntity:
        """Create and return a new TaskEntity."""

    @abstractmethod
    def get(self, task_id: int) -> Optional[TaskEntity]:
        """Return a TaskEntity by id, or None if not found."""

    @abstractmethod
    def all(self) -> List[TaskEntity]:
        """Return every TaskEntity ordered by id."""

    @abstractmethod
    def save(self, entity: TaskEntity) -> TaskEntity:
        """
        Persist title, description and completed of an existing entity and
        return the stored version with a refreshed updated_at.
        Return value is undefined if the id was never created.
        """

    @abstractmethod
    def where(self, completed: bool) -> List[TaskEntity]:
        """Return the TaskEntities whose completed flag equals `completed`, ordered by id."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TaskEntity] = {}
        self._next_id = 1

    def _now(self) -> datetime:
        return datetime.now()

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def create(self, data: TaskCreate) -> TaskEntity:
        now = self._now()
        entity: TaskEntity = {
            "id": self._allocate_id(),
            "title": data.title,
            "description": data.description,
            "completed": data.completed,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()

    def get(self, task_id: int) -> Optional[TaskEntity]:
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else item.copy()

    def all(self) -> List[TaskEntity]:
        with self._lock:
            return [self._items[k].copy() for k in sorted(self._items)]

    def save(self, entity: TaskEntity) -> TaskEntity:
        with self._lock:
            existing = self._items[entity["id"]]
            updated = existing.copy()
            updated["title"] = entity["title"]
            updated["description"] = entity["description"]
            updated["completed"] = bool(entity["completed"])
            updated["updated_at"] = self._now()
            self._items[entity["id"]] = updated
            return updated.copy()

    def where(self, completed: bool) -> List[TaskEntity]:
        return [t for t in self.all() if t["completed"] == completed]


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the process-wide repository configured in settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        return SQLiteRepository(settings.sqlite_db_path)
    return InMemoryRepository()
