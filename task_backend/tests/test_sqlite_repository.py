import sqlite3

import pytest

from src.api.db import SQLiteRepository
from src.api.errors import PersistenceError
from src.api.schemas import TaskCreate
from src.api.services import TaskService


@pytest.fixture
def repo(tmp_path):
    return SQLiteRepository(str(tmp_path / "nested" / "tasks.db"))


def test_create_and_get(repo):
    created = repo.create(TaskCreate(title="Buy milk", description="Semi-skimmed"))
    assert created["id"] == 1
    fetched = repo.get(created["id"])
    assert fetched == created
    assert fetched["completed"] is False
    assert repo.get(999) is None


def test_get_outside_integer_column_range(repo):
    repo.create(TaskCreate(title="Only"))
    assert repo.get(2**63) is None
    assert repo.get(-(2**63) - 1) is None
    assert repo.get(2**63 - 1) is None


def test_all_and_where(repo):
    for i in range(4):
        repo.create(TaskCreate(title=f"Task {i}", completed=(i % 2 == 1)))
    assert [t["title"] for t in repo.all()] == ["Task 0", "Task 1", "Task 2", "Task 3"]
    assert [t["title"] for t in repo.where(True)] == ["Task 1", "Task 3"]
    assert [t["title"] for t in repo.where(False)] == ["Task 0", "Task 2"]


def test_save_persists_fields(repo):
    created = repo.create(TaskCreate(title="Draft"))
    created["title"] = "Final"
    created["description"] = None
    created["completed"] = True
    saved = repo.save(created)
    assert saved["title"] == "Final"
    assert saved["completed"] is True
    assert saved["created_at"] == created["created_at"]
    assert repo.get(created["id"]) == saved


def test_save_missing_row(repo):
    created = repo.create(TaskCreate(title="Ghost"))
    created["id"] = 42
    with pytest.raises(PersistenceError):
        repo.save(created)


def test_data_survives_reopen(tmp_path):
    path = str(tmp_path / "tasks.db")
    SQLiteRepository(path).create(TaskCreate(title="Persisted"))
    assert [t["title"] for t in SQLiteRepository(path).all()] == ["Persisted"]


def test_driver_errors_are_wrapped(repo):
    conn = sqlite3.connect(repo._db_path)
    conn.execute("DROP TABLE tasks")
    conn.commit()
    conn.close()
    with pytest.raises(PersistenceError) as exc_info:
        repo.all()
    assert "no such table" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, sqlite3.Error)


def test_service_over_sqlite(repo):
    service = TaskService(repo)
    task = service.create_task({"title": "Buy milk", "completed": "0"})
    service.mark_completed(task["id"])
    service.update_task(task["id"], {"title": "Buy oat milk", "description": "1 litre"})
    stored = service.get_task(task["id"])
    assert stored["title"] == "Buy oat milk"
    assert stored["completed"] is True
    assert service.list_completed()[0]["id"] == task["id"]
