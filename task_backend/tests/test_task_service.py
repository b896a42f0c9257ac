import pytest

from src.api.errors import PersistenceError, TaskNotFoundError, TaskValidationError
from src.api.repositories import InMemoryRepository
from src.api.services import TaskService


@pytest.fixture
def service():
    return TaskService(InMemoryRepository())


class BrokenRepository(InMemoryRepository):
    def save(self, entity):
        raise OSError("disk full")


def test_create_defaults(service):
    task = service.create_task({"title": "  Buy milk  "})
    assert task["id"] == 1
    assert task["title"] == "Buy milk"
    assert task["description"] is None
    assert task["completed"] is False
    assert task["created_at"] == task["updated_at"]


def test_create_reports_field_errors(service):
    with pytest.raises(TaskValidationError) as exc_info:
        service.create_task({"title": "", "completed": "true"})
    assert exc_info.value.status_code == 400
    assert exc_info.value.errors == {"title": ["The title field is required."]}


def test_create_rejects_non_object(service):
    with pytest.raises(TaskValidationError) as exc_info:
        service.create_task("Buy milk")
    assert "body" in exc_info.value.errors


def test_get_unknown(service):
    with pytest.raises(TaskNotFoundError) as exc_info:
        service.get_task(1)
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Task not found"


def test_update_leaves_completed_alone(service):
    task = service.create_task({"title": "Write report", "completed": True})
    updated = service.update_task(task["id"], {"title": "Write summary", "description": "Two pages"})
    assert updated["title"] == "Write summary"
    assert updated["description"] == "Two pages"
    assert updated["completed"] is True
    assert updated["updated_at"] >= task["updated_at"]


def test_update_unknown_id_checked_first(service):
    with pytest.raises(TaskNotFoundError):
        service.update_task(5, {"title": ""})


def test_mark_is_idempotent(service):
    task = service.create_task({"title": "Toggle"})
    assert service.mark_completed(task["id"])["completed"] is True
    assert service.mark_completed(task["id"])["completed"] is True
    assert service.get_task(task["id"])["completed"] is True
    assert service.mark_pending(task["id"])["completed"] is False
    assert service.mark_pending(task["id"])["completed"] is False


def test_filtered_lists(service):
    with pytest.raises(TaskNotFoundError) as exc_info:
        service.list_completed()
    assert exc_info.value.message == "Tasks not found"
    with pytest.raises(TaskNotFoundError):
        service.list_pending()

    a = service.create_task({"title": "A"})
    b = service.create_task({"title": "B", "completed": 1})

    assert [t["id"] for t in service.list_completed()] == [b["id"]]
    assert [t["id"] for t in service.list_pending()] == [a["id"]]
    assert [t["id"] for t in service.list_tasks()] == [a["id"], b["id"]]


def test_list_tasks_empty(service):
    assert service.list_tasks() == []


def test_store_errors_become_persistence_errors():
    service = TaskService(BrokenRepository())
    task = service.create_task({"title": "Will not save"})
    with pytest.raises(PersistenceError) as exc_info:
        service.mark_completed(task["id"])
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "disk full"
    assert isinstance(exc_info.value.__cause__, OSError)


def test_returned_entities_are_copies(service):
    task = service.create_task({"title": "Original"})
    task["title"] = "Mutated"
    assert service.get_task(task["id"])["title"] == "Original"
