from __future__ import annotations

from typing import Dict, List


# PUBLIC_INTERFACE
class TaskServiceError(Exception):
    """Base class for errors raised by TaskService. Carries the HTTP status to answer with."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# PUBLIC_INTERFACE
class TaskValidationError(TaskServiceError):
    """Client input was rejected before any persistence attempt."""

    status_code = 400

    def __init__(self, errors: Dict[str, List[str]], message: str = "Validation failed") -> None:
        super().__init__(message)
        self.errors = errors


# PUBLIC_INTERFACE
class TaskNotFoundError(TaskServiceError):
    """The referenced task (or task set) does not exist."""

    status_code = 404


# PUBLIC_INTERFACE
class PersistenceError(TaskServiceError):
    """The store failed; `message` holds the underlying error text."""

    status_code = 500
