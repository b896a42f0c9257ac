from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    Storage record for a Task, shared by every repository backend.

    Fields:
    - id: Unique integer identifier, assigned by the store
    - title: Short title (1..255 chars, trimmed on input via schemas)
    - description: Optional detailed description
    - completed: Boolean completion flag
    - created_at: Creation timestamp, never serialized to clients
    - updated_at: Last update timestamp, never serialized to clients
    """

    id: int
    title: str
    description: Optional[str]
    completed: bool
    created_at: datetime
    updated_at: datetime
