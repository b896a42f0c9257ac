from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import TaskValidationError

TITLE_MAX_LENGTH = 255

_TRUE_VALUES = {"true", "1"}
_FALSE_VALUES = {"false", "0"}

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce_completed(value: Any) -> bool:
    """
    Normalize a loosely typed completion flag.
    - bool is kept as-is
    - 1/0 (int) and 'true'/'false'/'1'/'0' (str, case-insensitive) are parsed
    - anything else, null included, becomes False
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in _TRUE_VALUES:
            return True
        if v in _FALSE_VALUES:
            return False
    return False


def _clean_title(value: str) -> str:
    s = value.strip()
    if not s:
        raise ValueError("The title field is required.")
    if len(s) > TITLE_MAX_LENGTH:
        raise ValueError(f"The title may not be greater than {TITLE_MAX_LENGTH} characters.")
    return s


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Request body for creating a Task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "description": "Two litres, semi-skimmed",
                "completed": False,
            }
        }
    )

    title: str = Field(..., description="Short title for the task (1..255 chars)")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    completed: bool = Field(default=False, description="Completion flag; unparseable input becomes false")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..255 length.
        """
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("completed", mode="before")
    @classmethod
    def coerce_completed(cls, v: Any) -> bool:
        return _coerce_completed(v)


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Request body for updating a Task. Both fields are required and replace the
    stored values; the completion flag is not part of an update.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk and bread",
                "description": "Milk, bread",
            }
        }
    )

    title: str = Field(..., description="New title (1..255 chars)")
    description: str = Field(..., description="New description")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("The description field is required.")
        return s


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Task as returned by the API. Store timestamps are not part of it.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Buy milk",
                "description": None,
                "completed": False,
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title for the task")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    completed: bool = Field(..., description="Completion status flag")


class TaskEnvelope(BaseModel):
    task: TaskOut
    status: int


class TaskMessageEnvelope(BaseModel):
    message: str
    task: TaskOut
    status: int


class TaskListEnvelope(BaseModel):
    # Same key for completed and pending result sets.
    completedTasks: List[TaskOut]
    status: int


class MessageEnvelope(BaseModel):
    message: str
    status: int


class ValidationErrorEnvelope(BaseModel):
    message: str
    errors: Dict[str, List[str]]
    status: int


class ErrorEnvelope(BaseModel):
    message: str
    error: str
    status: int


# PUBLIC_INTERFACE
def field_errors(errors: Sequence[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Group pydantic/FastAPI error dicts by field name.

    The 'body' prefix FastAPI adds to request body locations is dropped, so a
    missing title is reported under 'title'. Errors without a field are
    reported under 'body'.
    """
    grouped: Dict[str, List[str]] = {}
    for err in errors:
        if err.get("type") == "json_invalid":
            field = "body"
        else:
            loc = [str(p) for p in err.get("loc", ()) if p != "body"]
            field = ".".join(loc) or "body"
        msg = str(err.get("msg", "Invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        grouped.setdefault(field, []).append(msg)
    return grouped


# PUBLIC_INTERFACE
def decode(model: Type[ModelT], payload: Any) -> ModelT:
    """
    Decode a raw JSON body into a request model. A missing body is decoded
    as an empty object, so the required fields are named in the errors.

    Raises:
        TaskValidationError with per-field messages when the body is not a
        JSON object or fails validation.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise TaskValidationError({"body": ["The request body must be a JSON object."]})
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise TaskValidationError(field_errors(exc.errors())) from exc
