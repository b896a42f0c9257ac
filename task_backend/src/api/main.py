import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import PersistenceError, TaskNotFoundError, TaskValidationError
from .routers import tasks as tasks_router
from .schemas import field_errors
from .services import TASK_NOT_FOUND
from .settings import get_settings
from .utils import envelope

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "tasks", "description": "Create, list, update and complete tasks."},
]

_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Task Backend",
    description="Task tracking API with pluggable storage backends.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_allow_origins or ["*"],
    allow_methods=["GET", "POST", "PUT", "PATCH"],
    allow_headers=["*"],
)


def _internal_error(exc: Exception, message: str) -> JSONResponse:
    error = str(exc) if _settings.expose_error_details else "Internal server error"
    return envelope(500, message=message, error=error)


@app.exception_handler(TaskValidationError)
async def task_validation_handler(request: Request, exc: TaskValidationError) -> JSONResponse:
    """
    Response format:
        {"message": "Validation failed", "errors": {field: [messages]}, "status": 400}
    """
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.errors)
    return envelope(exc.status_code, message=exc.message, errors=exc.errors)


@app.exception_handler(TaskNotFoundError)
async def not_found_handler(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    return envelope(exc.status_code, message=exc.message)


@app.exception_handler(PersistenceError)
async def persistence_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.message)
    return _internal_error(exc, "Task store failure")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Requests FastAPI itself rejects. A malformed task id can never match a
    stored task, so it is answered like an unknown id; malformed bodies get the
    same 400 envelope as rejected fields.
    """
    errors = exc.errors()
    if any(tuple(err.get("loc") or ("",))[0] == "path" for err in errors):
        return envelope(404, message=TASK_NOT_FOUND)
    grouped = field_errors(errors)
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, grouped)
    return envelope(400, message="Validation failed", errors=grouped)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _internal_error(exc, "Unexpected error")


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """Report liveness and which task store backend is configured."""
    return {"message": "Healthy", "backend": _settings.persistence_backend}


app.include_router(tasks_router.router)
