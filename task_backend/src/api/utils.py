from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse


# PUBLIC_INTERFACE
def envelope(status_code: int, **fields: Any) -> JSONResponse:
    """
    Build a JSON response whose body echoes the HTTP status.

    Args:
        status_code: HTTP status of the response.
        **fields: Payload keys, e.g. message, errors, error.

    Returns:
        JSONResponse with body {**fields, "status": status_code}.
    """
    return JSONResponse(status_code=status_code, content={**fields, "status": status_code})
