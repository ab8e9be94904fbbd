"""
guarded_api.api.errors

HTTP rendering of the typed error taxonomy.

Responsibilities:
- Map each `ErrorKind` to one HTTP status code.
- Render every guard/service failure with the same JSON shape.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
)

from guarded_api.errors import AuthorizationError, ErrorKind, GuardError

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.authentication: HTTP_401_UNAUTHORIZED,
    ErrorKind.authorization: HTTP_403_FORBIDDEN,
    ErrorKind.not_found: HTTP_404_NOT_FOUND,
    ErrorKind.conflict: HTTP_409_CONFLICT,
    ErrorKind.validation: 422,
}


async def _guard_error_handler(_: Request, exc: GuardError) -> JSONResponse:
    reason = exc.reason.value if isinstance(exc, AuthorizationError) else None
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.authentication else None
    return JSONResponse(
        status_code=STATUS_BY_KIND[exc.kind],
        content={"error": exc.kind.value, "reason": reason, "detail": exc.message},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GuardError, _guard_error_handler)  # type: ignore[arg-type]
