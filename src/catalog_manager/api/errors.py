"""Problem-details responses for domain and request-shape errors."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from catalog_manager.core.errors import INTERNAL_DETAIL, CatalogError, ErrorKind

logger = structlog.get_logger()


class Problem(BaseModel):
    type: str
    status: int
    title: str
    detail: str | None = None


_BAD_REQUEST = (status.HTTP_400_BAD_REQUEST, "INVALID_ARGUMENT", "Bad Request")

_KIND_TO_HTTP: dict[ErrorKind, tuple[int, str, str]] = {
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "NOT_FOUND", "Not Found"),
    ErrorKind.ID_TAKEN: (status.HTTP_409_CONFLICT, "ALREADY_EXISTS", "Conflict"),
    ErrorKind.NAME_TAKEN: (status.HTTP_409_CONFLICT, "ALREADY_EXISTS", "Conflict"),
    ErrorKind.HAS_INSTANCES: (
        status.HTTP_409_CONFLICT,
        "FAILED_PRECONDITION",
        "Failed Precondition",
    ),
    ErrorKind.SERVICE_TYPE_NOT_FOUND: _BAD_REQUEST,
    ErrorKind.IMMUTABLE_FIELD_UPDATE: _BAD_REQUEST,
    ErrorKind.INVALID_ARGUMENT: _BAD_REQUEST,
    ErrorKind.INTERNAL: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL",
        "Internal Server Error",
    ),
}


def problem_for(error: CatalogError) -> Problem:
    code, type_, title = _KIND_TO_HTTP[error.kind]
    detail = INTERNAL_DETAIL if error.kind is ErrorKind.INTERNAL else error.detail
    return Problem(type=type_, status=code, title=title, detail=detail)


def _render(problem: Problem) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type="application/problem+json",
    )


async def catalog_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, CatalogError)
    problem = problem_for(exc)
    logger.info(
        "request_failed",
        kind=exc.kind.value,
        status=problem.status,
    )
    return _render(problem)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    code, type_, title = _BAD_REQUEST
    return _render(Problem(type=type_, status=code, title=title, detail="; ".join(messages)))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
