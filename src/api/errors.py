"""Translate domain and store failures into HTTP responses."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from src.domain.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DoubtError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger()

STATUS_BY_ERROR: dict[type[DoubtError], int] = {
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
}


def status_for(error: DoubtError) -> int:
    for error_type in type(error).__mro__:
        code = STATUS_BY_ERROR.get(error_type)  # type: ignore[arg-type]
        if code is not None:
            return code
    return status.HTTP_400_BAD_REQUEST


async def handle_doubt_error(request: Request, exc: DoubtError) -> JSONResponse:
    code = status_for(exc)
    await logger.ainfo("request_rejected", kind=exc.kind, status_code=code, detail=exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=code,
        content={"kind": exc.kind, "detail": exc.message},
        headers=headers,
    )


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())[1:])
        problems.append(f"{field}: {error['msg']}" if field else error["msg"])
    detail = "; ".join(problems) or "Invalid request"
    await logger.ainfo(
        "request_rejected", kind=ValidationError.kind, status_code=422, detail=detail
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"kind": ValidationError.kind, "detail": detail},
    )


async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    await logger.aerror("store_failure", error_type=type(exc).__name__, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"kind": "internal", "detail": "Internal server error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DoubtError, handle_doubt_error)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, handle_request_validation  # type: ignore[arg-type]
    )
    app.add_exception_handler(SQLAlchemyError, handle_store_error)  # type: ignore[arg-type]
