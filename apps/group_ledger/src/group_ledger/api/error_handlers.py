"""Exception handlers rendering every failure as {code, message, details?}."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from group_ledger.domain.errors import DomainError, compose_error_message

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int,
    code: str,
    message: str,
    details: Mapping[str, Any] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"code": code, "message": message}
    if details:
        content["details"] = jsonable_encoder(dict(details))
    return JSONResponse(status_code=status_code, content=content)


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": str(error["msg"]),
        }
        for error in exc.errors()
    ]


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Render engine and query failures with their own status code."""

    logger.info(
        "domain_error",
        extra={"path": request.url.path, "code": exc.code},
    )
    return _error_response(exc.status_code, exc.code, exc.message, exc.details)


async def handle_validation_error(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(
        HTTPStatus.BAD_REQUEST,
        "INVALID_REQUEST",
        compose_error_message(
            cause="Request headers, query or body failed validation.",
            action="Fix the listed fields and send the request again.",
        ),
        {"errors": _field_errors(exc)},
    )


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Report ledger storage failures as a temporary outage."""

    logger.exception(
        "ledger_storage_error",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return _error_response(
        HTTPStatus.SERVICE_UNAVAILABLE,
        "STORAGE_UNAVAILABLE",
        compose_error_message(
            cause="Group ledger data could not be read.",
            action="Retry in a moment.",
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unexpected_error",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return _error_response(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        compose_error_message(
            cause="An unexpected internal error occurred.",
            action="Retry later or contact support if the error persists.",
        ),
        {"error_type": type(exc).__name__},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all global handlers to the FastAPI application."""

    app.add_exception_handler(DomainError, cast(Any, handle_domain_error))
    app.add_exception_handler(
        RequestValidationError, cast(Any, handle_validation_error)
    )
    app.add_exception_handler(SQLAlchemyError, cast(Any, handle_database_error))
    app.add_exception_handler(Exception, handle_unexpected_error)
