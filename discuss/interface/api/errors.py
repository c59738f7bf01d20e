"""Mapping of domain errors to HTTP responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from discuss.domain.error import (
    CommentValidationError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
)


async def comment_validation_error_handler(
    request: Request, exc: CommentValidationError
) -> JSONResponse:
    """Validation problems are returned together so clients can show them all."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"errors": exc.errors},
    )


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
    )


async def not_authorized_error_handler(
    request: Request, exc: NotAuthorizedError
) -> JSONResponse:
    logfire.warn(
        "Forbidden comment operation",
        action=exc.action,
        resource_id=exc.resource_id,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)}
    )


async def invalid_transition_error_handler(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "status": exc.current},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach domain error handlers to the application."""
    app.add_exception_handler(CommentValidationError, comment_validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(NotAuthorizedError, not_authorized_error_handler)
    app.add_exception_handler(InvalidTransitionError, invalid_transition_error_handler)
