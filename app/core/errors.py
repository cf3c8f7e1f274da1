"""Error taxonomy for the matching engine and its HTTP mapping."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class MatchingError(Exception):
    """Base exception for matching engine errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, **self.context}


class NotFoundError(MatchingError):
    """Raised when a referenced volunteer, event or match does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(MatchingError):
    """Raised when a match already exists for a volunteer/event pair."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, match_id: str | None = None, **context: Any):
        super().__init__(message, match_id=match_id, **context)
        self.match_id = match_id


class InvalidInputError(MatchingError):
    """Raised for bad status values and disallowed status transitions."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnavailableError(MatchingError):
    """Raised when the backing store fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


@contextmanager
def store_errors(operation: str, **ids: Any) -> Iterator[None]:
    """Translate store failures into ``UnavailableError`` with operation context.

    ``IntegrityError`` is left alone so callers can map it to ``ConflictError``.
    """
    try:
        yield
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        logger.error(f"[STORE] {operation} failed ({ids}): {e}", exc_info=True)
        raise UnavailableError(
            f"Store unavailable during {operation}", operation=operation, **ids
        ) from e


async def matching_error_handler(request: Request, exc: MatchingError) -> JSONResponse:
    """Render a ``MatchingError`` as a JSON body with its mapped status code."""
    if exc.status_code >= 500:
        logger.error(f"[API] {request.url.path}: {exc.message}")
    else:
        logger.info(f"[API] {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MatchingError, matching_error_handler)
