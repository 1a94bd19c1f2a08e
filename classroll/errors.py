"""API error taxonomy and the FastAPI handlers that render it.

Every error body is a flat JSON object (``{"error": ..., "details": ...}``
and friends) rather than FastAPI's default ``{"detail": ...}`` wrapper.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"


class ApiError(Exception):
    status_code = 500

    def __init__(self, error: str, **fields: Any):
        super().__init__(error)
        self.error = error
        self.fields = fields

    def to_body(self) -> dict:
        return {"error": self.error, **self.fields}


class NotFoundError(ApiError):
    status_code = 404

    def __init__(self, error: str, details: str):
        super().__init__(error, details=details)


class ConflictError(ApiError):
    """409. Carries either a ``suggestedAction`` or dependency counts."""

    status_code = 409


class UnauthorizedError(ApiError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__("Unauthorized", message=message)


class ForbiddenError(ApiError):
    status_code = 403

    def __init__(self, message: str):
        super().__init__("Forbidden", message=message)


class ValidationFailedError(ApiError):
    status_code = 400

    def __init__(self, details: str):
        super().__init__("Validation failed", details=details)


class InternalError(ApiError):
    status_code = 500

    def __init__(self, error: str, code: str):
        super().__init__(error, code=code)


def not_found(entity: str, entity_id: str) -> NotFoundError:
    """``not_found("Class", id)`` -> 404 "Class not found" / "No class found with ID: <id>"."""
    return NotFoundError(f"{entity} not found", f"No {entity.lower()} found with ID: {entity_id}")


@contextmanager
def internal_errors(message: str, code: str):
    """Turn anything unexpected raised inside the block into a 500 with ``code``.

    ``ApiError`` subclasses pass through untouched.
    """
    try:
        yield
    except ApiError:
        raise
    except Exception as e:
        logger.exception("%s (%s): %s", message, code, e)
        raise InternalError(message, code) from e


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc or '(root)'}: {err.get('msg')}")
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def _api_error_handler(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error(
                "request_id=%s %s %s -> %s %s",
                getattr(request.state, "request_id", None),
                request.method,
                request.url.path,
                exc.status_code,
                exc.fields.get("code"),
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError):
        body = ValidationFailedError(_format_validation_errors(exc)).to_body()
        return JSONResponse(status_code=400, content=body)

    @app.middleware("http")
    async def _request_id_middleware(request: Request, call_next):
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        request_id = incoming or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
