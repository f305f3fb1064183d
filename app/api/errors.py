from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.rate_limiter import RateLimitExceededError
from app.auth.exceptions import AuthError
from app.extraction.exceptions import ExtractionExhaustedError, UnsupportedFileTypeError
from app.logging.logger import Log
from app.processor.exceptions import (
    DocumentBusyError,
    DocumentNotFoundError,
    PersistenceError,
    ProjectNotFoundError,
)
from app.storage.exceptions import BlobStoreError


class ApiError(Exception):
    """An error response raised directly by a route handler."""

    def __init__(self, status_code: int, error: str, details: str | None = None) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details


def error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body: dict[str, str] = {"error": error}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


async def _api_error(_request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ApiError)
    return error_response(exc.status_code, exc.error, exc.details)


async def _auth_error(_request: Request, exc: Exception) -> JSONResponse:
    Log.warning(f"Authentication failed: {exc}")
    return error_response(401, "Unauthorized")


async def _rate_limited(_request: Request, _exc: Exception) -> JSONResponse:
    return error_response(429, "Too many requests")


async def _invalid_body(_request: Request, exc: Exception) -> JSONResponse:
    details = str(exc.errors()) if isinstance(exc, RequestValidationError) else str(exc)
    return error_response(400, "Invalid request body", details)


async def _unsupported_type(_request: Request, exc: Exception) -> JSONResponse:
    return error_response(400, "Unsupported file type", str(exc))


async def _not_found(_request: Request, exc: Exception) -> JSONResponse:
    return error_response(404, "Not found", str(exc))


async def _busy(_request: Request, exc: Exception) -> JSONResponse:
    return error_response(409, "Document is already being processed", str(exc))


async def _extraction_failed(_request: Request, exc: Exception) -> JSONResponse:
    return error_response(500, "Text extraction failed", str(exc))


async def _persistence_failed(_request: Request, exc: Exception) -> JSONResponse:
    return error_response(500, "Failed to save extraction result", str(exc))


async def _blob_store_failed(_request: Request, exc: Exception) -> JSONResponse:
    return error_response(500, "Failed to store file", str(exc))


async def _unexpected(_request: Request, exc: Exception) -> JSONResponse:
    Log.error(f"Unhandled error: {type(exc).__name__}: {exc}")
    return error_response(500, "Internal server error", str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error)
    app.add_exception_handler(AuthError, _auth_error)
    app.add_exception_handler(RateLimitExceededError, _rate_limited)
    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.add_exception_handler(UnsupportedFileTypeError, _unsupported_type)
    app.add_exception_handler(DocumentNotFoundError, _not_found)
    app.add_exception_handler(ProjectNotFoundError, _not_found)
    app.add_exception_handler(DocumentBusyError, _busy)
    app.add_exception_handler(ExtractionExhaustedError, _extraction_failed)
    app.add_exception_handler(PersistenceError, _persistence_failed)
    app.add_exception_handler(BlobStoreError, _blob_store_failed)
    app.add_exception_handler(Exception, _unexpected)
