"""Map domain errors to the JSON error envelope ``{message, error?}``."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from signlearn.core.errors import SignlearnError

logger = logging.getLogger(__name__)


def _envelope(
    status_code: int, message: str, error: str | None = None
) -> JSONResponse:
    body: dict[str, str] = {"message": message}
    if error:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=body)


async def _domain_error(request: Request, exc: SignlearnError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s (%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.detail,
            exc_info=exc,
        )
    else:
        logger.warning(
            "%s %s rejected: %s", request.method, request.url.path, exc.message
        )
    return _envelope(exc.status_code, exc.message, exc.detail)


async def _request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    field = ".".join(loc)
    detail = f"{field}: {first.get('msg', 'invalid value')}" if field else None
    logger.warning("%s %s invalid input: %s", request.method, request.url.path, detail)
    return _envelope(status.HTTP_400_BAD_REQUEST, "Validation error", detail)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _envelope(exc.status_code, message)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc)
    )


def install_error_handlers(app: FastAPI) -> None:
    app.exception_handler(SignlearnError)(_domain_error)
    app.exception_handler(RequestValidationError)(_request_validation_error)
    app.exception_handler(StarletteHTTPException)(_http_error)
    app.exception_handler(Exception)(_unhandled_error)
