from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from Security.xss_protection import sanitize

logger = logging.getLogger("app.errors")


def _error_title(status_code: int) -> str:
    if status_code == 400:
        return "Bad request"
    if status_code == 404:
        return "Not found"
    if status_code == 405:
        return "Method not allowed"
    if status_code == 409:
        return "Conflict"
    if status_code == 422:
        return "Invalid input"
    if status_code >= 500:
        return "Internal server error"
    return "Request failed"


def _detail_from_exc(exc, fallback: str) -> str:
    raw = getattr(exc, "detail", None)
    if isinstance(raw, str) and raw.strip():
        return raw
    return fallback


def validation_errors(exc: RequestValidationError) -> list[dict]:
    """Field locations and messages only; the submitted input is never echoed."""
    errors = []
    for error in exc.errors() or []:
        field = ".".join(str(x) for x in error.get("loc", []) if x != "body")
        # Some pydantic messages quote a fragment of the input.
        errors.append({"field": field, "message": sanitize(error.get("msg")) or "Invalid input."})
    return errors


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": _error_title(422), "errors": validation_errors(exc)},
        )

    @app.exception_handler(HTTPException)
    async def fastapi_http_exception_handler(request: Request, exc: HTTPException):
        return _http_error(exc)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _http_error(exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": _error_title(500)})


def _http_error(exc) -> JSONResponse:
    status_code = exc.status_code
    if status_code >= 500:
        detail = _error_title(status_code)
    else:
        detail = _detail_from_exc(exc, _error_title(status_code))
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=getattr(exc, "headers", None))
