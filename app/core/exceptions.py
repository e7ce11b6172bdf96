"""
Domain errors and global exception handlers for consistent API errors.

Every error body has the shape ``{"error": true, "message": ..., "request_id": ...}``.
"""
import enum
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException


class AppError(Exception):
    """Base for errors that map to a client-facing status and message."""

    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class InvalidCredentials(AppError):
    status_code = 400
    message = "Invalid email or password"


class AuthReason(str, enum.Enum):
    MISSING_TOKEN = "missing_token"
    INVALID = "invalid"
    EXPIRED = "expired"


class AuthError(AppError):
    """Missing, invalid or expired token. The reason never reaches the client."""

    status_code = 401
    message = "Unauthorized"

    def __init__(self, reason: AuthReason) -> None:
        self.reason = reason
        super().__init__()


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class InternalError(AppError):
    status_code = 500
    message = "Internal Server Error"


class ConfigurationError(RuntimeError):
    """Configuración incompleta; se lanza al construir la app."""


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _body(request: Request, message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": True, "message": message, **extra}
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Malformed JSON body"
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    field = loc[-1] if loc else "body"
    if first.get("type") == "missing":
        return f"{field} is required"
    return f"{field}: {first.get('msg', 'invalid value')}"


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("notes.errors")

    @app.exception_handler(AuthError)
    async def _auth_handler(request: Request, exc: AuthError):
        log.debug("auth rejected reason=%s request_id=%s", exc.reason.value, _req_id(request))
        return JSONResponse(
            status_code=exc.status_code,
            content=_body(request, exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log.error("%s request_id=%s", exc.message, _req_id(request))
        return JSONResponse(status_code=exc.status_code, content=_body(request, exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=_body(request, str(exc.detail or "HTTP error")))

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
            for e in exc.errors()
        ]
        return JSONResponse(status_code=400, content=_body(request, _validation_message(exc), errors=errors))

    @app.exception_handler(PyMongoError)
    async def _store_handler(request: Request, exc: PyMongoError):
        # Sin reintentos: el fallo del store se reporta como error interno
        log.error("Store error request_id=%s", _req_id(request), exc_info=exc)
        return JSONResponse(status_code=InternalError.status_code, content=_body(request, InternalError.message))

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        log.error("Unhandled error request_id=%s", _req_id(request), exc_info=exc)
        return JSONResponse(status_code=500, content=_body(request, InternalError.message))
