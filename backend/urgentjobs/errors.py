"""Error taxonomy and the single boundary that renders errors as JSON."""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from urgentjobs.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(ApiError):
    status_code = 404
    default_message = "Resource not found"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Not authorized to access this resource"


class InvalidInput(ApiError):
    status_code = 400
    default_message = "Invalid input"


class InvalidStatus(InvalidInput):
    pass


class InvalidTransition(InvalidInput):
    pass


class Conflict(ApiError):
    status_code = 400
    default_message = "Resource already exists"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Not authorized to access this route"


class Internal(ApiError):
    pass


def _failure_body(message: str, exc: Exception) -> dict:
    body = {"success": False, "error": message}
    if not settings.is_production:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


async def _api_error_handler(request: Request, exc: ApiError):
    log = logger.error if exc.status_code >= 500 else logger.info
    log("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=_failure_body(exc.message, exc))


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors[".".join(loc) or "request"] = err.get("msg", "Invalid value")
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation error", "errors": errors},
    )


async def _integrity_error_handler(request: Request, exc: IntegrityError):
    logger.error("%s %s -> integrity error: %s", request.method, request.url.path, exc.orig)
    text = str(exc.orig).lower()
    if "unique" in text:
        message = "Duplicate field value entered"
    elif "foreign key" in text:
        message = "Related resource not found"
    else:
        message = "Invalid data"
    return JSONResponse(status_code=400, content=_failure_body(message, exc))


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_failure_body("Server Error", exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(IntegrityError, _integrity_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
