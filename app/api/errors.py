import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import APIError, FailedValidationError, RecordNotFoundError
from app.models.api_response import ErrorEnvelope

SERVER_ERROR_MESSAGE = APIError.message


def _error_response(status_code: int, error, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope(error=error).model_dump(),
        headers=headers,
    )


async def api_error_handler(request: Request, exc: Exception):
    assert isinstance(exc, APIError)

    if isinstance(exc, FailedValidationError):
        return _error_response(exc.status_code, exc.details)

    if exc.status_code >= 500:
        logging.error(
            "%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details
        )
        return _error_response(exc.status_code, SERVER_ERROR_MESSAGE)

    return _error_response(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: Exception):
    assert isinstance(exc, StarletteHTTPException)

    if exc.status_code == 404:
        return _error_response(404, RecordNotFoundError.message)
    if exc.status_code == 405:
        return _error_response(
            405,
            f"the {request.method} method is not supported for this resource",
            headers=getattr(exc, "headers", None),
        )
    return _error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception):
    logging.exception("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(500, SERVER_ERROR_MESSAGE)
