"""Global exception handlers — map engine exceptions to HTTP responses.

The engine raises :class:`~careplan_engine.errors.CarePlanError` subclasses
with a stable ``code``.  Rather than catching these in every route, global
handlers map the code to a status and a client-safe message.  The raw
exception message (which may carry ids) stays in the server log.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from careplan_engine.errors import CarePlanError, InvalidInputError

logger = logging.getLogger(__name__)

# --- Error code -> (HTTP status, client-safe message) ---
_ERROR_RESPONSES: dict[str, tuple[int, str]] = {
    "NOT_FOUND": (404, "Resource not found"),
    "INVALID_CATEGORY": (400, "The item does not belong to this category"),
    "INVALID_INPUT": (400, "Invalid request"),
    "ALREADY_EXISTS": (409, "Resource already exists"),
    "PERSISTENCE_ERROR": (500, "The care plan could not be read or saved. Please retry."),
}


async def care_plan_error_handler(request: Request, exc: CarePlanError) -> JSONResponse:
    """Map a ``CarePlanError`` to ``{code, detail[, errors]}``."""
    status, safe_detail = _ERROR_RESPONSES.get(exc.code, (400, "Invalid request"))
    if status >= 500:
        logger.error("%s [%d] at %s: %s", exc.code, status, request.url, exc)
    else:
        logger.warning("%s [%d] at %s: %s", exc.code, status, request.url, exc)

    content: dict = {"code": exc.code, "detail": safe_detail}
    if isinstance(exc, InvalidInputError) and exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=status, content=content)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Schema failures on the request body/query -> 400 INVALID_INPUT."""
    errors = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()]
    logger.warning("INVALID_INPUT [400] at %s: %d field error(s)", request.url, len(errors))
    return JSONResponse(
        status_code=400,
        content={"code": "INVALID_INPUT", "detail": "Invalid request", "errors": errors},
    )


async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
    """Map ``KeyError`` (e.g. unknown category) to 404."""
    logger.warning("KeyError at %s: %s", request.url, exc)
    return JSONResponse(
        status_code=404, content={"code": "NOT_FOUND", "detail": "Resource not found"},
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
