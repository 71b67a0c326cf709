"""Maps domain exceptions to HTTP responses.

    IllegalTransitionError  → 409 Conflict
    ValidationError         → 422 Unprocessable Entity
    ObjectNotFoundError     → 404 Not Found
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from marketplace.shared.exceptions import IllegalTransitionError

logger = structlog.get_logger(__name__)


async def illegal_transition_handler(request: Request, exc: IllegalTransitionError) -> JSONResponse:
    logger.info("Illegal transition refused", path=request.url.path, current=exc.current, target=exc.target)
    return JSONResponse(status_code=409, content={"error": exc.messages})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": exc.messages})


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": {"_entity": [str(exc)]}})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IllegalTransitionError, illegal_transition_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
