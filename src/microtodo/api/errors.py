"""
microtodo.api.errors

Exception handlers shared by both apps.

Responsibilities:
- Map `ServiceError` subclasses to their status code and `{error, reason}` body.
- Map request validation failures to 400 with per-field details.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_401_UNAUTHORIZED

from microtodo.auth.errors import ServiceError
from microtodo.observability.logging import get_logger

log = get_logger(__name__)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    log.info("request_rejected", reason=exc.reason, status_code=exc.status_code)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            # Drop the leading "body"/"query" location segment.
            "field": ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    log.info("request_invalid", fields=[d["field"] for d in details])
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"error": "validation_error", "reason": "ValidationError", "details": details},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]


# --- Module Notes -----------------------------------------------------------
# Bodies never echo the token or say whether a username exists.
