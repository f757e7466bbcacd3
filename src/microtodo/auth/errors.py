"""
microtodo.auth.errors

Error taxonomy shared by the issuer, validator, enforcer and client.

Responsibilities:
- Define one exception type per auth failure with a stable wire `reason`.
- Carry the HTTP status each failure maps to (401 identity, 403 ownership).
- Define the non-auth request errors (400/404/409) used by the services.
"""

from __future__ import annotations

from typing import ClassVar


class ServiceError(Exception):
    """
    Base for errors that terminate a request with a JSON error body.
    """

    status_code: ClassVar[int] = 500
    reason: ClassVar[str] = "InternalError"
    default_message: ClassVar[str] = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, str]:
        return {"error": self.message, "reason": self.reason}


class AuthError(ServiceError):
    status_code = 401
    reason = "Unauthorized"
    default_message = "Authentication required"


class MissingToken(AuthError):
    reason = "MissingToken"
    default_message = "Missing bearer token"


class MalformedToken(AuthError):
    reason = "MalformedToken"
    default_message = "Malformed token"


class InvalidSignature(AuthError):
    reason = "InvalidSignature"
    default_message = "Invalid token signature"


class Expired(AuthError):
    reason = "Expired"
    default_message = "Token has expired"


class InvalidCredentials(AuthError):
    # One message for unknown user and wrong password alike.
    reason = "InvalidCredentials"
    default_message = "Invalid username or password"


class Forbidden(AuthError):
    status_code = 403
    reason = "Forbidden"
    default_message = "Forbidden"


class InputValidationError(ServiceError):
    status_code = 400
    reason = "ValidationError"
    default_message = "Invalid request"


class ResourceNotFound(ServiceError):
    status_code = 404
    reason = "NotFound"
    default_message = "Not found"


class Conflict(ServiceError):
    status_code = 409
    reason = "Conflict"
    default_message = "Already exists"


_BY_REASON: dict[str, type[ServiceError]] = {
    cls.reason: cls
    for cls in (
        MissingToken,
        MalformedToken,
        InvalidSignature,
        Expired,
        InvalidCredentials,
        Forbidden,
        InputValidationError,
        ResourceNotFound,
        Conflict,
    )
}


def error_for_reason(reason: str | None, *, status_code: int) -> type[ServiceError]:
    """
    Resolve a wire `reason` back to its exception class.

    Unknown reasons fall back on the status code so a client still gets the
    right family (AuthError for 401, Forbidden for 403, ...).
    """
    if reason and reason in _BY_REASON:
        return _BY_REASON[reason]
    if status_code == 401:
        return AuthError
    if status_code == 403:
        return Forbidden
    if status_code == 404:
        return ResourceNotFound
    if status_code == 409:
        return Conflict
    if status_code in (400, 422):
        return InputValidationError
    return ServiceError


# --- Module Notes -----------------------------------------------------------
# HTTP mapping lives in `api.errors`; this module stays framework-free so the
# client package can import it without FastAPI.
