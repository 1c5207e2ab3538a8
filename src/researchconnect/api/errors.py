"""
Errors Module - Exception hierarchy for the API client.
=======================================================

Every failure surfaced by the client derives from ``ResearchConnectError``,
so UI pages and CLI commands can catch one type at their boundary.
HTTP error responses are mapped onto subclasses by ``error_for_response``.
"""

from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

FormT = TypeVar("FormT", bound=BaseModel)


class ResearchConnectError(Exception):
    """Base class for all client errors."""


class ApiError(ResearchConnectError):
    """The API answered with a non-2xx status or an unusable body."""

    def __init__(
        self,
        status_code: int,
        message: str,
        payload: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}

    def __str__(self) -> str:
        return f"{self.message} (HTTP {self.status_code})"


class AuthenticationError(ApiError):
    """401: missing, invalid or expired credentials."""


class PermissionDeniedError(ApiError):
    """403: authenticated but not allowed."""


class EmailNotVerifiedError(PermissionDeniedError):
    """403 on login for an account whose email is not verified yet."""

    @property
    def email(self) -> str:
        return str(self.payload.get("email", ""))


class NotFoundError(ApiError):
    """404: resource missing (or, for projects, inactive)."""


class ConflictError(ApiError):
    """409: e.g. applying twice to the same project."""


class InvalidResponseError(ApiError):
    """2xx response whose body could not be decoded."""


class SessionExpiredError(ResearchConnectError):
    """No usable bearer token, or the token refresh failed."""


class ApiConnectionError(ResearchConnectError):
    """The API could not be reached after retries."""


class FormValidationError(ResearchConnectError):
    """
    Client-side form validation failed.

    Attributes:
        errors: Mapping of field name to a human-readable message
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        summary = "; ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(summary or "Invalid form")

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "FormValidationError":
        """Flatten a pydantic ``ValidationError`` into field messages."""
        errors: dict[str, str] = {}
        for item in exc.errors():
            loc = ".".join(str(part) for part in item.get("loc", ())) or "__root__"
            message = item.get("msg", "Invalid value")
            # Messages from our own validators arrive as "Value error, <text>"
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            errors.setdefault(loc, message)
        return cls(errors)


# ─────────────────────────────────────────────────────────────────────────────
# Response Mapping
# ─────────────────────────────────────────────────────────────────────────────


_STATUS_ERRORS: dict[int, type[ApiError]] = {
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
}


def error_for_response(status_code: int, payload: Any, fallback: str = "") -> ApiError:
    """
    Build the exception matching an HTTP error response.

    Args:
        status_code: HTTP status
        payload: Decoded JSON body (anything non-dict is ignored)
        fallback: Message used when the body carries no ``error`` field

    Returns:
        An ``ApiError`` subclass instance (not raised)
    """
    body = payload if isinstance(payload, dict) else {}
    message = str(body.get("error") or body.get("message") or fallback or f"HTTP {status_code}")

    if status_code == 403 and body.get("email_verified") is False:
        return EmailNotVerifiedError(status_code, message, body)

    error_class = _STATUS_ERRORS.get(status_code, ApiError)
    return error_class(status_code, message, body)


def parse_form(model_class: type[FormT], data: dict[str, Any], **context: Any) -> FormT:
    """
    Validate form input with a pydantic model.

    Extra keyword arguments are passed to validators as validation context
    (for instance ``today`` for deadline checks).

    Raises:
        FormValidationError: If validation fails
    """
    try:
        return model_class.model_validate(data, context=context or None)
    except ValidationError as e:
        raise FormValidationError.from_pydantic(e) from e
