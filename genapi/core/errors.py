"""Error Hierarchy: classified exceptions and the status-mapping contract.

Invariants:
    - Every classified error has a code (str), category (ErrorCategory), severity and http_status
    - Client errors (400-level) are recoverable; internal faults (500-level) are critical
    - to_response() produces the JSON body written to the caller
    - ConfigurationError is never classified: it aborts wiring, not a request

Design Decisions:
    - Single hierarchy with GenApiError base: the pipeline writes one uniform error shape
    - Status carried on the exception (http_status), not looked up from a table
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable, Protocol, runtime_checkable

from starlette.exceptions import HTTPException as StarletteHTTPException


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where the error surfaced, for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    group: str | None = None


class ConfigurationError(Exception):
    """Wiring mistake detected at registration or startup (duplicate name, bad language...)."""


@runtime_checkable
class HasHttpStatus(Protocol):
    """Any error that already knows which HTTP status it maps to."""
    http_status: int


class GenApiError(Exception):
    """Base classified error: a message plus the HTTP status written to the caller."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to the JSON error body."""
        body: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.details:
            body["details"] = self.details
        return {"error": body}


# ─── Client Errors (400-level) ───────────────────────────────────

class BadRequestError(GenApiError):
    """Generic 400 for client mistakes."""
    def __init__(
        self,
        message: str,
        code: str = "BAD_REQUEST",
        context: ErrorContext | None = None,
        details: list[dict[str, Any]] | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400, details,
        )


class RequestDecodeError(BadRequestError):
    """Payload could not be decoded into the operation's request type."""
    def __init__(
        self,
        message: str,
        details: list[dict[str, Any]] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, "DECODE_ERROR", context, details)


class RequestValidationFailed(BadRequestError):
    """Sanitized request rejected by its own validate_request()."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, "VALIDATION_ERROR", context)


class TokenNotFoundError(BadRequestError):
    """Authorization header missing or too short to hold a bearer token."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "no access token found, header format should be "
            "'Authorization: Bearer <token>'",
            "TOKEN_NOT_FOUND", context,
        )


class UnauthorizedError(GenApiError):
    """Bearer token could not be resolved to a session."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ResourceNotFoundError(GenApiError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Internal Errors (500-level) ─────────────────────────────────

class InternalServerError(GenApiError):
    """Unclassified failure wrapped by the default converter."""
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class SessionUnavailableError(InternalServerError):
    """Authenticated operation reached the handler without a resolved session."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "can't get session from context", "SESSION_UNAVAILABLE", context,
        )


class ResponseSerializationError(InternalServerError):
    """Handler result could not be encoded as JSON."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"response serialization failed: {message}",
            "RESPONSE_SERIALIZATION_ERROR", context,
        )


# ─── Classification ──────────────────────────────────────────────

ErrorConverter = Callable[[Exception], GenApiError]

MASKED_INTERNAL_MESSAGE = "An unexpected error occurred"


def default_convert_error(exc: Exception) -> GenApiError:
    """Pass classified errors through; wrap anything else as a 500."""
    if isinstance(exc, GenApiError):
        return exc
    return InternalServerError(str(exc) or type(exc).__name__)


def masking_convert_error(exc: Exception) -> GenApiError:
    """Like default_convert_error, but never echoes unclassified messages."""
    if isinstance(exc, GenApiError):
        return exc
    return InternalServerError(MASKED_INTERNAL_MESSAGE)


def carried_status(exc: Exception) -> int | None:
    """HTTP status the error declares about itself, if any."""
    if isinstance(exc, StarletteHTTPException):
        return exc.status_code
    if isinstance(exc, HasHttpStatus):
        status = exc.http_status
        if isinstance(status, int) and not isinstance(status, bool):
            return status
    return None


def classify_error(
    exc: Exception, convert_error: ErrorConverter, masked: bool = False,
) -> GenApiError:
    """Resolve any failure into a single classified error.

    A status carried by the error is used verbatim; otherwise the group's
    converter decides. A converter that raises or returns something other
    than a GenApiError yields a 500, masked when masked is set.
    """
    if isinstance(exc, GenApiError):
        return exc
    status = carried_status(exc)
    if status is not None:
        return _wrap_with_status(exc, status)
    try:
        converted = convert_error(exc)
    except Exception as e:
        return _converter_fault(f"error converter raised {type(e).__name__}: {e}", masked)
    if not isinstance(converted, GenApiError):
        return _converter_fault(
            f"error converter returned {type(converted).__name__}, "
            f"not a classified error",
            masked,
        )
    return converted


def _converter_fault(message: str, masked: bool) -> InternalServerError:
    return InternalServerError(MASKED_INTERNAL_MESSAGE if masked else message)


def request_decode_error(errors: Iterable[dict[str, Any]]) -> RequestDecodeError:
    """Build a DECODE_ERROR from pydantic error dicts, first field in the message."""
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in errors
    ]
    message = "Invalid request data"
    if details:
        first = details[0]
        message = f"{message}: {first['field'] or 'body'}: {first['message']}"
    return RequestDecodeError(message, details=details)


def _wrap_with_status(exc: Exception, status: int) -> GenApiError:
    if isinstance(exc, StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    else:
        message = str(exc) or type(exc).__name__
    severity = ErrorSeverity.CRITICAL if status >= 500 else ErrorSeverity.ERROR
    category = ErrorCategory.INTERNAL if status >= 500 else ErrorCategory.BUSINESS_RULE
    code = getattr(exc, "code", None)
    return GenApiError(
        message,
        code if isinstance(code, str) else "HTTP_ERROR",
        category, severity, http_status=status,
    )
