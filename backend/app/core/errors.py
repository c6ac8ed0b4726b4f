"""Service-layer error taxonomy.

Services raise these instead of bare ``ValueError`` so routers and callers can
branch on ``kind`` and ``code`` without matching message strings.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PRECONDITION_FAILED = "precondition_failed"
    VALIDATION = "validation"
    FORBIDDEN = "forbidden"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.PRECONDITION_FAILED: 400,
    ErrorKind.VALIDATION: 422,
    ErrorKind.FORBIDDEN: 403,
}


class ServiceError(Exception):
    """Base class for expected, user-facing service failures."""

    kind: ErrorKind = ErrorKind.PRECONDITION_FAILED

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.kind.value

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(ServiceError):
    kind = ErrorKind.CONFLICT


class PreconditionFailedError(ServiceError):
    kind = ErrorKind.PRECONDITION_FAILED


class InputValidationError(ServiceError):
    kind = ErrorKind.VALIDATION


class PermissionDeniedError(ServiceError):
    kind = ErrorKind.FORBIDDEN
