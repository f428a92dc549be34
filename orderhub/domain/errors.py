# orderhub/domain/errors.py
"""
Domain errors raised by the services.

Each error carries its kind and HTTP status so the API layer can translate
it in one place (see orderhub.api.errors).
"""
from enum import Enum


class ErrorKind(str, Enum):
    INVALID_ARGUMENT = "InvalidArgument"
    NOT_FOUND = "NotFound"
    FORBIDDEN = "Forbidden"
    CONFLICT = "Conflict"
    DEPENDENCY = "Dependency"
    INTERNAL = "Internal"
    UNAUTHENTICATED = "Unauthenticated"


class DomainError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(DomainError):
    kind = ErrorKind.INVALID_ARGUMENT
    status_code = 400


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class ForbiddenError(DomainError):
    kind = ErrorKind.FORBIDDEN
    status_code = 403


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT
    status_code = 409


class DependencyError(DomainError):
    """An upstream service failed or did not answer in time."""

    kind = ErrorKind.DEPENDENCY
    status_code = 502

    def __init__(self, message: str, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout
        if timeout:
            self.status_code = 504


class InternalError(DomainError):
    kind = ErrorKind.INTERNAL
    status_code = 500


class UnauthenticatedError(DomainError):
    kind = ErrorKind.UNAUTHENTICATED
    status_code = 401


def insufficient_stock(product_name: str, available: int | None, requested: int) -> InvalidArgumentError:
    return InvalidArgumentError(
        f"Insufficient stock for product: {product_name}. "
        f"Available: {available or 0}, Requested: {requested}"
    )
