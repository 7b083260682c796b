"""Custom exceptions and error handling utilities."""
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError


class AppException(Exception):
    """Base exception for application errors."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppException):
    """Raised when request data is malformed or incomplete."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(AppException):
    """Raised when a credential is missing, invalid or expired."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class AuthorizationError(AppException):
    """Raised when a valid principal lacks access to the target."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(AppException):
    """Raised when a resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"

    def __init__(self, resource: str | None = None, identifier: str | None = None):
        message = f"{resource} not found" if resource else None
        if message and identifier:
            message += f": {identifier}"
        super().__init__(message)


class ConflictError(AppException):
    """Raised on uniqueness violations."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class StorageError(AppException):
    """Raised when the database is unavailable or a write failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Storage error"


def handle_database_error(error: Exception, operation: str) -> AppException:
    """
    Convert database errors to application exceptions.

    Args:
        error: The database error
        operation: Description of the operation that failed

    Returns:
        ConflictError for uniqueness violations, StorageError otherwise
    """
    if isinstance(error, IntegrityError):
        return ConflictError(f"Resource already exists: {operation}")
    return StorageError(f"Database error during {operation}")


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report body and query validation failures as 400 rather than 422."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": errors},
    )
