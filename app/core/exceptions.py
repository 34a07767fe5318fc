from fastapi import HTTPException
from app.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | list | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(AppException):
    """Malformed or out-of-range input; details lists every violated field."""

    def __init__(self, errors: list[dict], message: str = "Validation failed"):
        super().__init__(422, message, ErrorCode.VALIDATION_ERROR, errors)


class InvalidReferenceError(AppException):
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INVALID_REFERENCE,
    ):
        super().__init__(400, message, error_code)


class ConflictError(AppException):
    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.CONFLICT):
        super().__init__(409, message, error_code)


class AuthenticationError(AppException):
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(401, message, ErrorCode.UNAUTHORIZED)
        self.headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationError(AppException):
    def __init__(self, message: str = "Permission denied"):
        super().__init__(403, message, ErrorCode.PERMISSION_DENIED)


class NotFoundError(AppException):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(404, message, ErrorCode.NOT_FOUND)


class InternalError(AppException):
    def __init__(self, message: str = "Something went wrong. Please try again."):
        super().__init__(500, message, ErrorCode.INTERNAL_ERROR)
