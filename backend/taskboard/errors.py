from fastapi import status

from .domain.enums import DenialReason


class BaseAppException(Exception):
    def __init__(self, code: str, message: str, http_status: int):
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)

class NotFoundError(BaseAppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status.HTTP_404_NOT_FOUND)

class ConflictError(BaseAppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status.HTTP_409_CONFLICT)

class ValidationAppError(BaseAppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status.HTTP_400_BAD_REQUEST)

class ForbiddenError(BaseAppException):
    def __init__(self, code: str, message: str):
        super().__init__(code, message, status.HTTP_403_FORBIDDEN)

class AccessDenied(ForbiddenError):
    """Raised when the acting principal fails a task authorization check."""

    def __init__(self, reason: DenialReason, message: str | None = None):
        self.reason = reason
        super().__init__("ACCESS_DENIED", message or reason.describe())
