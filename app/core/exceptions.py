from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status


class ApiError(HTTPException):
    """
    Base class for every domain error raised by the services.
    Carries the HTTP status, a human readable message and an optional
    list of field level errors rendered into the failure envelope.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(
            status_code=type(self).status_code,
            detail=self.message,
            headers=headers,
        )


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class UnauthorizedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class ServiceUnavailableError(ApiError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service unavailable"
