from datetime import datetime, timezone
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Standard success envelope shared by every endpoint.
    Serialized with camelCase keys: {statusCode, data, message, success, timestamp}.
    """
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(default=200, alias="statusCode")
    data: Optional[T] = None
    message: str = "Success"
    success: bool = True
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def ok(cls, data=None, message: str = "Operation successful", status_code: int = 200):
        return cls(
            status_code=status_code,
            data=data,
            message=message,
            success=status_code < 400,
        )

    @classmethod
    def created(cls, data=None, message: str = "Resource created successfully"):
        return cls.ok(data, message, status_code=201)
