from typing import Optional
from uuid import UUID
from sqlmodel import SQLModel, Field
from pydantic import EmailStr

from app.db.schema import UserRole
from app.models.user import UserRead


class Token(SQLModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenRefresh(SQLModel):
    refresh_token: Optional[str] = Field(
        default=None,
        description="Refresh token. Optional when the 'refreshToken' cookie is present."
    )


class TokenData(SQLModel):
    user_id: UUID
    role: Optional[UserRole] = None


class LoginResult(SQLModel):
    """Body returned by password login and OTP verification."""
    user: UserRead
    access_token: str
    refresh_token: str


class OtpRequest(SQLModel):
    email: EmailStr


class OtpVerify(SQLModel):
    email: EmailStr
    otp: str = Field(min_length=1, max_length=12)


class OtpIssued(SQLModel):
    email: str
    expires_in_minutes: int
    # Only echoed back when the API runs in debug mode
    otp: Optional[str] = None
