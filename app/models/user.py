from typing import Optional
from uuid import UUID
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import EmailStr, StringConstraints
from typing_extensions import Annotated

from app.db.schema import UserRole


class UserRead(SQLModel):
    id: UUID
    email: str
    name: str
    role: UserRole
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime


class UserSummary(SQLModel):
    """The 'populated' view of a user embedded in other resources."""
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None


class ReviewerSummary(SQLModel):
    """Public view of a review author; contact details stay private."""
    id: UUID
    name: str


class UserSignin(SQLModel):
    email: EmailStr = Field(
        description="Registered email address of the user."
    )
    password: str = Field(
        min_length=1,
        max_length=128,
        description="Plain text password."
    )


class UserCreate(SQLModel):
    """
    DTO for User Registration.
    Partners register here first, then complete onboarding under /partner/onboard.
    """
    name: Annotated[str, StringConstraints(strip_whitespace=True)] = Field(
        min_length=1,
        max_length=100,
        description="User's display name."
    )
    email: EmailStr = Field(
        description="Unique email address for signin."
    )
    password: str = Field(
        min_length=6,
        max_length=128,
        description="Plain text password."
    )
    role: UserRole = Field(
        default=UserRole.CLIENT,
        description="'client' or 'partner'. Admin accounts are seeded."
    )
    phone: Optional[Annotated[str, StringConstraints(pattern=r"^[0-9]{10}$")]] = Field(
        default=None,
        description="Optional 10-digit phone number."
    )
