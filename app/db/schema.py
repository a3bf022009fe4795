from typing import Optional, List, Dict, Any
from datetime import datetime, date
import uuid
from sqlmodel import SQLModel, Field, Relationship, JSON
from sqlalchemy import UniqueConstraint
from enum import Enum


class UserRole(str, Enum):
    CLIENT = "client"
    PARTNER = "partner"
    ADMIN = "admin"


class PartnerStatus(str, Enum):
    PENDING = "pending"      # Onboarded, waiting for an Admin decision
    VERIFIED = "verified"    # Terminal. Eligible for matching & leads
    REJECTED = "rejected"    # Terminal. Never matched


class InquiryStatus(str, Enum):
    NEW = "new"
    RESPONDED = "responded"
    BOOKED = "booked"
    CLOSED = "closed"


class ModerationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class TimestampMixin(SQLModel):
    """
    Standard audit timestamps shared by every table.
    """
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="UTC timestamp when this record was first persisted."
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column_kwargs={"onupdate": datetime.utcnow},
        description="UTC timestamp when this record was last modified."
    )


class User(TimestampMixin, SQLModel, table=True):
    """
    A human account. The role decides which side of the marketplace
    the account acts on: clients post inquiries, partners answer them,
    admins verify partners and moderate reviews.
    """
    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="The unique identifier for the user."
    )
    email: str = Field(
        unique=True,
        index=True,
        description="Login email, always stored lower-cased. Example: 'asha@example.com'"
    )
    hashed_password: str = Field(
        description="Salted password hash. Never store plain text."
    )
    role: UserRole = Field(
        default=UserRole.CLIENT,
        description="Marketplace role. Example: 'client'"
    )
    name: str = Field(description="Display name. Example: 'Asha Rao'")
    phone: Optional[str] = Field(
        default=None,
        description="10-digit contact number. Example: '9876543210'"
    )
    refresh_token: Optional[str] = Field(
        default=None,
        description="The only refresh token currently accepted for this user. Cleared on logout."
    )
    is_active: bool = Field(
        default=True,
        description="Soft delete flag. If False, user cannot log in."
    )

    partner: Optional["Partner"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"foreign_keys": "[Partner.user_id]", "uselist": False}
    )


class OtpCredential(SQLModel, table=True):
    """
    Short-lived one-time passcode, keyed by user.
    Issuing a new code replaces the row (and resets the attempt counter);
    a successful verification deletes it.
    """
    user_id: uuid.UUID = Field(
        foreign_key="user.id",
        primary_key=True,
    )
    code_hash: str = Field(description="SHA-256 digest of the 6-digit code.")
    expires_at: datetime = Field(description="UTC expiry of the code.")
    attempts: int = Field(default=0, description="Failed verification attempts.")


class Partner(TimestampMixin, SQLModel, table=True):
    """
    A photographer's business profile. Exactly one per partner User.
    Created in PENDING; only an Admin decision moves it to VERIFIED or REJECTED.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(
        foreign_key="user.id",
        unique=True,  # Enforces 1:1
        index=True
    )
    business_name: str = Field(description="Example: 'Golden Hour Studios'")
    service_categories: List[str] = Field(
        default_factory=list,
        sa_type=JSON,
        description="Offered services. Example: ['wedding', 'pre-wedding']"
    )
    city: str = Field(index=True)
    state: str
    national_id: str = Field(description="12-digit national identity number.")
    document_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        sa_type=JSON,
        description="Opaque metadata about uploaded KYC documents."
    )
    sample_portfolio_urls: List[str] = Field(default_factory=list, sa_type=JSON)

    status: PartnerStatus = Field(default=PartnerStatus.PENDING, index=True)
    verification_comment: Optional[str] = Field(default=None)
    verified_by: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")
    verified_at: Optional[datetime] = Field(default=None)

    user: User = Relationship(
        back_populates="partner",
        sa_relationship_kwargs={"foreign_keys": "[Partner.user_id]"}
    )
    verifier: Optional[User] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Partner.verified_by]"}
    )
    portfolio_items: List["PortfolioItem"] = Relationship(
        back_populates="partner",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )


class InquiryPartnerLink(SQLModel, table=True):
    """
    Many-to-many pivot: which partners were matched to which inquiry.
    Assignment is a reference, not ownership.
    """
    inquiry_id: uuid.UUID = Field(
        foreign_key="inquiry.id",
        primary_key=True
    )
    partner_id: uuid.UUID = Field(
        foreign_key="partner.id",
        primary_key=True
    )


class Inquiry(TimestampMixin, SQLModel, table=True):
    """
    A client's request for a shoot. Seen from a matched partner it is a 'lead'.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    client_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    category: str = Field(description="Requested service. Example: 'wedding'")
    event_date: date
    budget: float
    city: str
    reference_image_url: str = Field(default="")
    description: str = Field(default="", max_length=1000)
    status: InquiryStatus = Field(default=InquiryStatus.NEW, index=True)

    client: User = Relationship()
    assigned_partners: List[Partner] = Relationship(link_model=InquiryPartnerLink)


class Review(TimestampMixin, SQLModel, table=True):
    """
    A client's rating of a partner. Hidden from the public until APPROVED.
    """
    __table_args__ = (
        UniqueConstraint("client_id", "partner_id", name="uq_review_client_partner"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    client_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    partner_id: uuid.UUID = Field(foreign_key="partner.id", index=True)
    inquiry_id: Optional[uuid.UUID] = Field(default=None, foreign_key="inquiry.id")
    rating: int
    comment: str = Field(default="", max_length=1000)
    moderation_status: ModerationStatus = Field(
        default=ModerationStatus.PENDING, index=True)
    moderated_by: Optional[uuid.UUID] = Field(default=None, foreign_key="user.id")
    moderation_comment: Optional[str] = Field(default=None)

    client: User = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Review.client_id]"})
    partner: Partner = Relationship()
    moderator: Optional[User] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Review.moderated_by]"})


class PortfolioItem(TimestampMixin, SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    partner_id: uuid.UUID = Field(foreign_key="partner.id", index=True)
    image_url: str
    title: str = Field(default="", max_length=100)
    description: str = Field(default="", max_length=500)
    category: str = Field(default="")
    display_order: int = Field(default=0)

    partner: Partner = Relationship(back_populates="portfolio_items")


class Category(TimestampMixin, SQLModel, table=True):
    """Service categories offered on the marketplace (e.g. 'Wedding')."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: str = Field(default="")
    is_active: bool = Field(default=True)


class Location(TimestampMixin, SQLModel, table=True):
    """Cities the marketplace operates in."""
    __table_args__ = (
        UniqueConstraint("city", "state", name="uq_location_city_state"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    city: str
    state: str
    is_active: bool = Field(default=True)


class SystemAuditLog(SQLModel, table=True):
    """
    Append-only trail of administrative decisions.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    actor_user_id: uuid.UUID = Field(foreign_key="user.id", index=True)
    entity_type: str = Field(description="Example: 'Partner'")
    entity_id: uuid.UUID = Field(index=True)
    action: AuditAction
    changes: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    ip_address: Optional[str] = Field(default=None)
    timestamp: datetime = Field(default_factory=datetime.utcnow)
