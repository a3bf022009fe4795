import math
import re
import uuid
from datetime import datetime
from typing import List, Optional

from loguru import logger
from sqlalchemy import update
from sqlmodel import Session, select, func, col

from app.core.exceptions import (
    BadRequestError, ConflictError, ForbiddenError, NotFoundError
)
from app.db.schema import Partner, PartnerStatus, User
from app.models.partner import (
    PartnerOnboard, PartnerUpdate, PartnerRead, PartnerSummary,
    PendingVerificationPage
)
from app.models.user import UserSummary

NATIONAL_ID_PATTERN = re.compile(r"^[0-9]{12}$")

# Terminal decisions an Admin may take on a pending partner
VERIFICATION_DECISIONS = (PartnerStatus.VERIFIED, PartnerStatus.REJECTED)


def to_user_summary(user: Optional[User]) -> Optional[UserSummary]:
    if user is None:
        return None
    return UserSummary(id=user.id, name=user.name, email=user.email, phone=user.phone)


def to_partner_summary(partner: Partner) -> PartnerSummary:
    return PartnerSummary(
        id=partner.id,
        business_name=partner.business_name,
        city=partner.city,
        state=partner.state,
        service_categories=list(partner.service_categories or []),
    )


def to_partner_read(partner: Partner) -> PartnerRead:
    return PartnerRead(
        id=partner.id,
        user=to_user_summary(partner.user),
        business_name=partner.business_name,
        service_categories=list(partner.service_categories or []),
        city=partner.city,
        state=partner.state,
        document_metadata=dict(partner.document_metadata or {}),
        sample_portfolio_urls=list(partner.sample_portfolio_urls or []),
        status=partner.status,
        verification_comment=partner.verification_comment,
        verified_by=to_user_summary(partner.verifier),
        verified_at=partner.verified_at,
        created_at=partner.created_at,
    )


def _clean_categories(categories: Optional[List[str]]) -> List[str]:
    cleaned = []
    for c in categories or []:
        c = (c or "").strip()
        if c and c not in cleaned:
            cleaned.append(c)
    return cleaned


class PartnerService:
    def __init__(self, session: Session):
        self.session = session

    def get_by_user(self, user_id: uuid.UUID) -> Partner:
        partner = self.session.exec(
            select(Partner).where(Partner.user_id == user_id)
        ).first()
        if not partner:
            raise NotFoundError("Partner profile not found")
        return partner

    def require_verified(self, user_id: uuid.UUID) -> Partner:
        """
        Lead-access guard. Only VERIFIED partners may see or act on leads;
        the current status is echoed back so the UI can explain why.
        """
        partner = self.get_by_user(user_id)
        if partner.status != PartnerStatus.VERIFIED:
            raise ForbiddenError(
                "Your profile must be verified to access leads. "
                f"Current status: {partner.status.value}"
            )
        return partner

    # ==========================================================================
    # ONBOARDING & PROFILE
    # ==========================================================================

    def onboard_partner(self, user_id: uuid.UUID, data: PartnerOnboard) -> PartnerRead:
        business_name = (data.business_name or "").strip()
        categories = _clean_categories(data.service_categories)
        city = (data.city or "").strip()
        state = (data.state or "").strip()
        national_id = (data.national_id or "").strip()

        if not business_name:
            raise BadRequestError("Business name is required")
        if not categories:
            raise BadRequestError("At least one service category is required")
        if not city or not state:
            raise BadRequestError("City and state are required")
        if not NATIONAL_ID_PATTERN.match(national_id):
            raise BadRequestError("Valid 12-digit national ID number is required")

        existing = self.session.exec(
            select(Partner).where(Partner.user_id == user_id)
        ).first()
        if existing:
            raise ConflictError("Partner profile already exists")

        partner = Partner(
            user_id=user_id,
            business_name=business_name,
            service_categories=categories,
            city=city,
            state=state,
            national_id=national_id,
            document_metadata=data.document_metadata or {},
            sample_portfolio_urls=[u.strip() for u in data.sample_portfolio_urls or [] if u and u.strip()],
            status=PartnerStatus.PENDING,
        )
        self.session.add(partner)
        self.session.commit()
        self.session.refresh(partner)

        logger.info(f"Partner onboarded: {partner.business_name} ({partner.id})")
        return to_partner_read(partner)

    def get_profile(self, user_id: uuid.UUID) -> PartnerRead:
        return to_partner_read(self.get_by_user(user_id))

    def update_profile(self, user_id: uuid.UUID, data: PartnerUpdate) -> PartnerRead:
        partner = self.get_by_user(user_id)

        if data.business_name and data.business_name.strip():
            partner.business_name = data.business_name.strip()
        categories = _clean_categories(data.service_categories)
        if categories:
            partner.service_categories = categories
        if data.city and data.city.strip():
            partner.city = data.city.strip()
        if data.state and data.state.strip():
            partner.state = data.state.strip()

        self.session.add(partner)
        self.session.commit()
        self.session.refresh(partner)

        logger.info(f"Partner profile updated: {partner.id}")
        return to_partner_read(partner)

    # ==========================================================================
    # VERIFICATION (ADMIN)
    # ==========================================================================

    def verify_partner(
        self,
        partner_id: uuid.UUID,
        admin_id: uuid.UUID,
        decision: str,
        comment: Optional[str] = None
    ) -> PartnerRead:
        """
        PENDING -> VERIFIED | REJECTED. Both targets are terminal.

        The transition is written as a conditional UPDATE guarded on
        status = PENDING, so of two racing decisions only one lands;
        the loser gets a Conflict instead of silently overwriting it.
        """
        try:
            target = PartnerStatus(decision)
        except ValueError:
            target = None
        if target not in VERIFICATION_DECISIONS:
            raise BadRequestError("Status must be 'verified' or 'rejected'")

        partner = self.session.get(Partner, partner_id)
        if not partner:
            raise NotFoundError("Partner not found")

        if partner.status != PartnerStatus.PENDING:
            raise ConflictError(f"Partner already {partner.status.value}")

        now = datetime.utcnow()
        result = self.session.exec(
            update(Partner)
            .where(col(Partner.id) == partner_id)
            .where(col(Partner.status) == PartnerStatus.PENDING)
            .values(
                status=target,
                verification_comment=(comment or "").strip(),
                verified_by=admin_id,
                verified_at=now,
                updated_at=now,
            )
        )
        self.session.commit()

        self.session.refresh(partner)
        if result.rowcount == 0:
            logger.warning(
                f"Lost verification race on partner {partner_id}: now {partner.status.value}")
            raise ConflictError(f"Partner already {partner.status.value}")

        logger.info(f"Partner {partner_id} {target.value} by admin {admin_id}")
        return to_partner_read(partner)

    def list_pending(self, page: int = 1, limit: int = 10) -> PendingVerificationPage:
        page = max(page, 1)
        limit = max(limit, 1)

        total = self.session.exec(
            select(func.count(Partner.id))
            .where(Partner.status == PartnerStatus.PENDING)
        ).one()

        partners = self.session.exec(
            select(Partner)
            .where(Partner.status == PartnerStatus.PENDING)
            .order_by(col(Partner.created_at).desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()

        return PendingVerificationPage(
            partners=[to_partner_read(p) for p in partners],
            total=total,
            page=page,
            pages=math.ceil(total / limit),
        )
