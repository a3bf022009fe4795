import math
import uuid
from datetime import date
from typing import Optional, Tuple

from loguru import logger
from sqlalchemy import update
from sqlmodel import Session, select, func, col

from app.core.config import settings
from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.db.schema import (
    Inquiry, InquiryStatus, InquiryPartnerLink, Review
)
from app.models.inquiry import (
    InquiryCreate, InquiryRead, InquiryList, InquiryStats, LeadList
)
from app.services.matching import MatchingService
from app.services.partner import PartnerService, to_partner_summary, to_user_summary

DESCRIPTION_MAX_LENGTH = 1000
VALID_STATUSES = [s.value for s in InquiryStatus]


def to_inquiry_read(inquiry: Inquiry) -> InquiryRead:
    return InquiryRead(
        id=inquiry.id,
        client=to_user_summary(inquiry.client),
        category=inquiry.category,
        event_date=inquiry.event_date,
        budget=inquiry.budget,
        city=inquiry.city,
        reference_image_url=inquiry.reference_image_url or "",
        description=inquiry.description or "",
        status=inquiry.status,
        assigned_partners=[to_partner_summary(p) for p in inquiry.assigned_partners],
        created_at=inquiry.created_at,
        updated_at=inquiry.updated_at,
    )


def parse_status(value: Optional[str]) -> InquiryStatus:
    """
    Any of the four statuses is accepted from any current status.
    Transitions are deliberately not forced into new -> responded -> booked -> closed.
    """
    try:
        return InquiryStatus((value or "").strip().lower())
    except ValueError:
        raise BadRequestError(
            f"Status must be one of: {', '.join(VALID_STATUSES)}")


def _status_filter(value: Optional[str]) -> Optional[InquiryStatus]:
    # Unknown filters are ignored rather than rejected
    if value and value in VALID_STATUSES:
        return InquiryStatus(value)
    return None


class InquiryService:
    def __init__(self, session: Session):
        self.session = session
        self.partners = PartnerService(session)
        self.matcher = MatchingService(session)

    def _get(self, inquiry_id: uuid.UUID) -> Inquiry:
        inquiry = self.session.get(Inquiry, inquiry_id)
        if not inquiry:
            raise NotFoundError("Inquiry not found")
        return inquiry

    def _get_owned(self, client_id: uuid.UUID, inquiry_id: uuid.UUID, action: str) -> Inquiry:
        inquiry = self._get(inquiry_id)
        if inquiry.client_id != client_id:
            raise ForbiddenError(f"Not authorized to {action} this inquiry")
        return inquiry

    # ==========================================================================
    # CLIENT ACTIONS
    # ==========================================================================

    def create_inquiry(self, client_id: uuid.UUID, data: InquiryCreate) -> Tuple[InquiryRead, int]:
        """
        Validates the request, stores it as NEW, routes it to matching
        partners and returns the populated inquiry with the match count.
        """
        category = (data.category or "").strip()
        city = (data.city or "").strip()
        description = (data.description or "").strip()

        if not category:
            raise BadRequestError("Service category is required")
        if data.event_date is None:
            raise BadRequestError("Event date is required")
        if data.event_date < date.today():
            raise BadRequestError("Event date must be in the future")
        budget = data.budget
        if budget is None or not math.isfinite(budget) or budget <= settings.inquiry_min_budget:
            raise BadRequestError("Valid budget is required")
        if not city:
            raise BadRequestError("City is required")
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise BadRequestError(
                f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")

        inquiry = Inquiry(
            client_id=client_id,
            category=category,
            event_date=data.event_date,
            budget=data.budget,
            city=city,
            reference_image_url=(data.reference_image_url or "").strip(),
            description=description,
            status=InquiryStatus.NEW,
        )
        self.session.add(inquiry)
        self.session.flush()

        # Read the candidates, then write the assignment in the same commit
        matched = self.matcher.match_partners(inquiry)
        inquiry.assigned_partners = matched
        self.session.add(inquiry)
        self.session.commit()
        self.session.refresh(inquiry)

        logger.info(
            f"Inquiry {inquiry.id} created and matched with {len(matched)} partners")
        return to_inquiry_read(inquiry), len(matched)

    def list_client_inquiries(self, client_id: uuid.UUID, status: Optional[str] = None) -> InquiryList:
        statement = select(Inquiry).where(Inquiry.client_id == client_id)

        wanted = _status_filter(status)
        if wanted:
            statement = statement.where(Inquiry.status == wanted)

        inquiries = self.session.exec(
            statement.order_by(col(Inquiry.created_at).desc())
        ).all()
        return InquiryList(
            inquiries=[to_inquiry_read(i) for i in inquiries],
            total=len(inquiries)
        )

    def get_inquiry(self, client_id: uuid.UUID, inquiry_id: uuid.UUID) -> InquiryRead:
        return to_inquiry_read(self._get_owned(client_id, inquiry_id, "access"))

    def update_inquiry_status(self, client_id: uuid.UUID, inquiry_id: uuid.UUID, status: str) -> InquiryRead:
        new_status = parse_status(status)
        inquiry = self._get_owned(client_id, inquiry_id, "update")

        old_status = inquiry.status
        inquiry.status = new_status
        self.session.add(inquiry)
        self.session.commit()
        self.session.refresh(inquiry)

        logger.info(
            f"Inquiry {inquiry_id} status {old_status.value} -> {new_status.value}")
        return to_inquiry_read(inquiry)

    def delete_inquiry(self, client_id: uuid.UUID, inquiry_id: uuid.UUID) -> None:
        inquiry = self._get_owned(client_id, inquiry_id, "delete")

        # Reviews outlive the inquiry they mention
        self.session.exec(
            update(Review)
            .where(col(Review.inquiry_id) == inquiry_id)
            .values(inquiry_id=None)
        )
        self.session.delete(inquiry)
        self.session.commit()

        logger.info(f"Inquiry {inquiry_id} deleted by client {client_id}")

    def get_inquiry_stats(self, client_id: uuid.UUID) -> InquiryStats:
        rows = self.session.exec(
            select(Inquiry.status, func.count(Inquiry.id))
            .where(Inquiry.client_id == client_id)
            .group_by(Inquiry.status)
        ).all()

        stats = InquiryStats()
        for status, count in rows:
            setattr(stats, InquiryStatus(status).value, count)
            stats.total += count
        return stats

    # ==========================================================================
    # PARTNER (LEAD) ACTIONS
    # ==========================================================================

    def _is_assigned(self, inquiry_id: uuid.UUID, partner_id: uuid.UUID) -> bool:
        link = self.session.get(InquiryPartnerLink, (inquiry_id, partner_id))
        return link is not None

    def list_leads(self, partner_user_id: uuid.UUID, status: Optional[str] = None) -> LeadList:
        partner = self.partners.require_verified(partner_user_id)

        statement = (
            select(Inquiry)
            .join(InquiryPartnerLink, InquiryPartnerLink.inquiry_id == Inquiry.id)
            .where(InquiryPartnerLink.partner_id == partner.id)
        )
        wanted = _status_filter(status)
        if wanted:
            statement = statement.where(Inquiry.status == wanted)

        leads = self.session.exec(
            statement.order_by(col(Inquiry.created_at).desc())
        ).all()
        return LeadList(leads=[to_inquiry_read(i) for i in leads], total=len(leads))

    def get_lead(self, partner_user_id: uuid.UUID, inquiry_id: uuid.UUID) -> InquiryRead:
        partner = self.partners.require_verified(partner_user_id)

        inquiry = self.session.get(Inquiry, inquiry_id)
        if not inquiry:
            raise NotFoundError("Lead not found")
        if not self._is_assigned(inquiry.id, partner.id):
            raise ForbiddenError("You are not assigned to this lead")
        return to_inquiry_read(inquiry)

    def respond_to_lead(
        self,
        partner_user_id: uuid.UUID,
        inquiry_id: uuid.UUID,
        response_message: str,
        status: str = InquiryStatus.RESPONDED.value
    ) -> InquiryRead:
        partner = self.partners.require_verified(partner_user_id)
        inquiry = self._get(inquiry_id)

        if not self._is_assigned(inquiry.id, partner.id):
            raise ForbiddenError("You are not assigned to this inquiry")

        if not response_message or not response_message.strip():
            raise BadRequestError("Response message is required")

        new_status = parse_status(status)
        inquiry.status = new_status
        self.session.add(inquiry)
        self.session.commit()
        self.session.refresh(inquiry)

        logger.info(
            f"Partner {partner.id} responded to lead {inquiry_id} ({new_status.value}): "
            f"{response_message.strip()[:80]}"
        )
        return to_inquiry_read(inquiry)
