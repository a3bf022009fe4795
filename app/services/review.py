import math
import uuid
from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, col

from app.core.exceptions import (
    BadRequestError, ConflictError, ForbiddenError, NotFoundError
)
from app.db.schema import Review, ModerationStatus, Partner, Inquiry
from app.models.review import (
    ReviewCreate, ReviewRead, PublicReviewRead, PartnerReviewList, ReviewList
)
from app.models.user import ReviewerSummary
from app.services.partner import to_partner_summary, to_user_summary

MODERATION_DECISIONS = (ModerationStatus.APPROVED, ModerationStatus.REJECTED)


def to_review_read(review: Review) -> ReviewRead:
    return ReviewRead(
        id=review.id,
        client=to_user_summary(review.client),
        partner=to_partner_summary(review.partner),
        inquiry_id=review.inquiry_id,
        rating=review.rating,
        comment=review.comment or "",
        moderation_status=review.moderation_status,
        moderation_comment=review.moderation_comment,
        moderated_by=to_user_summary(review.moderator),
        created_at=review.created_at,
    )


def to_public_review_read(review: Review) -> PublicReviewRead:
    return PublicReviewRead(
        id=review.id,
        client=ReviewerSummary(id=review.client.id, name=review.client.name),
        partner=to_partner_summary(review.partner),
        rating=review.rating,
        comment=review.comment or "",
        created_at=review.created_at,
    )


class ReviewService:
    def __init__(self, session: Session):
        self.session = session

    def _get(self, review_id: uuid.UUID) -> Review:
        review = self.session.get(Review, review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    # ==========================================================================
    # CLIENT ACTIONS
    # ==========================================================================

    def create_review(self, client_id: uuid.UUID, data: ReviewCreate) -> ReviewRead:
        rating = data.rating
        valid = (
            rating is not None and math.isfinite(rating)
            and rating == int(rating) and 1 <= rating <= 5
        )
        if not valid:
            raise BadRequestError("Rating must be between 1 and 5")

        if not self.session.get(Partner, data.partner_id):
            raise NotFoundError("Partner not found")

        if data.inquiry_id and not self.session.get(Inquiry, data.inquiry_id):
            raise NotFoundError("Inquiry not found")

        existing = self.session.exec(
            select(Review)
            .where(Review.client_id == client_id)
            .where(Review.partner_id == data.partner_id)
        ).first()
        if existing:
            raise ConflictError("You have already reviewed this partner")

        review = Review(
            client_id=client_id,
            partner_id=data.partner_id,
            inquiry_id=data.inquiry_id,
            rating=int(rating),
            comment=(data.comment or "").strip(),
            moderation_status=ModerationStatus.PENDING,
        )
        self.session.add(review)
        try:
            self.session.commit()
        except IntegrityError:
            # A concurrent submission won the unique (client, partner) slot
            self.session.rollback()
            raise ConflictError("You have already reviewed this partner")
        self.session.refresh(review)

        logger.info(f"Review {review.id} submitted for partner {review.partner_id}")
        return to_review_read(review)

    def list_partner_reviews(self, partner_id: uuid.UUID) -> PartnerReviewList:
        """
        Public view: approved reviews only, newest first.
        """
        reviews = self.session.exec(
            select(Review)
            .where(Review.partner_id == partner_id)
            .where(Review.moderation_status == ModerationStatus.APPROVED)
            .order_by(col(Review.created_at).desc())
        ).all()

        average = 0.0
        if reviews:
            average = round(sum(r.rating for r in reviews) / len(reviews), 1)

        return PartnerReviewList(
            reviews=[to_public_review_read(r) for r in reviews],
            total=len(reviews),
            average_rating=average,
        )

    def list_my_reviews(self, client_id: uuid.UUID) -> ReviewList:
        reviews = self.session.exec(
            select(Review)
            .where(Review.client_id == client_id)
            .order_by(col(Review.created_at).desc())
        ).all()
        return ReviewList(reviews=[to_review_read(r) for r in reviews], total=len(reviews))

    def delete_own_review(self, client_id: uuid.UUID, review_id: uuid.UUID) -> None:
        review = self._get(review_id)
        if review.client_id != client_id:
            raise ForbiddenError("Not authorized to delete this review")

        self.session.delete(review)
        self.session.commit()
        logger.info(f"Review {review_id} deleted by its author")

    # ==========================================================================
    # MODERATION (ADMIN)
    # ==========================================================================

    def list_reviews(self, status: Optional[str] = None) -> ReviewList:
        statement = select(Review)
        if status in [s.value for s in ModerationStatus]:
            statement = statement.where(Review.moderation_status == ModerationStatus(status))

        reviews = self.session.exec(
            statement.order_by(col(Review.created_at).desc())
        ).all()
        return ReviewList(reviews=[to_review_read(r) for r in reviews], total=len(reviews))

    def moderate_review(
        self,
        review_id: uuid.UUID,
        admin_id: uuid.UUID,
        decision: str,
        comment: Optional[str] = None
    ) -> ReviewRead:
        try:
            target = ModerationStatus(decision)
        except ValueError:
            target = None
        if target not in MODERATION_DECISIONS:
            raise BadRequestError("Status must be 'approved' or 'rejected'")

        review = self._get(review_id)
        review.moderation_status = target
        review.moderated_by = admin_id
        review.moderation_comment = (comment or "").strip()

        self.session.add(review)
        self.session.commit()
        self.session.refresh(review)

        logger.info(f"Review {review_id} {target.value} by admin {admin_id}")
        return to_review_read(review)

    def delete_review(self, review_id: uuid.UUID) -> None:
        review = self._get(review_id)
        self.session.delete(review)
        self.session.commit()
        logger.info(f"Review {review_id} deleted by admin")
