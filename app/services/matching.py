from typing import Iterable, List, Optional

from loguru import logger
from sqlmodel import Session, select, col

from app.core.config import settings
from app.db.schema import Inquiry, Partner, PartnerStatus


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def category_matches(offered: Iterable[str], requested: str) -> bool:
    """
    True when any offered category starts with the requested one,
    ignoring case. 'wedding' matches 'Wedding Photography'.
    """
    wanted = _normalize(requested)
    if not wanted:
        return False
    return any(_normalize(c).startswith(wanted) for c in offered or [])


def partner_matches(partner: Partner, category: str, city: str) -> bool:
    """
    The full selection predicate for a single partner:
    verified, offering the category, and based in the same city.
    """
    return (
        partner.status == PartnerStatus.VERIFIED
        and _normalize(partner.city) == _normalize(city)
        and bool(_normalize(city))
        and category_matches(partner.service_categories, category)
    )


class MatchingService:
    """
    Selects the partners an inquiry should be routed to.
    Read-only: persisting the assignment is the caller's job.
    """

    def __init__(self, session: Session, limit: Optional[int] = None):
        self.session = session
        self.limit = limit if limit is not None else settings.match_limit

    def match_partners(self, inquiry: Inquiry) -> List[Partner]:
        city = _normalize(inquiry.city)
        if not city or not _normalize(inquiry.category):
            return []

        # Only status is narrowed in SQL. City and category are folded with
        # str.lower, which SQLite's ASCII-only lower() cannot reproduce.
        # Order is pinned so repeated calls agree.
        statement = (
            select(Partner)
            .where(Partner.status == PartnerStatus.VERIFIED)
            .order_by(col(Partner.created_at), col(Partner.id))
        )
        candidates = self.session.exec(statement).all()

        matched = [
            p for p in candidates
            if partner_matches(p, inquiry.category, inquiry.city)
        ][:self.limit]

        logger.info(
            f"Matched {len(matched)} partners for '{inquiry.category}' in {inquiry.city}")
        return matched
