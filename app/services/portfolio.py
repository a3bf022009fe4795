import uuid

from loguru import logger
from sqlmodel import Session, select, col

from app.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.db.schema import PortfolioItem, Partner
from app.models.portfolio import (
    PortfolioCreate, PortfolioUpdate, PortfolioRead, PortfolioList
)
from app.services.partner import PartnerService


class PortfolioService:
    def __init__(self, session: Session):
        self.session = session
        self.partners = PartnerService(session)

    def _get_owned(self, partner: Partner, item_id: uuid.UUID) -> PortfolioItem:
        item = self.session.get(PortfolioItem, item_id)
        if not item:
            raise NotFoundError("Portfolio item not found")
        if item.partner_id != partner.id:
            raise ForbiddenError("Not authorized to modify this portfolio item")
        return item

    def add_item(self, user_id: uuid.UUID, data: PortfolioCreate) -> PortfolioRead:
        partner = self.partners.get_by_user(user_id)

        image_url = (data.image_url or "").strip()
        if not image_url:
            raise BadRequestError("Image URL is required")

        item = PortfolioItem(
            partner_id=partner.id,
            image_url=image_url,
            title=(data.title or "").strip(),
            description=(data.description or "").strip(),
            category=(data.category or "").strip(),
            display_order=data.display_order or 0,
        )
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)

        logger.info(f"Portfolio item {item.id} added for partner {partner.id}")
        return PortfolioRead.model_validate(item)

    def list_items(self, user_id: uuid.UUID) -> PortfolioList:
        partner = self.partners.get_by_user(user_id)

        items = self.session.exec(
            select(PortfolioItem)
            .where(PortfolioItem.partner_id == partner.id)
            .order_by(col(PortfolioItem.display_order).asc(), col(PortfolioItem.created_at).desc())
        ).all()
        return PortfolioList(
            items=[PortfolioRead.model_validate(i) for i in items],
            total=len(items)
        )

    def update_item(self, user_id: uuid.UUID, item_id: uuid.UUID, data: PortfolioUpdate) -> PortfolioRead:
        partner = self.partners.get_by_user(user_id)
        item = self._get_owned(partner, item_id)

        updates = data.model_dump(exclude_unset=True)
        if "image_url" in updates and not (updates["image_url"] or "").strip():
            raise BadRequestError("Image URL is required")

        for key, value in updates.items():
            if value is None:
                continue
            setattr(item, key, value.strip() if isinstance(value, str) else value)

        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)

        logger.info(f"Portfolio item {item_id} updated")
        return PortfolioRead.model_validate(item)

    def delete_item(self, user_id: uuid.UUID, item_id: uuid.UUID) -> None:
        partner = self.partners.get_by_user(user_id)
        item = self._get_owned(partner, item_id)

        self.session.delete(item)
        self.session.commit()
        logger.info(f"Portfolio item {item_id} deleted")
