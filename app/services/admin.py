import uuid
from typing import Optional, Type

from loguru import logger
from sqlmodel import Session, SQLModel, select, func, col

from app.core.exceptions import ConflictError, NotFoundError
from app.db.schema import (
    User, UserRole, Partner, PartnerStatus, Inquiry, Category, Location
)
from app.models.admin import (
    DashboardStats,
    CategoryCreate, CategoryUpdate, CategoryRead, CategoryList,
    LocationCreate, LocationUpdate, LocationRead, LocationList,
)


class AdminService:
    def __init__(self, session: Session):
        self.session = session

    def _count(self, model: Type[SQLModel], *criteria) -> int:
        statement = select(func.count()).select_from(model)
        for criterion in criteria:
            statement = statement.where(criterion)
        return self.session.exec(statement).one()

    def get_dashboard_stats(self) -> DashboardStats:
        return DashboardStats(
            total_clients=self._count(User, User.role == UserRole.CLIENT),
            total_partners=self._count(Partner),
            pending_verifications=self._count(Partner, Partner.status == PartnerStatus.PENDING),
            total_inquiries=self._count(Inquiry),
        )

    # ==========================================================================
    # CATEGORIES
    # ==========================================================================

    def _get_category(self, category_id: uuid.UUID) -> Category:
        category = self.session.get(Category, category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def _ensure_category_name_free(self, name: str, exclude_id: Optional[uuid.UUID] = None):
        statement = select(Category).where(func.lower(Category.name) == name.lower())
        if exclude_id:
            statement = statement.where(Category.id != exclude_id)
        if self.session.exec(statement).first():
            raise ConflictError(f"Category '{name}' already exists")

    def list_categories(self, active_only: bool = False) -> CategoryList:
        statement = select(Category)
        if active_only:
            statement = statement.where(Category.is_active == True)  # noqa: E712
        categories = self.session.exec(statement.order_by(col(Category.name))).all()
        return CategoryList(
            categories=[CategoryRead.model_validate(c) for c in categories],
            total=len(categories)
        )

    def create_category(self, data: CategoryCreate) -> CategoryRead:
        name = data.name.strip()
        self._ensure_category_name_free(name)

        category = Category(
            name=name,
            description=(data.description or "").strip(),
            is_active=data.is_active,
        )
        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)

        logger.info(f"Category created: {category.name}")
        return CategoryRead.model_validate(category)

    def update_category(self, category_id: uuid.UUID, data: CategoryUpdate) -> CategoryRead:
        category = self._get_category(category_id)

        if data.name is not None and data.name.strip():
            name = data.name.strip()
            self._ensure_category_name_free(name, exclude_id=category.id)
            category.name = name
        if data.description is not None:
            category.description = data.description.strip()
        if data.is_active is not None:
            category.is_active = data.is_active

        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)

        logger.info(f"Category updated: {category.id}")
        return CategoryRead.model_validate(category)

    def delete_category(self, category_id: uuid.UUID) -> None:
        category = self._get_category(category_id)
        self.session.delete(category)
        self.session.commit()
        logger.info(f"Category deleted: {category_id}")

    # ==========================================================================
    # LOCATIONS
    # ==========================================================================

    def _get_location(self, location_id: uuid.UUID) -> Location:
        location = self.session.get(Location, location_id)
        if not location:
            raise NotFoundError("Location not found")
        return location

    def _ensure_location_free(self, city: str, state: str, exclude_id: Optional[uuid.UUID] = None):
        statement = (
            select(Location)
            .where(func.lower(Location.city) == city.lower())
            .where(func.lower(Location.state) == state.lower())
        )
        if exclude_id:
            statement = statement.where(Location.id != exclude_id)
        if self.session.exec(statement).first():
            raise ConflictError(f"Location '{city}, {state}' already exists")

    def list_locations(self, active_only: bool = False) -> LocationList:
        statement = select(Location)
        if active_only:
            statement = statement.where(Location.is_active == True)  # noqa: E712
        locations = self.session.exec(
            statement.order_by(col(Location.state), col(Location.city))
        ).all()
        return LocationList(
            locations=[LocationRead.model_validate(loc) for loc in locations],
            total=len(locations)
        )

    def create_location(self, data: LocationCreate) -> LocationRead:
        city, state = data.city.strip(), data.state.strip()
        self._ensure_location_free(city, state)

        location = Location(city=city, state=state, is_active=data.is_active)
        self.session.add(location)
        self.session.commit()
        self.session.refresh(location)

        logger.info(f"Location created: {location.city}, {location.state}")
        return LocationRead.model_validate(location)

    def update_location(self, location_id: uuid.UUID, data: LocationUpdate) -> LocationRead:
        location = self._get_location(location_id)

        city = data.city.strip() if data.city else location.city
        state = data.state.strip() if data.state else location.state
        if (city, state) != (location.city, location.state):
            self._ensure_location_free(city, state, exclude_id=location.id)
        location.city, location.state = city, state
        if data.is_active is not None:
            location.is_active = data.is_active

        self.session.add(location)
        self.session.commit()
        self.session.refresh(location)

        logger.info(f"Location updated: {location.id}")
        return LocationRead.model_validate(location)

    def delete_location(self, location_id: uuid.UUID) -> None:
        location = self._get_location(location_id)
        self.session.delete(location)
        self.session.commit()
        logger.info(f"Location deleted: {location_id}")
