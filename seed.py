from loguru import logger
from sqlmodel import Session, select, func
from app.core.config import settings
from app.db.core import engine
from app.db.schema import User, UserRole, Category, Location
from app.services.password import get_password_hash


# 1. Service categories offered on the marketplace
DEFAULT_CATEGORIES = {
    "Wedding": "Wedding ceremonies and receptions",
    "Pre-Wedding": "Engagement and couple shoots",
    "Portrait": "Individual and family portraits",
    "Maternity": "Maternity and newborn sessions",
    "Event": "Corporate events, parties and concerts",
    "Product": "Catalogue and e-commerce product photography",
}

# 2. Cities the marketplace launches in
DEFAULT_LOCATIONS = [
    ("Mumbai", "Maharashtra"),
    ("Pune", "Maharashtra"),
    ("Bengaluru", "Karnataka"),
    ("Delhi", "Delhi"),
    ("Hyderabad", "Telangana"),
    ("Chennai", "Tamil Nadu"),
]


def seed_admin(session: Session):
    """Creates the bootstrap admin if it doesn't exist."""
    logger.info("--- Seeding Admin ---")

    email = settings.seed_admin_email.strip().lower()
    admin = session.exec(select(User).where(User.email == email)).first()
    if admin:
        logger.info(f"Existing Admin: {email}")
        return

    if not settings.seed_admin_password:
        logger.warning("SEED_ADMIN_PASSWORD not set, skipping admin account")
        return

    session.add(User(
        email=email,
        hashed_password=get_password_hash(settings.seed_admin_password),
        name="Administrator",
        role=UserRole.ADMIN,
    ))
    logger.info(f"Created Admin: {email}")


def seed_categories(session: Session):
    logger.info("--- Seeding Categories ---")

    for name, description in DEFAULT_CATEGORIES.items():
        category = session.exec(
            select(Category).where(func.lower(Category.name) == name.lower())).first()
        if not category:
            session.add(Category(name=name, description=description))
            logger.info(f"Created Category: {name}")
        else:
            logger.info(f"Existing Category: {name}")


def seed_locations(session: Session):
    logger.info("--- Seeding Locations ---")

    for city, state in DEFAULT_LOCATIONS:
        location = session.exec(select(Location).where(
            Location.city == city, Location.state == state)).first()
        if not location:
            session.add(Location(city=city, state=state))
            logger.info(f"Created Location: {city}, {state}")
        else:
            logger.info(f"Existing Location: {city}, {state}")


def main():
    # Tables are created by Alembic: `alembic upgrade head`
    with Session(engine) as session:
        try:
            seed_admin(session)
            seed_categories(session)
            seed_locations(session)

            session.commit()
            logger.info("Database seeding completed successfully.")

        except Exception as e:
            session.rollback()
            logger.error(f"Seeding failed: {e}")
            raise e


if __name__ == "__main__":
    main()
