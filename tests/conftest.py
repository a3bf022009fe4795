"""Shared pytest fixtures: in-memory database, API client and data factories."""

import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["LOG_FILE"] = ""
os.environ["DEBUG"] = "false"

from datetime import date, timedelta  # noqa: E402
from typing import Dict, List  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel, Session, create_engine  # noqa: E402

import app.core.audit as audit  # noqa: E402
from app.db.core import get_session  # noqa: E402
from app.db.schema import Partner, PartnerStatus, User, UserRole  # noqa: E402
from app.main import app  # noqa: E402
from app.services.password import get_password_hash  # noqa: E402
from app.services.user import UserService  # noqa: E402

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine, monkeypatch):
    """TestClient bound to the test engine. Background audit writes use it too."""

    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    monkeypatch.setattr(audit, "engine", engine)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    def _make_user(
        role: UserRole = UserRole.CLIENT,
        email: str = None,
        name: str = None,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
    ) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"{role.value}{counter['n']}@example.com",
            hashed_password=get_password_hash(password),
            role=role,
            name=name or f"{role.value.title()} {counter['n']}",
            is_active=is_active,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_partner(session, make_user):
    def _make_partner(
        city: str = "Pune",
        categories: List[str] = None,
        status: PartnerStatus = PartnerStatus.VERIFIED,
        business_name: str = None,
        user: User = None,
    ) -> Partner:
        user = user or make_user(UserRole.PARTNER)
        partner = Partner(
            user_id=user.id,
            business_name=business_name or f"{user.name} Studio",
            service_categories=categories if categories is not None else ["Wedding Photography"],
            city=city,
            state="Maharashtra",
            national_id="123456789012",
            status=status,
        )
        session.add(partner)
        session.commit()
        session.refresh(partner)
        return partner

    return _make_partner


@pytest.fixture
def auth_headers(session):
    def _auth_headers(user: User) -> Dict[str, str]:
        token = UserService(session).generate_access_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def future_date() -> date:
    return date.today() + timedelta(days=30)
