"""Admin dashboard, verification queue and reference data."""

import pytest

from app.core.exceptions import ConflictError, NotFoundError
from app.db.schema import PartnerStatus, UserRole
from app.models.admin import CategoryCreate, CategoryUpdate, LocationCreate, LocationUpdate
from app.models.inquiry import InquiryCreate
from app.services.admin import AdminService
from app.services.inquiry import InquiryService


def test_dashboard_stats(session, make_user, make_partner, future_date):
    client = make_user(UserRole.CLIENT)
    make_user(UserRole.CLIENT)
    make_user(UserRole.ADMIN)
    make_partner(status=PartnerStatus.PENDING)
    make_partner(status=PartnerStatus.VERIFIED)
    InquiryService(session).create_inquiry(client.id, InquiryCreate(
        category="wedding", event_date=future_date, budget=1000, city="Pune"))

    stats = AdminService(session).get_dashboard_stats()

    assert stats.total_clients == 2
    assert stats.total_partners == 2
    assert stats.pending_verifications == 1
    assert stats.total_inquiries == 1


def test_category_names_are_unique_ignoring_case(session):
    service = AdminService(session)
    service.create_category(CategoryCreate(name="Wedding"))

    with pytest.raises(ConflictError):
        service.create_category(CategoryCreate(name=" wedding "))


def test_category_update_and_delete(session):
    service = AdminService(session)
    wedding = service.create_category(CategoryCreate(name="Wedding"))
    portrait = service.create_category(CategoryCreate(name="Portrait"))

    with pytest.raises(ConflictError):
        service.update_category(portrait.id, CategoryUpdate(name="WEDDING"))

    updated = service.update_category(wedding.id, CategoryUpdate(description="Ceremonies", is_active=False))
    assert updated.description == "Ceremonies"
    assert updated.is_active is False

    service.delete_category(wedding.id)
    assert [c.name for c in service.list_categories().categories] == ["Portrait"]
    with pytest.raises(NotFoundError):
        service.delete_category(wedding.id)


def test_location_uniqueness(session):
    service = AdminService(session)
    pune = service.create_location(LocationCreate(city="Pune", state="Maharashtra"))
    mumbai = service.create_location(LocationCreate(city="Mumbai", state="Maharashtra"))

    with pytest.raises(ConflictError):
        service.create_location(LocationCreate(city="pune", state="MAHARASHTRA"))
    with pytest.raises(ConflictError):
        service.update_location(mumbai.id, LocationUpdate(city="Pune"))

    updated = service.update_location(pune.id, LocationUpdate(is_active=False))
    assert updated.is_active is False
    assert service.list_locations().total == 2


# ==========================================
# API
# ==========================================

def test_admin_routes_require_admin(client, make_user, auth_headers):
    customer = make_user(UserRole.CLIENT)

    response = client.get("/api/admin/stats", headers=auth_headers(customer))

    assert response.status_code == 403


def test_verification_queue_endpoint(client, make_user, make_partner, auth_headers):
    admin = make_user(UserRole.ADMIN)
    for _ in range(3):
        make_partner(status=PartnerStatus.PENDING)

    response = client.get("/api/admin/verifications", params={"page": 1, "limit": 2}, headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 3
    assert data["pages"] == 2
    assert len(data["partners"]) == 2


def test_category_endpoints(client, make_user, auth_headers):
    headers = auth_headers(make_user(UserRole.ADMIN))

    created = client.post("/api/admin/categories", json={"name": "Wedding"}, headers=headers)
    assert created.status_code == 201

    duplicate = client.post("/api/admin/categories", json={"name": "WEDDING"}, headers=headers)
    assert duplicate.status_code == 409

    listing = client.get("/api/admin/categories", headers=headers)
    assert listing.json()["data"]["total"] == 1


def test_location_endpoints(client, make_user, auth_headers):
    headers = auth_headers(make_user(UserRole.ADMIN))

    created = client.post("/api/admin/locations", json={"city": "Pune", "state": "Maharashtra"}, headers=headers)
    assert created.status_code == 201
    location_id = created.json()["data"]["id"]

    deleted = client.delete(f"/api/admin/locations/{location_id}", headers=headers)
    assert deleted.status_code == 200
    assert client.get("/api/admin/locations", headers=headers).json()["data"]["total"] == 0
