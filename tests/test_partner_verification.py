"""Partner onboarding and the pending -> verified/rejected state machine."""

import pytest
from sqlmodel import Session, select

from app.core.exceptions import BadRequestError, ConflictError, NotFoundError
from app.db.schema import (
    Partner, PartnerStatus, SystemAuditLog, UserRole, AuditAction
)
from app.models.inquiry import InquiryCreate
from app.models.partner import PartnerOnboard
from app.services.inquiry import InquiryService
from app.services.partner import PartnerService


def _onboard_payload(**overrides):
    payload = dict(
        business_name="Golden Hour Studios",
        service_categories=["Wedding Photography", "Portrait"],
        city="Pune",
        state="Maharashtra",
        national_id="123456789012",
    )
    payload.update(overrides)
    return payload


def test_onboard_starts_pending(session, make_user):
    user = make_user(UserRole.PARTNER)

    partner = PartnerService(session).onboard_partner(user.id, PartnerOnboard(**_onboard_payload()))

    assert partner.status == PartnerStatus.PENDING
    assert partner.user.email == user.email


@pytest.mark.parametrize("overrides, message", [
    ({"business_name": "  "}, "Business name is required"),
    ({"service_categories": []}, "At least one service category is required"),
    ({"city": ""}, "City and state are required"),
    ({"national_id": "12345"}, "Valid 12-digit national ID number is required"),
])
def test_onboard_validation(session, make_user, overrides, message):
    user = make_user(UserRole.PARTNER)

    with pytest.raises(BadRequestError) as exc:
        PartnerService(session).onboard_partner(user.id, PartnerOnboard(**_onboard_payload(**overrides)))
    assert exc.value.message == message


def test_onboard_twice_conflicts(session, make_user):
    user = make_user(UserRole.PARTNER)
    service = PartnerService(session)
    service.onboard_partner(user.id, PartnerOnboard(**_onboard_payload()))

    with pytest.raises(ConflictError):
        service.onboard_partner(user.id, PartnerOnboard(**_onboard_payload()))


def test_verify_records_admin_and_timestamp(session, make_user, make_partner):
    admin = make_user(UserRole.ADMIN)
    partner = make_partner(status=PartnerStatus.PENDING)

    result = PartnerService(session).verify_partner(partner.id, admin.id, "verified", "Documents OK")

    assert result.status == PartnerStatus.VERIFIED
    assert result.verified_by.id == admin.id
    assert result.verified_at is not None
    assert result.verification_comment == "Documents OK"


@pytest.mark.parametrize("initial", [PartnerStatus.VERIFIED, PartnerStatus.REJECTED])
@pytest.mark.parametrize("decision", ["verified", "rejected"])
def test_decided_partner_cannot_be_decided_again(session, make_user, make_partner, initial, decision):
    admin = make_user(UserRole.ADMIN)
    partner = make_partner(status=initial)

    with pytest.raises(ConflictError) as exc:
        PartnerService(session).verify_partner(partner.id, admin.id, decision)
    assert exc.value.message == f"Partner already {initial.value}"


@pytest.mark.parametrize("decision", ["pending", "approved", ""])
def test_invalid_decision_rejected(session, make_user, make_partner, decision):
    admin = make_user(UserRole.ADMIN)
    partner = make_partner(status=PartnerStatus.PENDING)

    with pytest.raises(BadRequestError) as exc:
        PartnerService(session).verify_partner(partner.id, admin.id, decision)
    assert exc.value.message == "Status must be 'verified' or 'rejected'"


def test_verify_unknown_partner(session, make_user, make_partner):
    admin = make_user(UserRole.ADMIN)
    missing = make_partner(status=PartnerStatus.PENDING).id
    session.delete(session.get(Partner, missing))
    session.commit()

    with pytest.raises(NotFoundError):
        PartnerService(session).verify_partner(missing, admin.id, "verified")


def test_concurrent_decisions_only_one_lands(engine, session, make_user, make_partner):
    admin = make_user(UserRole.ADMIN)
    partner = make_partner(status=PartnerStatus.PENDING)
    partner_id = partner.id

    # This session has already read the partner as pending
    stale = PartnerService(session)
    assert session.get(Partner, partner_id).status == PartnerStatus.PENDING

    with Session(engine) as other:
        PartnerService(other).verify_partner(partner_id, admin.id, "rejected")

    with pytest.raises(ConflictError) as exc:
        stale.verify_partner(partner_id, admin.id, "verified")
    assert exc.value.message == "Partner already rejected"

    session.expire_all()
    assert session.get(Partner, partner_id).status == PartnerStatus.REJECTED


def test_verified_partner_starts_receiving_matches(session, make_user, make_partner, future_date):
    admin = make_user(UserRole.ADMIN)
    client = make_user(UserRole.CLIENT)
    partner = make_partner(status=PartnerStatus.PENDING)
    inquiries = InquiryService(session)

    def post():
        return inquiries.create_inquiry(client.id, InquiryCreate(
            category="wedding", event_date=future_date, budget=25000, city="Pune"))

    _, before = post()
    PartnerService(session).verify_partner(partner.id, admin.id, "verified")
    inquiry, after = post()

    assert before == 0
    assert after == 1
    assert [p.id for p in inquiry.assigned_partners] == [partner.id]


def test_list_pending_is_paginated(session, make_partner):
    for _ in range(3):
        make_partner(status=PartnerStatus.PENDING)
    make_partner(status=PartnerStatus.VERIFIED)

    page = PartnerService(session).list_pending(page=2, limit=2)

    assert page.total == 3
    assert page.pages == 2
    assert page.page == 2
    assert len(page.partners) == 1


# ==========================================
# API
# ==========================================

def test_admin_verify_endpoint_writes_audit_log(client, session, make_user, make_partner, auth_headers):
    admin = make_user(UserRole.ADMIN)
    partner = make_partner(status=PartnerStatus.PENDING)

    response = client.put(
        f"/api/admin/verify/{partner.id}",
        json={"status": "verified", "comment": "Looks good"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["status"] == "verified"

    entries = session.exec(
        select(SystemAuditLog).where(SystemAuditLog.entity_id == partner.id)
    ).all()
    assert len(entries) == 1
    assert entries[0].action == AuditAction.UPDATE
    assert entries[0].changes["status"] == "verified"


def test_admin_verify_twice_returns_conflict(client, make_user, make_partner, auth_headers):
    admin = make_user(UserRole.ADMIN)
    partner = make_partner(status=PartnerStatus.VERIFIED)

    response = client.put(
        f"/api/admin/verify/{partner.id}",
        json={"status": "rejected"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert response.json() == {
        "statusCode": 409,
        "success": False,
        "message": "Partner already verified",
        "errors": [],
    }


def test_partner_onboard_endpoint(client, make_user, auth_headers):
    user = make_user(UserRole.PARTNER)

    response = client.post("/api/partner/onboard", json=_onboard_payload(), headers=auth_headers(user))

    assert response.status_code == 201
    assert response.json()["statusCode"] == 201
    assert response.json()["data"]["status"] == "pending"


def test_onboard_requires_partner_role(client, make_user, auth_headers):
    user = make_user(UserRole.CLIENT)

    response = client.post("/api/partner/onboard", json=_onboard_payload(), headers=auth_headers(user))

    assert response.status_code == 403
    assert response.json()["message"] == "Insufficient permissions"
