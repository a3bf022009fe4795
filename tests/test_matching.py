"""Matching engine: which verified partners an inquiry is routed to."""

from app.db.schema import Inquiry, PartnerStatus, UserRole
from app.services.matching import MatchingService, category_matches, partner_matches


def _inquiry(client, category="wedding", city="Pune", event_date=None):
    return Inquiry(
        client_id=client.id,
        category=category,
        event_date=event_date,
        budget=20000,
        city=city,
    )


def test_category_prefix_is_case_insensitive():
    assert category_matches(["Wedding Photography"], "wedding")
    assert category_matches(["portrait", "WEDDING"], "Wed")
    assert not category_matches(["Pre-Wedding"], "wedding")
    assert not category_matches([], "wedding")
    assert not category_matches(["Wedding"], "   ")


def test_partner_predicate_requires_verified_status(make_partner):
    pending = make_partner(status=PartnerStatus.PENDING)
    verified = make_partner()

    assert not partner_matches(pending, "wedding", "Pune")
    assert partner_matches(verified, "wedding", " pune ")
    assert not partner_matches(verified, "wedding", "Mumbai")


def test_only_verified_partners_in_city_are_matched(session, make_user, make_partner, future_date):
    client = make_user(UserRole.CLIENT)
    verified = make_partner(city="Pune")
    make_partner(city="Pune", status=PartnerStatus.PENDING)
    make_partner(city="Pune", status=PartnerStatus.REJECTED)
    make_partner(city="Mumbai")
    make_partner(city="Pune", categories=["Portrait"])

    matched = MatchingService(session).match_partners(_inquiry(client, event_date=future_date))

    assert [p.id for p in matched] == [verified.id]


def test_city_comparison_ignores_case_and_whitespace(session, make_user, make_partner, future_date):
    client = make_user(UserRole.CLIENT)
    partner = make_partner(city="  PUNE ")

    matched = MatchingService(session).match_partners(
        _inquiry(client, city="pune", event_date=future_date))

    assert [p.id for p in matched] == [partner.id]


def test_non_ascii_city_matches_ignoring_case(session, make_user, make_partner, future_date):
    client = make_user(UserRole.CLIENT)
    same_spelling = make_partner(city="Örebro")
    other_case = make_partner(city="ÖREBRO")
    make_partner(city="Malmö")

    matched = MatchingService(session).match_partners(
        _inquiry(client, city="Örebro", event_date=future_date))

    assert [p.id for p in matched] == [same_spelling.id, other_case.id]


def test_match_count_is_capped(session, make_user, make_partner, future_date):
    client = make_user(UserRole.CLIENT)
    for _ in range(12):
        make_partner()

    matched = MatchingService(session).match_partners(_inquiry(client, event_date=future_date))

    assert len(matched) == 10


def test_custom_limit(session, make_user, make_partner, future_date):
    client = make_user(UserRole.CLIENT)
    for _ in range(3):
        make_partner()

    matched = MatchingService(session, limit=2).match_partners(_inquiry(client, event_date=future_date))

    assert len(matched) == 2


def test_matching_is_deterministic(session, make_user, make_partner, future_date):
    client = make_user(UserRole.CLIENT)
    for _ in range(12):
        make_partner()

    service = MatchingService(session)
    first = [p.id for p in service.match_partners(_inquiry(client, event_date=future_date))]
    second = [p.id for p in service.match_partners(_inquiry(client, event_date=future_date))]

    assert first == second


def test_no_candidates_returns_empty_list(session, make_user, future_date):
    client = make_user(UserRole.CLIENT)

    assert MatchingService(session).match_partners(_inquiry(client, event_date=future_date)) == []
