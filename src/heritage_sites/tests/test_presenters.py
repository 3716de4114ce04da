from decimal import Decimal
from types import SimpleNamespace as NS

from src.heritage_sites.presenters import assignment_to_dto, site_to_detail_dto, site_to_list_dto


def make_site(**kw):
    defaults = dict(
        id="site-uuid",
        name={"en": "Nyanza King's Palace", "rw": "Ingoro y'Umwami i Nyanza"},
        description={"en": "Royal residence"},
        significance={},
        address="Nyanza",
        region="Southern",
        gps_latitude=Decimal("-2.3517"),
        gps_longitude=Decimal("29.7509"),
        status="ACTIVE",
        category="",
        ownership_type="PUBLIC",
        established_year=1899,
        contact_info="",
        is_active=True,
        archive_reason="",
        archive_date=None,
        created_by_id=None,
        updated_by_id="user-uuid",
        created_at=NS(isoformat=lambda: "2026-01-08T10:00:00Z"),
        updated_at=None,
    )
    defaults.update(kw)
    return NS(**defaults)


def test_site_list_dto_picks_requested_language():
    dto = site_to_list_dto(make_site(), "rw")
    assert dto["name"] == "Ingoro y'Umwami i Nyanza"
    assert dto["gps_latitude"] == -2.3517
    assert dto["category"] is None


def test_site_list_dto_falls_back_to_default_language():
    dto = site_to_list_dto(make_site(), "fr")
    assert dto["name"] == "Nyanza King's Palace"


def test_site_detail_dto_keeps_all_languages():
    dto = site_to_detail_dto(make_site(gps_latitude=None))
    assert dto["name"]["rw"].startswith("Ingoro")
    assert dto["gps_latitude"] is None
    assert dto["created_by"] is None
    assert dto["updated_by"] == "user-uuid"
    assert dto["archive_reason"] is None
    assert dto["created_at"] == "2026-01-08T10:00:00Z"


def test_assignment_dto_without_assigner():
    user = NS(username="hmanager", full_name="Heritage Manager")
    assignment = NS(id="a", site_id="s", user_id="u", user=user, status="ACTIVE", notes="",
                    assigned_by=None, assigned_at=None)
    dto = assignment_to_dto(assignment)
    assert dto["username"] == "hmanager"
    assert dto["assigned_by"] is None
