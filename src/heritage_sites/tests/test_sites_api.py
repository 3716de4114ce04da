import uuid

import pytest

from src.heritage_sites.models import HeritageSite, HeritageSiteManager, SiteStatus, SiteStatusHistory

pytestmark = pytest.mark.django_db

SITE_PAYLOAD = {
    "name": {"en": "Ethnographic Museum", "rw": "Ingoro y'Umurage"},
    "description": {"en": "<script>x</script>Seven galleries"},
    "region": "Southern",
    "category": "museum",
    "gps_latitude": "-2.6060",
    "gps_longitude": "29.7390",
}


def test_admin_creates_proposed_site(client, admin_user, auth):
    resp = client.post("/api/heritage-sites/", SITE_PAYLOAD, content_type="application/json", **auth(admin_user))
    assert resp.status_code == 201, resp.content
    data = resp.json()["data"]
    assert data["status"] == SiteStatus.PROPOSED
    assert data["category"] == "MUSEUM"
    assert data["description"]["en"] == "xSeven galleries"
    site = HeritageSite.objects.get(id=data["id"])
    assert site.status_history.count() == 1


def test_create_requires_default_language_name(client, admin_user, auth):
    payload = {**SITE_PAYLOAD, "name": {"rw": "Ingoro"}}
    resp = client.post("/api/heritage-sites/", payload, content_type="application/json", **auth(admin_user))
    assert resp.status_code == 422


def test_heritage_manager_cannot_create(client, heritage_manager, auth):
    resp = client.post("/api/heritage-sites/", SITE_PAYLOAD, content_type="application/json",
                       **auth(heritage_manager))
    assert resp.status_code == 403


def test_public_listing_hides_non_public_statuses(client, make_site):
    make_site("Visible")
    make_site("Proposed", status=SiteStatus.PROPOSED)
    make_site("Conservation", status=SiteStatus.UNDER_CONSERVATION)

    data = client.get("/api/heritage-sites/").json()["data"]
    names = sorted(item["name"] for item in data["items"])
    assert names == ["Conservation", "Visible"]


def test_admin_sees_every_active_site(client, admin_user, make_site, auth):
    make_site("Visible")
    make_site("Proposed", status=SiteStatus.PROPOSED)
    data = client.get("/api/heritage-sites/", **auth(admin_user)).json()["data"]
    assert data["pagination"]["count"] == 2


def test_list_search_and_language(client, make_site):
    make_site("Kandt House", region="Kigali")
    make_site("Nyanza Palace")
    data = client.get("/api/heritage-sites/?search=kandt&lang=rw").json()["data"]
    assert [item["name"] for item in data["items"]] == ["Kandt House (rw)"]


def test_hidden_site_is_404_for_public(client, make_site):
    site = make_site(status=SiteStatus.PROPOSED)
    resp = client.get(f"/api/heritage-sites/{site.id}")
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "SITE_NOT_FOUND"
    assert "request_id" in body


def test_status_change_records_history(client, admin_user, make_site, auth):
    site = make_site(status=SiteStatus.PROPOSED)
    resp = client.post(f"/api/heritage-sites/{site.id}/status",
                       {"new_status": "active", "reason": "Approved"},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["success"] is True
    assert data["previous_status"] == "PROPOSED"
    assert data["new_status"] == "ACTIVE"
    assert SiteStatusHistory.objects.filter(site=site, new_status="ACTIVE").exists()


def test_same_status_is_reported_without_writing(client, admin_user, make_site, auth):
    site = make_site()
    resp = client.post(f"/api/heritage-sites/{site.id}/status", {"new_status": "ACTIVE"},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 200
    assert resp.json()["data"]["success"] is False
    assert not SiteStatusHistory.objects.filter(site=site).exists()


def test_illegal_transition(client, admin_user, make_site, auth):
    site = make_site(status=SiteStatus.PROPOSED)
    resp = client.post(f"/api/heritage-sites/{site.id}/status", {"new_status": "UNDER_CONSERVATION"},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_STATUS_TRANSITION"


def test_unknown_status_is_validation_error(client, admin_user, make_site, auth):
    site = make_site()
    resp = client.post(f"/api/heritage-sites/{site.id}/status", {"new_status": "DEMOLISHED"},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 422


def test_allowed_statuses(client, make_site):
    site = make_site()
    data = client.get(f"/api/heritage-sites/{site.id}/status/allowed").json()["data"]
    assert data["current_status"] == "ACTIVE"
    assert data["allowed"] == ["ARCHIVED", "INACTIVE", "PROPOSED", "UNDER_CONSERVATION"]


def test_bulk_status_reports_each_site(client, admin_user, make_site, auth):
    proposed = make_site("A", status=SiteStatus.PROPOSED)
    active = make_site("B")
    archived = make_site("C", status=SiteStatus.ARCHIVED)
    missing = uuid.uuid4()

    resp = client.post(
        "/api/heritage-sites/bulk/status",
        {"site_ids": [str(proposed.id), str(active.id), str(archived.id), str(missing), "junk"],
         "new_status": "UNDER_CONSERVATION"},
        content_type="application/json",
        **auth(admin_user),
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total_requested"] == 5
    # only ACTIVE -> UNDER_CONSERVATION is legal here
    assert data["successful"] == 1
    assert data["failed"] == 4
    codes = {e["site_id"]: e["code"] for e in data["errors"]}
    assert codes[str(missing)] == "SITE_NOT_FOUND"
    assert codes["junk"] == "INVALID_ID"
    proposed.refresh_from_db()
    assert proposed.status == SiteStatus.PROPOSED


def test_archive_requires_reason_then_restore(client, admin_user, make_site, auth):
    site = make_site()
    assert client.delete(f"/api/heritage-sites/{site.id}", **auth(admin_user)).status_code == 422

    resp = client.delete(f"/api/heritage-sites/{site.id}?reason=Flood%20damage", **auth(admin_user))
    assert resp.status_code == 200
    site.refresh_from_db()
    assert site.status == SiteStatus.ARCHIVED and site.is_active is False

    archived = client.get("/api/heritage-sites/archived", **auth(admin_user)).json()["data"]
    assert [s["id"] for s in archived] == [str(site.id)]
    assert client.get(f"/api/heritage-sites/{site.id}").status_code == 404

    resp = client.post(f"/api/heritage-sites/{site.id}/restore", **auth(admin_user))
    assert resp.status_code == 200
    site.refresh_from_db()
    assert site.status == SiteStatus.ACTIVE and site.is_active is True


def test_restore_requires_archived_site(client, admin_user, make_site, auth):
    site = make_site()
    resp = client.post(f"/api/heritage-sites/{site.id}/restore", **auth(admin_user))
    assert resp.status_code == 400
    assert resp.json()["code"] == "SITE_NOT_ARCHIVED"


def test_manager_assignment_scopes_updates(client, admin_user, heritage_manager, make_site, auth):
    mine = make_site("Mine", status=SiteStatus.PROPOSED)
    other = make_site("Other")

    resp = client.post(f"/api/heritage-sites/{mine.id}/managers", {"user_id": str(heritage_manager.id)},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 201

    dup = client.post(f"/api/heritage-sites/{mine.id}/managers", {"user_id": str(heritage_manager.id)},
                      content_type="application/json", **auth(admin_user))
    assert dup.status_code == 409

    ok = client.patch(f"/api/heritage-sites/{mine.id}", {"address": "Nyanza"},
                      content_type="application/json", **auth(heritage_manager))
    assert ok.status_code == 200
    denied = client.patch(f"/api/heritage-sites/{other.id}", {"address": "Elsewhere"},
                          content_type="application/json", **auth(heritage_manager))
    assert denied.status_code == 403

    # assigned managers see their own non-public sites
    my_sites = client.get("/api/heritage-sites/my-sites", **auth(heritage_manager)).json()["data"]
    assert [s["id"] for s in my_sites] == [str(mine.id)]
    assert client.get(f"/api/heritage-sites/{mine.id}", **auth(heritage_manager)).status_code == 200

    resp = client.delete(f"/api/heritage-sites/{mine.id}/managers/{heritage_manager.id}", **auth(admin_user))
    assert resp.status_code == 200
    assert not HeritageSiteManager.objects.filter(site=mine, user=heritage_manager, status="ACTIVE").exists()


def test_only_heritage_managers_can_be_assigned(client, admin_user, member, make_site, auth):
    site = make_site()
    resp = client.post(f"/api/heritage-sites/{site.id}/managers", {"user_id": str(member.id)},
                       content_type="application/json", **auth(admin_user))
    assert resp.status_code == 400
    assert resp.json()["code"] == "NOT_A_SITE_MANAGER"


def test_statistics(client, make_site):
    make_site("A", category="MUSEUM")
    make_site("B", category="MUSEUM", status=SiteStatus.PROPOSED)
    data = client.get("/api/heritage-sites/statistics").json()["data"]
    assert data["total"] == 2
    assert data["by_category"]["MUSEUM"] == 2
    assert data["by_status"] == {"ACTIVE": 1, "PROPOSED": 1}


def test_statuses_and_categories_are_public(client):
    statuses = client.get("/api/heritage-sites/statuses").json()["data"]
    assert {s["value"] for s in statuses} == set(SiteStatus.values)
    assert len(client.get("/api/heritage-sites/categories").json()["data"]) == 10
