import pytest

from src.artifacts.models import Artifact
from src.heritage_sites.models import SiteStatus

pytestmark = pytest.mark.django_db


@pytest.fixture
def site(make_site):
    return make_site()


def _create(client, auth, user, site, name="Royal Drum", **extra):
    payload = {"name": {"en": name, "rw": "Kalinga"}, "category": "musical_instrument",
               "heritage_site_id": str(site.id), **extra}
    return client.post("/api/artifacts/", payload, content_type="application/json", **auth(user))


def test_heritage_manager_creates_artifact(client, heritage_manager, site, auth):
    resp = _create(client, auth, heritage_manager, site)
    assert resp.status_code == 201, resp.content
    data = resp.json()["data"]
    assert data["category"] == "MUSICAL_INSTRUMENT"
    assert data["heritage_site"]["id"] == str(site.id)
    assert data["display_name"] == "Royal Drum"


def test_member_cannot_create(client, member, site, auth):
    assert _create(client, auth, member, site).status_code == 403


def test_name_unique_per_site_case_insensitive(client, heritage_manager, site, make_site, auth):
    _create(client, auth, heritage_manager, site, name="Royal Drum")
    dup = _create(client, auth, heritage_manager, site, name="royal drum")
    assert dup.status_code == 409
    assert dup.json()["code"] == "ARTIFACT_NAME_TAKEN"

    # another site may reuse the name
    assert _create(client, auth, heritage_manager, make_site("Other site"), name="Royal Drum").status_code == 201


def test_deleted_artifact_frees_its_name(client, heritage_manager, site, auth):
    artifact_id = _create(client, auth, heritage_manager, site).json()["data"]["id"]
    assert client.delete(f"/api/artifacts/{artifact_id}", **auth(heritage_manager)).status_code == 200
    assert not Artifact.objects.get(id=artifact_id).is_active
    assert _create(client, auth, heritage_manager, site).status_code == 201


def test_archived_site_rejects_new_artifacts(client, heritage_manager, make_site, auth):
    archived = make_site(status=SiteStatus.ARCHIVED, is_active=False)
    resp = _create(client, auth, heritage_manager, archived)
    assert resp.status_code == 400
    assert resp.json()["code"] == "SITE_ARCHIVED"


def test_private_artifacts_hidden_from_public(client, heritage_manager, site, auth):
    _create(client, auth, heritage_manager, site, name="Public spear")
    private_id = _create(client, auth, heritage_manager, site, name="Fragile basket",
                         is_public=False).json()["data"]["id"]

    public_items = client.get("/api/artifacts/").json()["data"]["items"]
    assert [a["display_name"] for a in public_items] == ["Public spear"]
    assert client.get(f"/api/artifacts/{private_id}").status_code == 404

    staff_items = client.get("/api/artifacts/", **auth(heritage_manager)).json()["data"]["items"]
    assert len(staff_items) == 2


def test_filter_by_site_and_search(client, heritage_manager, site, make_site, auth):
    other = make_site("Other site")
    _create(client, auth, heritage_manager, site, name="Royal Drum")
    _create(client, auth, heritage_manager, other, name="Clay pot", category="pottery")

    by_site = client.get(f"/api/artifacts/site/{other.id}").json()["data"]
    assert [a["display_name"] for a in by_site] == ["Clay pot"]

    found = client.get("/api/artifacts/?search=kalinga").json()["data"]["items"]
    assert len(found) == 2
    assert client.get("/api/artifacts/?category=POTTERY").json()["data"]["pagination"]["count"] == 1


def test_update_rename_conflict(client, heritage_manager, site, auth):
    _create(client, auth, heritage_manager, site, name="Royal Drum")
    second = _create(client, auth, heritage_manager, site, name="Spear").json()["data"]["id"]
    resp = client.patch(f"/api/artifacts/{second}", {"name": {"en": "ROYAL DRUM"}},
                        content_type="application/json", **auth(heritage_manager))
    assert resp.status_code == 409


def test_statistics_require_staff(client, heritage_manager, member, site, auth):
    _create(client, auth, heritage_manager, site)
    assert client.get("/api/artifacts/statistics", **auth(member)).status_code == 403
    data = client.get("/api/artifacts/statistics", **auth(heritage_manager)).json()["data"]
    assert data["total"] == 1
    assert data["by_category"] == {"MUSICAL_INSTRUMENT": 1}
