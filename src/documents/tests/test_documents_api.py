import pytest

pytestmark = pytest.mark.django_db


def _create(client, auth, user, title="Survey of Nyanza", **extra):
    payload = {"title": {"en": title}, "author": "National Museums", **extra}
    return client.post("/api/documents/", payload, content_type="application/json", **auth(user))


def test_content_manager_creates_private_document_by_default(client, content_manager, auth):
    resp = _create(client, auth, content_manager, document_type="report", tags=[" Royal ", "royal", "Palace"])
    assert resp.status_code == 201, resp.content
    data = resp.json()["data"]
    assert data["is_public"] is False
    assert data["document_type"] == "REPORT"
    assert data["tags"] == ["palace", "royal"]
    assert data["language"] == "en"


def test_members_cannot_create(client, member, auth):
    assert _create(client, auth, member).status_code == 403


def test_unknown_document_type(client, content_manager, auth):
    assert _create(client, auth, content_manager, document_type="novel").status_code == 422


def test_listing_requires_auth_but_public_listing_does_not(client, content_manager, guest, auth):
    _create(client, auth, content_manager, title="Open report", is_public=True)
    _create(client, auth, content_manager, title="Internal memo")

    assert client.get("/api/documents/").status_code == 401
    public = client.get("/api/documents/public").json()["data"]
    assert [d["title"]["en"] for d in public["items"]] == ["Open report"]

    # guests only see public documents even when signed in
    assert client.get("/api/documents/", **auth(guest)).json()["data"]["pagination"]["count"] == 1
    assert client.get("/api/documents/", **auth(content_manager)).json()["data"]["pagination"]["count"] == 2


def test_private_document_detail(client, content_manager, member, auth):
    doc_id = _create(client, auth, content_manager).json()["data"]["id"]
    assert client.get(f"/api/documents/{doc_id}").status_code == 404
    assert client.get(f"/api/documents/{doc_id}", **auth(member)).status_code == 200


def test_filters(client, content_manager, make_site, auth):
    site = make_site()
    _create(client, auth, content_manager, title="Map of Huye", document_type="MAP", tags=["south"],
            language="fr", heritage_site_id=str(site.id), is_public=True)
    _create(client, auth, content_manager, title="Annual report", document_type="REPORT", is_public=True)

    def titles(query):
        items = client.get(f"/api/documents/public?{query}").json()["data"]["items"]
        return [d["title"]["en"] for d in items]

    assert titles("document_type=map") == ["Map of Huye"]
    assert titles("tag=South") == ["Map of Huye"]
    assert titles("language=fr") == ["Map of Huye"]
    assert titles(f"site_id={site.id}") == ["Map of Huye"]
    assert titles("search=annual") == ["Annual report"]
    assert titles("search=national%20museums") == ["Annual report", "Map of Huye"]


def test_types_languages_and_statistics(client, content_manager, member, auth):
    _create(client, auth, content_manager, document_type="MAP", language="rw")
    _create(client, auth, content_manager, document_type="REPORT", is_public=True)

    assert client.get("/api/documents/types").json()["data"] == ["MAP", "REPORT"]
    assert client.get("/api/documents/languages").json()["data"] == ["en", "rw"]

    assert client.get("/api/documents/statistics", **auth(member)).status_code == 403
    stats = client.get("/api/documents/statistics", **auth(content_manager)).json()["data"]
    assert stats == {
        "total": 2,
        "public": 1,
        "private": 1,
        "by_type": {"MAP": 1, "REPORT": 1},
        "by_language": {"rw": 1, "en": 1},
    }


def test_update_and_delete(client, content_manager, auth):
    doc_id = _create(client, auth, content_manager).json()["data"]["id"]
    resp = client.patch(f"/api/documents/{doc_id}", {"is_public": True, "tags": ["Archive"]},
                        content_type="application/json", **auth(content_manager))
    assert resp.status_code == 200
    assert resp.json()["data"]["tags"] == ["archive"]

    assert client.delete(f"/api/documents/{doc_id}", **auth(content_manager)).status_code == 200
    assert client.get(f"/api/documents/{doc_id}", **auth(content_manager)).status_code == 404
