import uuid

from quotebroker.models.project import Project
from quotebroker.models.quote import Quote
from quotebroker.tests.conftest import API, auth


def test_health(client):
    r = client.get(f"{API}/health", headers={"X-Request-Id": "rid-123"})

    assert r.status_code == 200
    assert r.json() == {"status": "ok", "request_id": "rid-123"}
    assert r.headers["X-Request-Id"] == "rid-123"


def test_register_login_me(client):
    r = client.post(
        f"{API}/auth/register",
        json={
            "email": "Bygg@Example.com",
            "password": "hemligt123",
            "company_name": "Bygg AB",
            "company_type": "Totalentreprenör",
        },
    )
    assert r.status_code == 201, r.text
    assert r.json()["email"] == "bygg@example.com"
    assert r.json()["is_admin"] is False

    dup = client.post(f"{API}/auth/register", json={"email": "bygg@example.com", "password": "hemligt123"})
    assert dup.status_code == 400
    assert dup.json() == {"error": "Email already registered."}

    bad = client.post(f"{API}/auth/login", json={"email": "bygg@example.com", "password": "fel"})
    assert bad.status_code == 401
    assert bad.json() == {"error": "Invalid credentials."}

    ok = client.post(f"{API}/auth/login", json={"email": "bygg@example.com", "password": "hemligt123"})
    assert ok.status_code == 200
    token = ok.json()["access_token"]

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["company_type"] == "Totalentreprenör"


def test_register_rejects_unknown_company_type(client):
    r = client.post(
        f"{API}/auth/register",
        json={"email": "x@example.com", "password": "hemligt123", "company_type": "Konsult"},
    )

    assert r.status_code == 400
    assert r.json() == {"error": "Invalid request body."}


def test_token_for_deleted_profile_is_rejected(client, db, people):
    headers = auth(people["outsider"])
    db.delete(people["outsider"])
    db.commit()

    r = client.get(f"{API}/auth/me", headers=headers)

    assert r.status_code == 401
    assert r.json() == {"error": "Authentication failed."}


def test_create_list_get_project(client, people):
    r = client.post(
        f"{API}/projects",
        json={"title": "Tillbyggnad", "category": "Villa"},
        headers=auth(people["owner"]),
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["created_by"] == str(people["owner"].id)
    assert body["status"] == "open"

    listed = client.get(f"{API}/projects", headers=auth(people["requester"]))
    assert [p["id"] for p in listed.json()["items"]] == [body["id"]]

    one = client.get(f"{API}/projects/{body['id']}", headers=auth(people["requester"]))
    assert one.json()["title"] == "Tillbyggnad"

    missing = client.get(f"{API}/projects/{uuid.uuid4()}", headers=auth(people["requester"]))
    assert missing.status_code == 404
    assert missing.json() == {"error": "Could not find the specified project."}


def test_only_admin_deletes_projects(client, db, storage, people, project, quote):
    url = f"{API}/projects/{project.id}"

    r = client.delete(url, headers=auth(people["owner"]))
    assert r.status_code == 403
    assert r.json() == {"error": "Administrator role required."}

    file_path, project_id, quote_id = quote.file_path, project.id, quote.id
    r = client.delete(url, headers=auth(people["admin"]))
    assert r.status_code == 200

    db.expire_all()
    assert db.get(Project, project_id) is None
    assert db.get(Quote, quote_id) is None
    assert storage.delete(file_path) is False


def test_unknown_route_uses_error_shape(client):
    r = client.get(f"{API}/nope")

    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}


def test_contractor_types_are_listed(client):
    r = client.get(f"{API}/quotes/contractor-types")

    assert r.status_code == 200
    assert "El" in r.json()["items"]


def test_create_project_with_details(client, people):
    r = client.post(
        f"{API}/projects",
        json={
            "title": "Kv. Linden",
            "area": "Västra Hamnen",
            "client_name": "Bostads AB",
            "completion_date": "2027-06-30",
            "num_apartments": 42,
            "gross_floor_area": 3850.5,
        },
        headers=auth(people["owner"]),
    )

    assert r.status_code == 201, r.text
    body = r.json()
    assert body["area"] == "Västra Hamnen"
    assert body["completion_date"] == "2027-06-30"
    assert body["num_apartments"] == 42
    assert body["environmental_class"] is None


def test_only_admin_edits_projects(client, db, people, project):
    url = f"{API}/projects/{project.id}"

    r = client.patch(url, json={"title": "Nytt namn"}, headers=auth(people["owner"]))
    assert r.status_code == 403
    assert r.json() == {"error": "Administrator role required."}

    r = client.patch(
        url,
        json={
            "status": "Pågående",
            "client_type": "Privat",
            "environmental_class": "Miljöbyggnad Silver",
            "start_date": "2026-11-01",
        },
        headers=auth(people["admin"]),
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["status"] == "Pågående"
    assert body["client_type"] == "Privat"
    assert body["start_date"] == "2026-11-01"
    # untouched fields keep their values
    assert body["title"] == "Villa Solbacken"

    db.expire_all()
    assert db.get(Project, project.id).environmental_class == "Miljöbyggnad Silver"


def test_edit_cannot_clear_title(client, people, project):
    url = f"{API}/projects/{project.id}"

    r = client.patch(url, json={"title": None}, headers=auth(people["admin"]))
    assert r.status_code == 400
    assert r.json() == {"error": "Title is required."}

    r = client.patch(url, json={"budget": 10}, headers=auth(people["admin"]))
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid request body."}


def test_edit_unknown_project(client, people):
    r = client.patch(f"{API}/projects/{uuid.uuid4()}", json={"area": "x"}, headers=auth(people["admin"]))

    assert r.status_code == 404
    assert r.json() == {"error": "Could not find the specified project."}
