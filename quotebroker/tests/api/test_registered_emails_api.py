from quotebroker.tests.conftest import API, auth

URL = f"{API}/admin/registered-emails"


def _entry(**overrides):
    body = {
        "email": "Offert@Elfirma.se",
        "city": "Malmö",
        "company_type": "Underentreprenör",
        "contractor_type": "El",
    }
    body.update(overrides)
    return body


def test_admin_registers_and_lists(client, people):
    admin = auth(people["admin"])

    r = client.post(URL, json=_entry(), headers=admin)
    assert r.status_code == 201, r.text
    assert r.json()["email"] == "offert@elfirma.se"
    assert r.json()["city"] == "Malmö"

    client.post(
        URL,
        json=_entry(email="vvs@example.com", city=None, contractor_type="VS"),
        headers=admin,
    )

    listed = client.get(URL, headers=admin)
    assert listed.status_code == 200
    assert {e["email"] for e in listed.json()["items"]} == {"offert@elfirma.se", "vvs@example.com"}


def test_duplicate_email_is_rejected(client, people):
    admin = auth(people["admin"])
    client.post(URL, json=_entry(), headers=admin)

    r = client.post(URL, json=_entry(email="OFFERT@elfirma.se"), headers=admin)

    assert r.status_code == 400
    assert r.json() == {"error": "The email address is already registered."}


def test_registry_is_admin_only(client, people):
    headers = auth(people["requester"])

    r = client.post(URL, json=_entry(), headers=headers)
    assert r.status_code == 403
    assert r.json() == {"error": "Administrator role required."}

    r = client.get(URL, headers=headers)
    assert r.status_code == 403


def test_invalid_entries_are_rejected(client, people):
    admin = auth(people["admin"])

    for bad in (
        _entry(email="not-an-email"),
        _entry(company_type="Konsult"),
        _entry(contractor_type="Trädgård"),
    ):
        r = client.post(URL, json=bad, headers=admin)
        assert r.status_code == 400
        assert r.json() == {"error": "Invalid request body."}


def test_list_filters(client, people):
    admin = auth(people["admin"])
    client.post(URL, json=_entry(), headers=admin)
    client.post(URL, json=_entry(email="b@example.com", city="Stockholm", contractor_type="VS"), headers=admin)
    client.post(
        URL,
        json=_entry(email="c@example.com", city="Malmö", company_type="Totalentreprenör"),
        headers=admin,
    )

    def emails(**params):
        r = client.get(URL, params=params, headers=admin)
        assert r.status_code == 200
        return sorted(e["email"] for e in r.json()["items"])

    assert emails(city="malm") == ["c@example.com", "offert@elfirma.se"]
    assert emails(contractor_type="VS") == ["b@example.com"]
    assert emails(company_type="Totalentreprenör") == ["c@example.com"]
    assert emails(city="malm", company_type="Underentreprenör") == ["offert@elfirma.se"]
