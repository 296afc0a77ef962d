from __future__ import annotations

from fastapi.testclient import TestClient
from jose import jwt

from jobly.core.config import get_settings

C1_ROW = {
    "handle": "c1",
    "name": "C1",
    "description": "Desc1",
    "num_employees": 1,
    "logo_url": "http://c1.img",
}

NEW_COMPANY = {
    "handle": "new",
    "name": "New",
    "description": "New Description",
    "numEmployees": 10,
    "logoUrl": "http://new.img",
}


def test_list_companies_is_public(api_client: TestClient, recording_db) -> None:
    recording_db.queue([C1_ROW])

    response = api_client.get("/companies")

    assert response.status_code == 200
    assert response.json() == [
        {
            "handle": "c1",
            "name": "C1",
            "description": "Desc1",
            "numEmployees": 1,
            "logoUrl": "http://c1.img",
        }
    ]


def test_list_companies_passes_filters(api_client: TestClient, recording_db) -> None:
    recording_db.queue([C1_ROW])

    response = api_client.get("/companies", params={"nameLike": "c", "maxEmployees": 3})

    assert response.status_code == 200
    statement, args = recording_db.calls[0]
    assert "where name ilike $1 and num_employees <= $2" in statement
    assert args == ("%c%", 3)


def test_list_companies_rejects_inverted_range_before_querying(api_client: TestClient, recording_db) -> None:
    response = api_client.get("/companies", params={"minEmployees": 10, "maxEmployees": 5})

    assert response.status_code == 400
    assert recording_db.calls == []


def test_list_companies_ignores_garbage_token(api_client: TestClient, recording_db) -> None:
    recording_db.queue([C1_ROW])

    response = api_client.get("/companies", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 200


def test_create_company_requires_token(api_client: TestClient, recording_db) -> None:
    response = api_client.post("/companies", json=NEW_COMPANY)

    assert response.status_code == 401
    assert recording_db.calls == []


def test_create_company_denies_non_admin(api_client: TestClient, user_headers) -> None:
    response = api_client.post("/companies", json=NEW_COMPANY, headers=user_headers)

    assert response.status_code == 401


def test_create_company_denies_string_admin_flag(api_client: TestClient) -> None:
    settings = get_settings()
    token = jwt.encode({"username": "sneaky", "isAdmin": "true"}, settings.secret_key, algorithm=settings.jwt_algorithm)

    response = api_client.post("/companies", json=NEW_COMPANY, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_create_company_allows_admin(api_client: TestClient, recording_db, admin_headers) -> None:
    recording_db.queue(
        [
            {
                "handle": "new",
                "name": "New",
                "description": "New Description",
                "num_employees": 10,
                "logo_url": "http://new.img",
            }
        ]
    )

    response = api_client.post("/companies", json=NEW_COMPANY, headers=admin_headers)

    assert response.status_code == 201
    assert response.json() == NEW_COMPANY
    assert recording_db.calls[0][1] == ("new", "New", "New Description", 10, "http://new.img")


def test_create_duplicate_company_conflicts(api_client: TestClient, recording_db, admin_headers) -> None:
    recording_db.queue([])

    response = api_client.post("/companies", json=NEW_COMPANY, headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["detail"] == "Duplicate company: new"


def test_get_missing_company(api_client: TestClient) -> None:
    response = api_client.get("/companies/nope")

    assert response.status_code == 404
    assert response.json()["detail"] == "No company: nope"


def test_patch_company_updates_only_supplied_fields(api_client: TestClient, recording_db, admin_headers) -> None:
    recording_db.queue([{**C1_ROW, "num_employees": 50}])

    response = api_client.patch("/companies/c1", json={"numEmployees": 50}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["numEmployees"] == 50
    assert response.json()["name"] == "C1"
    statement, args = recording_db.calls[0]
    assert 'set "num_employees"=$1 where handle = $2' in statement
    assert args == (50, "c1")


def test_patch_company_with_empty_body_is_bad_request(api_client: TestClient, recording_db, admin_headers) -> None:
    response = api_client.patch("/companies/c1", json={}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "No data"
    assert recording_db.calls == []


def test_patch_company_rejects_handle_change(api_client: TestClient, admin_headers) -> None:
    response = api_client.patch("/companies/c1", json={"handle": "c2"}, headers=admin_headers)

    assert response.status_code == 422


def test_delete_company(api_client: TestClient, recording_db, admin_headers) -> None:
    recording_db.queue([{"handle": "c1"}])

    response = api_client.delete("/companies/c1", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"deleted": "c1"}


def test_delete_missing_company(api_client: TestClient, admin_headers) -> None:
    response = api_client.delete("/companies/nope", headers=admin_headers)

    assert response.status_code == 404


def test_patch_company_rejects_null_for_required_columns(api_client: TestClient, recording_db, admin_headers) -> None:
    response = api_client.patch("/companies/c1", json={"name": None, "description": None}, headers=admin_headers)

    assert response.status_code == 422
    assert recording_db.calls == []


def test_patch_company_allows_clearing_optional_columns(api_client: TestClient, recording_db, admin_headers) -> None:
    recording_db.queue([{**C1_ROW, "logo_url": None}])

    response = api_client.patch("/companies/c1", json={"logoUrl": None}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["logoUrl"] is None
    assert recording_db.calls[0][1] == (None, "c1")


def test_create_company_rejects_uppercase_handle(api_client: TestClient, recording_db, admin_headers) -> None:
    response = api_client.post("/companies", json={**NEW_COMPANY, "handle": "ACME"}, headers=admin_headers)

    assert response.status_code == 422
    assert recording_db.calls == []


def test_company_employee_counts_stay_within_integer_range(
    api_client: TestClient, recording_db, admin_headers
) -> None:
    too_many = 2**31

    created = api_client.post("/companies", json={**NEW_COMPANY, "numEmployees": too_many}, headers=admin_headers)
    patched = api_client.patch("/companies/c1", json={"numEmployees": too_many}, headers=admin_headers)
    listed = api_client.get("/companies", params={"minEmployees": too_many})

    assert created.status_code == 422
    assert patched.status_code == 422
    assert listed.status_code == 422
    assert recording_db.calls == []
