"""API tests for the /api/v1/clients endpoints."""

import uuid

import pytest

from clientdesk.infrastructure.database.models import CaseModel

BASE = "/api/v1/clients"


async def _create(async_client, headers, **body) -> dict:
    payload = {"first_name": "jane", "last_name": "doe", "phone_number": "+254700000000"}
    payload.update(body)
    response = await async_client.post(BASE, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_returns_envelope(async_client, seed):
    response = await async_client.post(
        BASE,
        json={
            "first_name": "jane",
            "last_name": "doe",
            "phone_number": "+254700000000",
            "email": "Jane@Example.com",
            "preferred_department_id": seed.department_id,
        },
        headers=seed.headers(seed.advocate_id),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Client created successfully"
    data = body["data"]
    assert data["first_name"] == "Jane"
    assert data["email"] == "jane@example.com"
    assert data["law_firm_id"] == seed.firm_a
    assert data["status"] == "active"
    assert data["preferred_department"]["name"] == "Litigation"
    assert data["created_by_user"]["email"] == "advocate@firm-a.com"


@pytest.mark.asyncio
async def test_create_missing_fields(async_client, seed):
    response = await async_client.post(
        BASE, json={"first_name": "Jane"}, headers=seed.headers(seed.admin_id)
    )
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "First name, last name, and phone number are required",
    }


@pytest.mark.asyncio
async def test_create_duplicate_email(async_client, seed):
    headers = seed.headers(seed.admin_id)
    await _create(async_client, headers, email="dup@example.com")

    response = await async_client.post(
        BASE,
        json={"first_name": "A", "last_name": "B", "phone_number": "1", "email": "DUP@example.com"},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Client with this email already exists"


@pytest.mark.asyncio
async def test_requests_without_actor_are_rejected(async_client, seed):
    missing = await async_client.get(BASE)
    disabled = await async_client.get(BASE, headers=seed.headers(seed.disabled_id))
    unknown = await async_client.get(BASE, headers=seed.headers(str(uuid.uuid4())))

    assert missing.status_code == 401
    assert disabled.status_code == 401
    assert unknown.status_code == 401
    assert missing.json()["success"] is False


@pytest.mark.asyncio
async def test_cross_firm_access_is_forbidden(async_client, seed):
    created = await _create(async_client, seed.headers(seed.admin_id))
    outsider = seed.headers(seed.other_admin_id)

    get = await async_client.get(f"{BASE}/{created['id']}", headers=outsider)
    put = await async_client.put(f"{BASE}/{created['id']}", json={"notes": "x"}, headers=outsider)
    delete = await async_client.delete(f"{BASE}/{created['id']}", headers=outsider)

    assert get.status_code == 403
    assert get.json()["message"] == "You don't have access to this client"
    assert put.status_code == 403
    assert delete.status_code == 403


@pytest.mark.asyncio
async def test_get_with_bad_or_unknown_id(async_client, seed):
    headers = seed.headers(seed.admin_id)

    bad = await async_client.get(f"{BASE}/not-a-uuid", headers=headers)
    unknown = await async_client.get(f"{BASE}/{uuid.uuid4()}", headers=headers)

    assert bad.status_code == 400
    assert bad.json()["message"] == "Invalid client ID format"
    assert unknown.status_code == 404
    assert unknown.json()["message"] == "Client not found"


@pytest.mark.asyncio
async def test_list_paginates_within_firm(async_client, seed):
    headers = seed.headers(seed.admin_id)
    for i in range(12):
        await _create(async_client, headers, first_name=f"Client{i:02d}", phone_number=str(i))
    await _create(async_client, seed.headers(seed.other_admin_id), first_name="Foreign")

    response = await async_client.get(
        BASE,
        params={"page": 2, "limit": 5, "sort_by": "first_name", "sort_order": "asc"},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"page": 2, "limit": 5, "total": 12, "pages": 3}
    assert [c["first_name"] for c in body["data"]] == [f"Client{i:02d}" for i in range(5, 10)]


@pytest.mark.asyncio
async def test_list_rejects_unknown_sort_field(async_client, seed):
    response = await async_client.get(
        BASE, params={"sort_by": "password"}, headers=seed.headers(seed.admin_id)
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_search_minimum_length(async_client, seed):
    headers = seed.headers(seed.admin_id)
    await _create(async_client, headers, last_name="Kamau")

    short = await async_client.get(f"{BASE}/search", params={"q": "k"}, headers=headers)
    ok = await async_client.get(f"{BASE}/search", params={"q": "ka"}, headers=headers)

    assert short.status_code == 400
    assert short.json()["message"] == "Search query must be at least 2 characters long"
    assert ok.status_code == 200
    assert [c["last_name"] for c in ok.json()["data"]] == ["Kamau"]


@pytest.mark.asyncio
async def test_stats(async_client, seed):
    headers = seed.headers(seed.admin_id)
    await _create(async_client, headers, preferred_department_id=seed.department_id)
    await _create(async_client, headers, client_type="corporate", company_name="acme")

    response = await async_client.get(f"{BASE}/stats", headers=headers)

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["total_clients"] == 2
    assert stats["corporate_clients"] == 1
    assert stats["recent_clients"] == 2
    assert {d["department"] for d in stats["clients_by_department"]} == {"Litigation", "Unassigned"}


@pytest.mark.asyncio
async def test_update_is_partial(async_client, seed):
    headers = seed.headers(seed.admin_id)
    created = await _create(async_client, headers, notes="keep me")

    response = await async_client.put(
        f"{BASE}/{created['id']}",
        json={"status": "suspended", "last_name": "smith"},
        headers=seed.headers(seed.advocate_id),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Client updated successfully"
    assert body["data"]["status"] == "suspended"
    assert body["data"]["last_name"] == "Smith"
    assert body["data"]["notes"] == "keep me"
    assert body["data"]["updated_by"] == seed.advocate_id


@pytest.mark.asyncio
async def test_delete_rules(async_client, session_factory, seed):
    headers = seed.headers(seed.admin_id)
    created = await _create(async_client, headers)

    as_advocate = await async_client.delete(
        f"{BASE}/{created['id']}", headers=seed.headers(seed.advocate_id)
    )
    assert as_advocate.status_code == 403

    async with session_factory() as session:
        session.add(
            CaseModel(
                id=str(uuid.uuid4()),
                law_firm_id=seed.firm_a,
                client_id=created["id"],
                case_number="C-001",
            )
        )
        await session.commit()

    blocked = await async_client.delete(f"{BASE}/{created['id']}", headers=headers)
    assert blocked.status_code == 409
    assert blocked.json()["message"] == "Client has associated cases and cannot be deleted"

    other = await _create(async_client, headers, phone_number="2")
    deleted = await async_client.delete(f"{BASE}/{other['id']}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json() == {
        "success": True,
        "message": "Client deleted successfully",
        "data": None,
    }

    gone = await async_client.get(f"{BASE}/{other['id']}", headers=headers)
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_update_with_blank_or_null_email_clears_it(async_client, seed):
    headers = seed.headers(seed.admin_id)
    first = await _create(async_client, headers, email="first@example.com")
    second = await _create(async_client, headers, phone_number="2", email="second@example.com")

    blank = await async_client.put(f"{BASE}/{first['id']}", json={"email": ""}, headers=headers)
    null = await async_client.put(f"{BASE}/{second['id']}", json={"email": None}, headers=headers)

    assert blank.status_code == 200
    assert blank.json()["data"]["email"] is None
    assert null.status_code == 200
    assert null.json()["data"]["email"] is None

    again = await async_client.put(
        f"{BASE}/{first['id']}", json={"email": "", "notes": "no email"}, headers=headers
    )
    assert again.status_code == 200
    assert again.json()["data"]["notes"] == "no email"

    stored = await async_client.get(f"{BASE}/{second['id']}", headers=headers)
    assert stored.json()["data"]["email"] is None
