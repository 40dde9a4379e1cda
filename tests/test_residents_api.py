"""Integration tests for owner-side resident management."""

import pytest

from tests.conftest import register_owner_via_api


@pytest.mark.asyncio
async def test_list_residents(client, owner, resident):
    r = await client.get("/api/v1/residents/", headers=owner["headers"])

    assert r.status_code == 200
    residents = r.json()
    assert [u["email"] for u in residents] == ["ana@example.com"]

    r = await client.get("/api/v1/residents/", headers=resident["headers"])
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_revoke_and_restore(client, owner, resident):
    resident_id = resident["user"]["id"]

    r = await client.post(f"/api/v1/residents/{resident_id}/revoke", headers=owner["headers"])
    assert r.status_code == 200
    assert r.json()["active"] is False

    r = await client.post(f"/api/v1/residents/{resident_id}/restore", headers=owner["headers"])
    assert r.status_code == 200
    assert r.json()["active"] is True


@pytest.mark.asyncio
async def test_revoke_does_not_touch_issued_codes(client, owner, resident):
    r = await client.post(
        "/api/v1/qr-codes/",
        json={"visitor_name": "Pedro"},
        headers=resident["headers"],
    )
    qr = r.json()

    r = await client.post(f"/api/v1/residents/{resident['user']['id']}/revoke", headers=owner["headers"])
    assert r.status_code == 200

    r = await client.post("/api/qr/validate", json={"qrData": qr["qr_data"]})
    assert r.status_code == 200
    assert r.json()["valid"] is True


@pytest.mark.asyncio
async def test_cannot_manage_other_residentials(client, owner, resident):
    stranger = await register_owner_via_api(client, "other-owner@example.com")

    r = await client.post(f"/api/v1/residents/{resident['user']['id']}/revoke", headers=stranger["headers"])
    assert r.status_code == 404

    # Owners are not residents
    r = await client.post(f"/api/v1/residents/{owner['user']['id']}/revoke", headers=owner["headers"])
    assert r.status_code == 404
