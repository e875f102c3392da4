"""Member Routes — intent-gated creation and the admin directory over HTTP."""

from uuid import uuid4

API = "/api/v1"


async def test_create_member_from_approved_intent(
    client, submit_intent, approve_intent,
):
    intent = (await submit_intent("dani@example.com", "Dani Lima")).json()["data"]
    await approve_intent(intent["id"])

    res = await client.post(f"{API}/members", json={
        "intentId": intent["id"], "email": "dani@example.com", "fullName": "Dani Lima",
        "cpf": "123.456.789-01", "industry": "Law",
    })
    assert res.status_code == 201
    member = res.json()["data"]
    assert member["status"] == "ACTIVE"
    assert member["intentId"] == intent["id"]
    assert "passwordHash" not in member
    assert "password_hash" not in member

    again = await client.post(f"{API}/members", json={
        "intentId": intent["id"], "email": "other@example.com", "fullName": "Other",
    })
    assert again.status_code == 409


async def test_create_member_under_another_email_is_400(
    client, submit_intent, approve_intent, admin_headers,
):
    intent = (await submit_intent("owner@example.com", "Owner")).json()["data"]
    await approve_intent(intent["id"])

    res = await client.post(f"{API}/members", json={
        "intentId": intent["id"], "email": "someone-else@example.com", "fullName": "Owner",
    })
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "BAD_REQUEST"

    directory = await client.get(f"{API}/members", headers=admin_headers)
    assert directory.json()["data"]["pagination"]["totalItems"] == 0

    rightful = await client.post(f"{API}/members", json={
        "intentId": intent["id"], "email": "owner@example.com", "fullName": "Owner",
    })
    assert rightful.status_code == 201


async def test_create_member_from_pending_intent_is_400(client, submit_intent):
    intent = (await submit_intent("eva@example.com")).json()["data"]
    res = await client.post(f"{API}/members", json={
        "intentId": intent["id"], "email": "eva@example.com", "fullName": "Eva",
    })
    assert res.status_code == 400


async def test_create_member_unknown_intent_is_404(client):
    res = await client.post(f"{API}/members", json={
        "intentId": str(uuid4()), "email": "x@example.com", "fullName": "X",
    })
    assert res.status_code == 404


async def test_directory_requires_api_key(client):
    res = await client.get(f"{API}/members")
    assert res.status_code == 401


async def test_directory_lists_members_with_stats(client, registered_member, admin_headers):
    await registered_member("ana@example.com", "Ana", industry="Software")
    await registered_member("bruno@example.com", "Bruno", industry="Law")

    res = await client.get(
        f"{API}/members", params={"industry": "soft"}, headers=admin_headers,
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert [m["fullName"] for m in data["members"]] == ["Ana"]
    assert data["members"][0]["stats"] == {
        "referralsGiven": 0, "referralsReceived": 0, "businessClosed": 0, "totalValue": 0.0,
    }
    assert data["pagination"]["totalItems"] == 1


async def test_get_member_includes_statistics(client, registered_member, admin_headers):
    ana = await registered_member("ana@example.com", "Ana")
    res = await client.get(f"{API}/members/{ana['id']}", headers=admin_headers)
    assert res.status_code == 200
    statistics = res.json()["data"]["statistics"]
    assert statistics["referralsGiven"] == 0
    assert statistics["attendanceRate"] == 0.0


async def test_update_member_merges_address(client, registered_member, admin_headers):
    ana = await registered_member(
        "ana@example.com", "Ana", address={"city": "Recife", "state": "PE"},
    )
    res = await client.patch(
        f"{API}/members/{ana['id']}",
        json={"position": "CEO", "address": {"city": "Olinda"}},
        headers=admin_headers,
    )
    assert res.status_code == 200
    member = res.json()["data"]
    assert member["position"] == "CEO"
    assert member["address"]["city"] == "Olinda"
    assert member["address"]["state"] == "PE"


async def test_update_rejects_email_change(client, registered_member, admin_headers):
    ana = await registered_member("ana@example.com", "Ana")
    res = await client.patch(
        f"{API}/members/{ana['id']}",
        json={"email": "new@example.com"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["data"]["email"] == "ana@example.com"


async def test_deactivate_is_soft_and_idempotent(client, registered_member, admin_headers):
    ana = await registered_member("ana@example.com", "Ana")
    first = await client.delete(f"{API}/members/{ana['id']}", headers=admin_headers)
    assert first.status_code == 200
    assert first.json()["data"]["status"] == "INACTIVE"
    end_date = first.json()["data"]["membershipEndDate"]
    assert end_date is not None

    second = await client.delete(f"{API}/members/{ana['id']}", headers=admin_headers)
    assert second.status_code == 200
    # SQLite drops the offset on reload; the instant is unchanged
    assert second.json()["data"]["membershipEndDate"][:19] == end_date[:19]

    still_there = await client.get(f"{API}/members/{ana['id']}", headers=admin_headers)
    assert still_there.status_code == 200


async def test_deactivate_unknown_member_is_404(client, admin_headers):
    res = await client.delete(f"{API}/members/{uuid4()}", headers=admin_headers)
    assert res.status_code == 404
