"""Referral Routes — bearer-authenticated referral workflow over HTTP.

Invariants tested:
    - Acting member always taken from the login token
    - Missing/invalid bearer -> 401; admin API key is not a member credential
    - Only the recipient moves status; CLOSED without closedValue -> 400
"""

from uuid import uuid4

API = "/api/v1"
DESCRIPTION = "Bakery owner looking for an accountant for two stores."


async def _create(client, sender, recipient_id, client_name="Padaria Central", **extra):
    return await client.post(f"{API}/referrals", json={
        "referredToId": recipient_id, "clientName": client_name,
        "description": DESCRIPTION, **extra,
    }, headers=sender["headers"])


async def test_referral_lifecycle(client, registered_member):
    ana = await registered_member("ana@example.com", "Ana")
    bruno = await registered_member("bruno@example.com", "Bruno")

    created = await _create(client, ana, bruno["id"], estimatedValue=1500)
    assert created.status_code == 201
    referral = created.json()["data"]
    assert referral["status"] == "PENDING"
    assert referral["referrerId"] == ana["id"]
    assert referral["referrer"]["fullName"] == "Ana"
    assert referral["referredTo"]["fullName"] == "Bruno"

    by_referrer = await client.patch(
        f"{API}/referrals/{referral['id']}/status",
        json={"status": "CONTACTED"}, headers=ana["headers"],
    )
    assert by_referrer.status_code == 403

    contacted = await client.patch(
        f"{API}/referrals/{referral['id']}/status",
        json={"status": "CONTACTED", "feedback": "First call done"},
        headers=bruno["headers"],
    )
    assert contacted.status_code == 200
    assert contacted.json()["data"]["feedback"] == "First call done"

    missing_value = await client.patch(
        f"{API}/referrals/{referral['id']}/status",
        json={"status": "CLOSED"}, headers=bruno["headers"],
    )
    assert missing_value.status_code == 400
    assert missing_value.json()["error"]["code"] == "BAD_REQUEST"

    closed = await client.patch(
        f"{API}/referrals/{referral['id']}/status",
        json={"status": "CLOSED", "closedValue": 1800.0}, headers=bruno["headers"],
    )
    assert closed.status_code == 200
    assert closed.json()["data"]["closedAt"] is not None
    assert closed.json()["data"]["closedValue"] == 1800.0

    detail = await client.get(
        f"{API}/referrals/{referral['id']}", headers=ana["headers"],
    )
    assert detail.status_code == 200
    history = detail.json()["data"]["statusHistory"]
    assert len(history) == 3
    assert {h["toStatus"] for h in history} == {"PENDING", "CONTACTED", "CLOSED"}
    assert any(h["fromStatus"] is None for h in history)


async def test_listing_with_direction_and_statistics(client, registered_member):
    ana = await registered_member("ana@example.com", "Ana")
    bruno = await registered_member("bruno@example.com", "Bruno")
    await _create(client, ana, bruno["id"], "Given One")
    await _create(client, bruno, ana["id"], "Received One")
    await _create(client, bruno, ana["id"], "Received Two")

    res = await client.get(
        f"{API}/referrals", params={"type": "received"}, headers=ana["headers"],
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert {r["clientName"] for r in data["referrals"]} == {"Received One", "Received Two"}
    assert data["statistics"] == {
        "totalGiven": 1,
        "totalReceived": 2,
        "pendingReceived": 2,
        "closedReceived": 0,
        "totalValueClosed": 0.0,
    }
    assert data["pagination"]["totalItems"] == 2

    everything = await client.get(f"{API}/referrals", headers=ana["headers"])
    assert everything.json()["data"]["pagination"]["totalItems"] == 3


async def test_self_referral_is_400(client, registered_member):
    ana = await registered_member("ana@example.com", "Ana")
    res = await _create(client, ana, ana["id"])
    assert res.status_code == 400


async def test_referral_to_inactive_member_is_400(client, registered_member, admin_headers):
    ana = await registered_member("ana@example.com", "Ana")
    bruno = await registered_member("bruno@example.com", "Bruno")
    await client.delete(f"{API}/members/{bruno['id']}", headers=admin_headers)
    res = await _create(client, ana, bruno["id"])
    assert res.status_code == 400


async def test_inactive_member_cannot_refer(client, registered_member, admin_headers):
    ana = await registered_member("ana@example.com", "Ana")
    bruno = await registered_member("bruno@example.com", "Bruno")
    await client.delete(f"{API}/members/{ana['id']}", headers=admin_headers)
    res = await _create(client, ana, bruno["id"])
    assert res.status_code == 403


async def test_outsider_cannot_view_referral(client, registered_member):
    ana = await registered_member("ana@example.com", "Ana")
    bruno = await registered_member("bruno@example.com", "Bruno")
    carla = await registered_member("carla@example.com", "Carla")
    referral = (await _create(client, ana, bruno["id"])).json()["data"]
    res = await client.get(f"{API}/referrals/{referral['id']}", headers=carla["headers"])
    assert res.status_code == 403


async def test_unknown_referral_is_404(client, registered_member):
    ana = await registered_member("ana@example.com", "Ana")
    res = await client.get(f"{API}/referrals/{uuid4()}", headers=ana["headers"])
    assert res.status_code == 404


async def test_referrals_require_bearer_token(client, admin_headers):
    missing = await client.get(f"{API}/referrals")
    assert missing.status_code == 401

    with_key_only = await client.get(f"{API}/referrals", headers=admin_headers)
    assert with_key_only.status_code == 401

    garbage = await client.get(
        f"{API}/referrals", headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert garbage.status_code == 401
