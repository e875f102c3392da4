"""Route test fixtures — members created and logged in through the HTTP surface.

Invariants:
    - Every helper goes through the public endpoints (no direct DB writes)
    - Bearer headers come from POST /auth/login, never hand-built tokens
"""

import pytest

API = "/api/v1"
PASSWORD = "s3cret-pass"
MOTIVATION = "I want to grow my business through trusted referrals."


@pytest.fixture
def submit_intent(client):
    async def submit(email: str, full_name: str = "Ana Souza", **extra):
        return await client.post(f"{API}/membership-intents", json={
            "fullName": full_name, "email": email, "motivation": MOTIVATION, **extra,
        })
    return submit


@pytest.fixture
def approve_intent(client, admin_headers):
    async def approve(intent_id: str, notes: str | None = None):
        return await client.patch(
            f"{API}/membership-intents/{intent_id}/approve",
            json={"notes": notes} if notes else None,
            headers=admin_headers,
        )
    return approve


@pytest.fixture
def registered_member(client, submit_intent, approve_intent):
    """Full flow: apply -> approve -> complete registration -> login.

    Returns {"id", "email", "headers"} for the new member.
    """
    async def register(email: str, full_name: str = "Ana Souza", **profile):
        intent = (await submit_intent(email, full_name)).json()["data"]
        token = (await approve_intent(intent["id"])).json()["data"]["inviteToken"]
        res = await client.post(f"{API}/membership-intents/complete-registration", json={
            "inviteToken": token, "email": email, "fullName": full_name,
            "password": PASSWORD, **profile,
        })
        assert res.status_code == 201, res.text
        login = await client.post(
            f"{API}/auth/login", json={"email": email, "password": PASSWORD},
        )
        access_token = login.json()["data"]["accessToken"]
        return {
            "id": res.json()["data"]["memberId"],
            "email": email,
            "headers": {"Authorization": f"Bearer {access_token}"},
        }
    return register
