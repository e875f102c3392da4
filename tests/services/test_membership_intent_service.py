"""Membership Intent Service — submission, review state machine, token validation.

Invariants tested:
    - One active intent per email; rejected candidates may re-apply
    - approve/reject only from PENDING
    - Approval issues a unique token expiring in ~7 days
    - validate_token: unknown -> 404, not approved/expired/used -> 400
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from netgroup.core.domain_types import (
    IntentSortField, IntentStatus, SortOrder, as_utc, utc_now,
)
from netgroup.core.errors import BadRequestError, ConflictError, NotFoundError
from netgroup.schemas.membership_intent import CompleteRegistration


# ─── submit ──────────────────────────────────────────────────────

async def test_submit_creates_pending_intent_and_notifies(intent_service, notifier, payload):
    intent = await intent_service.submit(payload())
    assert intent.status == IntentStatus.PENDING.value
    assert intent.invite_token is None
    assert notifier.events() == ["intent_received"]


async def test_duplicate_active_intent_is_conflict(intent_service, payload):
    await intent_service.submit(payload())
    with pytest.raises(ConflictError):
        await intent_service.submit(payload())


async def test_rejected_candidate_may_reapply(intent_service, payload):
    first = await intent_service.submit(payload())
    await intent_service.reject(first.id, "Not now")
    second = await intent_service.submit(payload())
    assert second.id != first.id


async def test_existing_member_cannot_apply(intent_service, member_factory, payload):
    await member_factory(email="bruno@example.com")
    with pytest.raises(ConflictError):
        await intent_service.submit(payload("bruno@example.com"))


# ─── approve / reject ────────────────────────────────────────────

async def test_approve_issues_token_with_seven_day_expiry(intent_service, notifier, payload):
    intent = await intent_service.submit(payload())
    before = utc_now()
    approved = await intent_service.approve(intent.id, "Great fit")

    assert approved.status == IntentStatus.APPROVED.value
    assert approved.invite_token
    assert approved.review_notes == "Great fit"
    assert approved.reviewed_at is not None
    expiry = as_utc(approved.token_expires_at)
    assert before + timedelta(days=7) <= expiry <= utc_now() + timedelta(days=7)

    event, _, details = notifier.sent[-1]
    assert event == "invite_issued"
    assert details["invite_token"] == approved.invite_token


async def test_approve_twice_is_bad_request(intent_service, approved_intent):
    with pytest.raises(BadRequestError):
        await intent_service.approve(approved_intent.id)


async def test_reject_after_approve_is_bad_request(intent_service, approved_intent):
    with pytest.raises(BadRequestError):
        await intent_service.reject(approved_intent.id, "changed my mind")


async def test_approve_after_reject_is_bad_request(intent_service, payload):
    intent = await intent_service.submit(payload())
    await intent_service.reject(intent.id, "Incomplete profile")
    with pytest.raises(BadRequestError):
        await intent_service.approve(intent.id)


async def test_reject_stores_reason_and_reviewer(intent_service, notifier, payload):
    intent = await intent_service.submit(payload())
    rejected = await intent_service.reject(intent.id, "Incomplete profile")
    assert rejected.status == IntentStatus.REJECTED.value
    assert rejected.rejection_reason == "Incomplete profile"
    assert rejected.invite_token is None
    assert notifier.events()[-1] == "intent_rejected"


async def test_review_unknown_intent_is_not_found(intent_service):
    with pytest.raises(NotFoundError):
        await intent_service.approve(uuid4())
    with pytest.raises(NotFoundError):
        await intent_service.reject(uuid4())


async def test_tokens_are_unique_across_approvals(intent_service, payload):
    tokens = set()
    for n in range(3):
        intent = await intent_service.submit(payload(f"c{n}@example.com"))
        tokens.add((await intent_service.approve(intent.id)).invite_token)
    assert len(tokens) == 3


# ─── validate_token ──────────────────────────────────────────────

async def test_validate_token_returns_intent(intent_service, approved_intent):
    intent = await intent_service.validate_token(approved_intent.invite_token)
    assert intent.id == approved_intent.id


async def test_validate_unknown_token_is_not_found(intent_service):
    with pytest.raises(NotFoundError):
        await intent_service.validate_token("no-such-token")


async def test_validate_expired_token_is_bad_request(intent_service, approved_intent, test_db):
    approved_intent.token_expires_at = utc_now() - timedelta(minutes=1)
    await test_db.commit()
    with pytest.raises(BadRequestError, match="expired"):
        await intent_service.validate_token(approved_intent.invite_token)


async def test_validate_is_read_only(intent_service, approved_intent):
    await intent_service.validate_token(approved_intent.invite_token)
    again = await intent_service.validate_token(approved_intent.invite_token)
    assert again.status == IntentStatus.APPROVED.value


async def test_validate_after_redemption_is_bad_request(
    intent_service, registration_service, approved_intent,
):
    token = approved_intent.invite_token
    await registration_service.complete(CompleteRegistration(
        invite_token=token, email="ana@example.com",
        full_name="Ana Souza", password="s3cret-pass",
    ))
    with pytest.raises(BadRequestError, match="already been used"):
        await intent_service.validate_token(token)


# ─── list ────────────────────────────────────────────────────────

async def test_list_filters_by_status_and_paginates(intent_service, payload):
    for n in range(3):
        await intent_service.submit(payload(f"p{n}@example.com", f"Pending {n}"))
    approved = await intent_service.submit(payload("a@example.com", "Approved One"))
    await intent_service.approve(approved.id)

    intents, pagination = await intent_service.list_intents(
        page=1, limit=2, status=IntentStatus.PENDING,
    )
    assert len(intents) == 2
    assert all(i.status == IntentStatus.PENDING.value for i in intents)
    assert pagination == {
        "current_page": 1, "total_pages": 2, "total_items": 3, "items_per_page": 2,
    }


async def test_list_search_matches_company_case_insensitively(intent_service, payload):
    await intent_service.submit(payload("x@example.com", "Xavier", company="Acme Corp"))
    await intent_service.submit(payload("y@example.com", "Yara", company="Globex"))
    intents, _ = await intent_service.list_intents(page=1, limit=20, search="acme")
    assert [i.full_name for i in intents] == ["Xavier"]


async def test_list_sorts_by_full_name(intent_service, payload):
    for name in ("Carla", "Ana", "Bruno"):
        await intent_service.submit(payload(f"{name.lower()}@example.com", name))
    intents, _ = await intent_service.list_intents(
        page=1, limit=20, sort_by=IntentSortField.FULL_NAME, order=SortOrder.ASC,
    )
    assert [i.full_name for i in intents] == ["Ana", "Bruno", "Carla"]
