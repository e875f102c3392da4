"""Referral Service — creation checks, recipient-only transitions, history, statistics.

Invariants tested:
    - Self-referral is BadRequest regardless of status; inactive referrer is Forbidden
    - Only the recipient changes status; CLOSED requires a closed value (0 allowed)
    - History grows by one row per change, newest first
    - total_received == sum of per-status received counts
"""

from uuid import uuid4

import pytest

from netgroup.core.domain_types import ReferralDirection, ReferralStatus
from netgroup.core.errors import BadRequestError, ForbiddenError, NotFoundError
from netgroup.schemas.referral import ReferralCreate, ReferralStatusUpdate


def _referral(to_id, client_name="Padaria Central", **extra):
    return ReferralCreate(
        referred_to_id=to_id,
        client_name=client_name,
        description="Bakery owner looking for an accountant for two stores.",
        **extra,
    )


@pytest.fixture
async def pair(member_factory):
    ana = await member_factory("Ana")
    bruno = await member_factory("Bruno")
    return ana, bruno


# ─── create ──────────────────────────────────────────────────────

async def test_create_starts_pending_with_history(referral_service, pair, notifier):
    ana, bruno = pair
    referral = await referral_service.create(ana.id, _referral(bruno.id, estimated_value=1200))

    assert referral.status == ReferralStatus.PENDING.value
    assert referral.referrer.full_name == "Ana"
    assert referral.referred_to.full_name == "Bruno"
    assert len(referral.status_history) == 1
    entry = referral.status_history[0]
    assert entry.from_status is None
    assert entry.to_status == ReferralStatus.PENDING.value
    assert entry.changed_by == ana.user_id

    event, recipient, _ = notifier.sent[-1]
    assert (event, recipient) == ("referral_received", bruno.email)


async def test_self_referral_is_bad_request(referral_service, pair):
    ana, _ = pair
    with pytest.raises(BadRequestError, match="yourself"):
        await referral_service.create(ana.id, _referral(ana.id))


async def test_self_referral_by_inactive_member_is_still_bad_request(
    referral_service, member_service, pair,
):
    ana, _ = pair
    await member_service.deactivate(ana.id)
    with pytest.raises(BadRequestError):
        await referral_service.create(ana.id, _referral(ana.id))


async def test_inactive_referrer_is_forbidden(referral_service, member_service, pair):
    ana, bruno = pair
    await member_service.deactivate(ana.id)
    with pytest.raises(ForbiddenError):
        await referral_service.create(ana.id, _referral(bruno.id))


async def test_inactive_recipient_is_bad_request(referral_service, member_service, pair):
    ana, bruno = pair
    await member_service.deactivate(bruno.id)
    with pytest.raises(BadRequestError, match="Recipient"):
        await referral_service.create(ana.id, _referral(bruno.id))


async def test_unknown_recipient_is_bad_request(referral_service, pair):
    ana, _ = pair
    with pytest.raises(BadRequestError):
        await referral_service.create(ana.id, _referral(uuid4()))


# ─── update_status ───────────────────────────────────────────────

async def test_recipient_moves_status_and_history_is_newest_first(
    referral_service, pair, notifier,
):
    ana, bruno = pair
    referral = await referral_service.create(ana.id, _referral(bruno.id))
    await referral_service.update_status(
        bruno.id, referral.id,
        ReferralStatusUpdate(status=ReferralStatus.CONTACTED, feedback="Called today"),
    )
    updated = await referral_service.update_status(
        bruno.id, referral.id, ReferralStatusUpdate(status=ReferralStatus.NEGOTIATING),
    )

    assert updated.status == ReferralStatus.NEGOTIATING.value
    assert updated.feedback == "Called today"
    assert [h.to_status for h in updated.status_history] == [
        "NEGOTIATING", "CONTACTED", "PENDING",
    ]
    assert updated.status_history[1].notes == "Called today"
    assert updated.status_history[0].changed_by == bruno.user_id

    event, recipient, details = notifier.sent[-1]
    assert (event, recipient) == ("referral_status_changed", ana.email)
    assert details["from_status"] == "CONTACTED"


async def test_referrer_cannot_change_status(referral_service, pair):
    ana, bruno = pair
    referral = await referral_service.create(ana.id, _referral(bruno.id))
    with pytest.raises(ForbiddenError):
        await referral_service.update_status(
            ana.id, referral.id, ReferralStatusUpdate(status=ReferralStatus.CONTACTED),
        )


async def test_closed_without_value_is_bad_request(referral_service, pair):
    ana, bruno = pair
    referral = await referral_service.create(ana.id, _referral(bruno.id))
    with pytest.raises(BadRequestError, match="closedValue"):
        await referral_service.update_status(
            bruno.id, referral.id, ReferralStatusUpdate(status=ReferralStatus.CLOSED),
        )


async def test_closed_with_zero_value_stamps_closed_at(referral_service, pair):
    ana, bruno = pair
    referral = await referral_service.create(ana.id, _referral(bruno.id))
    closed = await referral_service.update_status(
        bruno.id, referral.id,
        ReferralStatusUpdate(status=ReferralStatus.CLOSED, closed_value=0),
    )
    assert closed.status == ReferralStatus.CLOSED.value
    assert closed.closed_value == 0
    assert closed.closed_at is not None


async def test_any_status_may_follow_closed(referral_service, pair):
    ana, bruno = pair
    referral = await referral_service.create(ana.id, _referral(bruno.id))
    await referral_service.update_status(
        bruno.id, referral.id,
        ReferralStatusUpdate(status=ReferralStatus.CLOSED, closed_value=300),
    )
    reopened = await referral_service.update_status(
        bruno.id, referral.id, ReferralStatusUpdate(status=ReferralStatus.PENDING),
    )
    assert reopened.status == ReferralStatus.PENDING.value
    assert reopened.closed_at is not None


async def test_update_unknown_referral_is_not_found(referral_service, pair):
    _, bruno = pair
    with pytest.raises(NotFoundError):
        await referral_service.update_status(
            bruno.id, uuid4(), ReferralStatusUpdate(status=ReferralStatus.LOST),
        )


# ─── get / list / statistics ─────────────────────────────────────

async def test_outsider_cannot_view(referral_service, member_factory, pair):
    ana, bruno = pair
    carla = await member_factory("Carla")
    referral = await referral_service.create(ana.id, _referral(bruno.id))
    assert (await referral_service.get(ana.id, referral.id)).id == referral.id
    with pytest.raises(ForbiddenError):
        await referral_service.get(carla.id, referral.id)


async def test_list_by_direction_and_statistics(referral_service, pair):
    ana, bruno = pair
    first = await referral_service.create(bruno.id, _referral(ana.id, "Client One"))
    await referral_service.create(bruno.id, _referral(ana.id, "Client Two"))
    await referral_service.create(ana.id, _referral(bruno.id, "Client Three"))
    await referral_service.update_status(
        ana.id, first.id,
        ReferralStatusUpdate(status=ReferralStatus.CLOSED, closed_value=2500.5),
    )

    received, statistics, pagination = await referral_service.list_referrals(
        ana.id, page=1, limit=20, direction=ReferralDirection.RECEIVED,
    )
    assert {r.client_name for r in received} == {"Client One", "Client Two"}
    assert pagination["total_items"] == 2
    assert statistics == {
        "total_given": 1,
        "total_received": 2,
        "pending_received": 1,
        "closed_received": 1,
        "total_value_closed": 2500.5,
    }

    everything, _, _ = await referral_service.list_referrals(ana.id, page=1, limit=20)
    assert len(everything) == 3

    found, _, _ = await referral_service.list_referrals(
        ana.id, page=1, limit=20, search="three",
    )
    assert [r.client_name for r in found] == ["Client Three"]


async def test_list_filters_by_status(referral_service, pair):
    ana, bruno = pair
    referral = await referral_service.create(ana.id, _referral(bruno.id, "Lost Lead"))
    await referral_service.create(ana.id, _referral(bruno.id, "Open Lead"))
    await referral_service.update_status(
        bruno.id, referral.id, ReferralStatusUpdate(status=ReferralStatus.LOST),
    )
    rows, _, _ = await referral_service.list_referrals(
        bruno.id, page=1, limit=20, status=ReferralStatus.LOST,
    )
    assert [r.client_name for r in rows] == ["Lost Lead"]
