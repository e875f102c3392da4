"""Referral Permission & Transition Enforcement — pure checks for the referral workflow.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Only the recipient (referred_to_id) may change a referral's status
    - CLOSED requires a closed value; 0 is a valid value, None is not
    - Any status may follow any other (no forward-only ordering enforced)

Design Decisions:
    - Self-referral checked before any member lookup: it fails with BadRequest
      regardless of either member's status
    - closed_at decided here so the service never duplicates the CLOSED rule
"""

from datetime import datetime

from netgroup.core.domain_types import MemberId, MemberStatus, ReferralStatus
from netgroup.core.errors import BadRequestError, ForbiddenError


def check_referrer_active(referrer_status: str | None) -> None:
    """Referrer must exist and be ACTIVE. None means the member was not found."""
    if referrer_status != MemberStatus.ACTIVE:
        raise ForbiddenError("Only active members can create referrals")


def check_not_self_referral(referrer_id: MemberId, referred_to_id: MemberId) -> None:
    if referrer_id == referred_to_id:
        raise BadRequestError("You cannot create a referral for yourself")


def check_recipient_active(recipient_status: str | None) -> None:
    if recipient_status != MemberStatus.ACTIVE:
        raise BadRequestError("Recipient member not found or inactive")


def check_can_view(
    member_id: MemberId, referrer_id: MemberId, referred_to_id: MemberId,
) -> None:
    if member_id not in (referrer_id, referred_to_id):
        raise ForbiddenError("You do not have permission to view this referral")


def check_can_update_status(member_id: MemberId, referred_to_id: MemberId) -> None:
    if member_id != referred_to_id:
        raise ForbiddenError(
            "Only the member who received the referral can update its status",
        )


def check_closed_value(new_status: str, closed_value: float | None) -> None:
    if new_status == ReferralStatus.CLOSED and closed_value is None:
        raise BadRequestError("closedValue is required when status is CLOSED")


def resolve_closed_at(
    new_status: str, current_closed_at: datetime | None, now: datetime,
) -> datetime | None:
    """closed_at is stamped only on a transition to CLOSED; otherwise kept as-is."""
    if new_status == ReferralStatus.CLOSED:
        return now
    return current_closed_at
