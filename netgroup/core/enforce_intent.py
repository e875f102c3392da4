"""Intent Lifecycle Enforcement — pure checks for review and invite-token redemption.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Raise a NetgroupError subclass on violation, return None on success
    - check_token_redeemable applies its rules in a fixed order — first error wins:
      status -> expiry -> already used

Design Decisions:
    - Pure functions over service methods: the same rules back validate_token,
      complete_registration and admin member creation without duplicating them
    - `now` passed in explicitly: deterministic tests without clock patching
"""

from datetime import datetime

from netgroup.core.domain_types import IntentStatus, as_utc
from netgroup.core.errors import BadRequestError, ConflictError


def check_reviewable(status: str, action: str) -> None:
    """Only PENDING intents may be approved or rejected."""
    if status != IntentStatus.PENDING:
        raise BadRequestError(
            f"Only pending intents can be {action} (current status: {status})",
        )


def check_token_not_expired(expires_at: datetime | None, now: datetime) -> None:
    if expires_at is None or as_utc(expires_at) < now:
        raise BadRequestError("Invite token has expired")


def check_token_redeemable(
    status: str,
    expires_at: datetime | None,
    already_used: bool,
    now: datetime,
) -> None:
    """Rules for the public token flow (validate_token / complete_registration)."""
    if status != IntentStatus.APPROVED:
        raise BadRequestError("This membership intent has not been approved")
    check_token_not_expired(expires_at, now)
    if already_used:
        raise BadRequestError("This invite has already been used")


def check_intent_redeemable_by_admin(
    status: str,
    expires_at: datetime | None,
    already_used: bool,
    now: datetime,
) -> None:
    """Admin-initiated signup: same rules, but reuse is a uniqueness conflict."""
    if status != IntentStatus.APPROVED:
        raise BadRequestError("This membership intent has not been approved")
    check_token_not_expired(expires_at, now)
    if already_used:
        raise ConflictError("This invite has already been used")


def check_email_matches(intent_email: str, submitted_email: str) -> None:
    """A token may only register the identity it was issued to."""
    if intent_email.strip().lower() != submitted_email.strip().lower():
        raise BadRequestError("The email provided does not match the invite")
