"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Outbound side effects (notifications) accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Notification calls are synchronous and fire-and-forget: callers wrap them
      with dispatch_notification so a failing sink never blocks the operation
"""

from enum import Enum
from typing import Protocol
from uuid import UUID


class NotificationEvent(str, Enum):
    INTENT_RECEIVED = "intent_received"
    INVITE_ISSUED = "invite_issued"
    INTENT_REJECTED = "intent_rejected"
    REGISTRATION_COMPLETED = "registration_completed"
    MEMBER_WELCOME = "member_welcome"
    MEMBER_DEACTIVATED = "member_deactivated"
    REFERRAL_RECEIVED = "referral_received"
    REFERRAL_STATUS_CHANGED = "referral_status_changed"


class IntentLike(Protocol):
    """Structural contract for intents handed to a notification sink."""
    id: UUID
    full_name: str
    email: str


class MemberLike(Protocol):
    id: UUID
    full_name: str
    email: str


class ReferralLike(Protocol):
    id: UUID
    client_name: str
    status: str


class NotificationSink(Protocol):
    """Outbound notification channel (email, chat, log) — implemented by shell."""

    def notify_candidate(
        self, intent: IntentLike, event: NotificationEvent, **details: object,
    ) -> None: ...

    def notify_member(
        self, member: MemberLike, event: NotificationEvent, **details: object,
    ) -> None: ...

    def notify_status_change(
        self,
        referral: ReferralLike,
        recipient: MemberLike,
        event: NotificationEvent,
        **details: object,
    ) -> None: ...
