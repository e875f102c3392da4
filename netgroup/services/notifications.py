"""Notifications — logging sink and fire-and-forget dispatch.

Invariants:
    - dispatch_notification NEVER raises: sink failures are logged at WARNING and dropped
    - Notifications are sent only after the primary operation is committed
    - The invite token is logged only in the INVITE_ISSUED candidate notification

Design Decisions:
    - LoggingNotificationSink stands in for email delivery: the structured log
      record (event, recipient) is what an email worker would consume
    - Synchronous sink calls: log writes are cheap and keep call sites simple
"""

import logging
from collections.abc import Callable

from netgroup.core.repository_protocols import (
    IntentLike, MemberLike, NotificationEvent, ReferralLike,
)

logger = logging.getLogger(__name__)


class LoggingNotificationSink:
    """NotificationSink that writes one structured log record per notification."""

    def notify_candidate(
        self, intent: IntentLike, event: NotificationEvent, **details: object,
    ) -> None:
        logger.info(
            f"Notify candidate {intent.email}: {event.value} {details or ''}".rstrip(),
            extra={
                "event": event.value,
                "recipient": intent.email,
                "intent_id": intent.id,
            },
        )

    def notify_member(
        self, member: MemberLike, event: NotificationEvent, **details: object,
    ) -> None:
        logger.info(
            f"Notify member {member.email}: {event.value} {details or ''}".rstrip(),
            extra={
                "event": event.value,
                "recipient": member.email,
                "member_id": member.id,
            },
        )

    def notify_status_change(
        self,
        referral: ReferralLike,
        recipient: MemberLike,
        event: NotificationEvent,
        **details: object,
    ) -> None:
        logger.info(
            f"Notify {recipient.email}: referral '{referral.client_name}' "
            f"is {referral.status} ({event.value})",
            extra={
                "event": event.value,
                "recipient": recipient.email,
                "referral_id": referral.id,
            },
        )


def dispatch_notification(send: Callable[..., None], *args, **kwargs) -> None:
    """Call a sink method; swallow and log any failure."""
    try:
        send(*args, **kwargs)
    except Exception as e:
        logger.warning(
            f"Notification failed ({getattr(send, '__name__', send)}): {e}",
            exc_info=True,
        )
