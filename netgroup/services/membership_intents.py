"""Membership Intent Service — submission, admin review and invite-token validation.

Invariants:
    - One active (PENDING/APPROVED) intent per email; members cannot re-apply
    - approve/reject only from PENDING (core/enforce_intent.py)
    - Invite tokens are unique: regenerated until no intent holds the same value
    - validate_token is read-only: it never changes intent state
    - Notifications dispatched after commit, failures never propagate

Design Decisions:
    - Service owns the commit: the notification must follow a durable write
    - `now` read once per operation: expiry and review timestamps agree
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from netgroup.core.domain_types import (
    ACTIVE_INTENT_STATUSES, IntentId, IntentSortField, IntentStatus, SortOrder,
    UserId, utc_now,
)
from netgroup.core.enforce_intent import check_reviewable, check_token_redeemable
from netgroup.core.errors import ConflictError, DatabaseError, NotFoundError
from netgroup.core.invite_tokens import compute_token_expiry, generate_invite_token
from netgroup.core.pagination import build_pagination, page_offset
from netgroup.core.repository_protocols import NotificationEvent, NotificationSink
from netgroup.models.member import Member
from netgroup.models.membership_intent import MembershipIntent
from netgroup.schemas.membership_intent import IntentCreate
from netgroup.services.notifications import dispatch_notification

logger = logging.getLogger(__name__)

# Collisions at 256 bits are practically impossible; the bound keeps the loop finite
MAX_TOKEN_ATTEMPTS = 5

_SORT_COLUMNS = {
    IntentSortField.CREATED_AT: MembershipIntent.created_at,
    IntentSortField.FULL_NAME: MembershipIntent.full_name,
}


class MembershipIntentService:
    """Intent lifecycle: PENDING -> APPROVED (token issued) | REJECTED."""

    def __init__(
        self, db: AsyncSession, notifier: NotificationSink, token_ttl_days: int = 7,
    ):
        self.db = db
        self.notifier = notifier
        self.token_ttl_days = token_ttl_days

    async def submit(self, data: IntentCreate) -> MembershipIntent:
        active = await self.db.execute(
            select(MembershipIntent.id).where(
                MembershipIntent.email == data.email,
                MembershipIntent.status.in_(
                    [s.value for s in ACTIVE_INTENT_STATUSES],
                ),
            ),
        )
        if active.first() is not None:
            raise ConflictError(
                "A pending or approved application already exists for this email",
            )
        existing_member = await self.db.execute(
            select(Member.id).where(Member.email == data.email),
        )
        if existing_member.first() is not None:
            raise ConflictError("This email is already registered as a member")

        intent = MembershipIntent(
            **data.model_dump(), status=IntentStatus.PENDING.value,
        )
        self.db.add(intent)
        await self.db.commit()
        logger.info(
            f"Membership intent submitted by {intent.email}",
            extra={"intent_id": str(intent.id)},
        )
        dispatch_notification(
            self.notifier.notify_candidate,
            intent, NotificationEvent.INTENT_RECEIVED,
        )
        return intent

    async def list_intents(
        self,
        page: int,
        limit: int,
        status: IntentStatus | None = None,
        sort_by: IntentSortField = IntentSortField.CREATED_AT,
        order: SortOrder = SortOrder.DESC,
        search: str | None = None,
    ) -> tuple[list[MembershipIntent], dict]:
        query = select(MembershipIntent)
        if status is not None:
            query = query.where(MembershipIntent.status == status.value)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                MembershipIntent.full_name.ilike(pattern),
                MembershipIntent.email.ilike(pattern),
                MembershipIntent.company.ilike(pattern),
            ))

        total = await self.db.scalar(
            select(func.count()).select_from(query.subquery()),
        )
        column = _SORT_COLUMNS[sort_by]
        ordering = column.asc() if order == SortOrder.ASC else column.desc()
        result = await self.db.execute(
            query.order_by(ordering, MembershipIntent.id)
            .offset(page_offset(page, limit))
            .limit(limit),
        )
        return list(result.scalars().all()), build_pagination(page, limit, total or 0)

    async def get(self, intent_id: IntentId) -> MembershipIntent:
        intent = await self.db.get(MembershipIntent, intent_id)
        if intent is None:
            raise NotFoundError("MembershipIntent", str(intent_id))
        return intent

    async def approve(
        self,
        intent_id: IntentId,
        notes: str | None = None,
        reviewer_id: UserId | None = None,
    ) -> MembershipIntent:
        intent = await self.get(intent_id)
        check_reviewable(intent.status, "approved")

        now = utc_now()
        intent.invite_token = await self._unique_token()
        intent.token_expires_at = compute_token_expiry(now, self.token_ttl_days)
        intent.status = IntentStatus.APPROVED.value
        intent.reviewed_at = now
        intent.reviewed_by_id = reviewer_id
        intent.review_notes = notes
        await self.db.commit()

        logger.info(
            f"Membership intent approved, invite expires {intent.token_expires_at.isoformat()}",
            extra={"intent_id": str(intent.id)},
        )
        dispatch_notification(
            self.notifier.notify_candidate,
            intent, NotificationEvent.INVITE_ISSUED,
            invite_token=intent.invite_token,
            expires_at=intent.token_expires_at.isoformat(),
        )
        return intent

    async def reject(
        self,
        intent_id: IntentId,
        reason: str | None = None,
        reviewer_id: UserId | None = None,
    ) -> MembershipIntent:
        intent = await self.get(intent_id)
        check_reviewable(intent.status, "rejected")

        intent.status = IntentStatus.REJECTED.value
        intent.rejection_reason = reason
        intent.reviewed_at = utc_now()
        intent.reviewed_by_id = reviewer_id
        await self.db.commit()

        logger.info(
            "Membership intent rejected", extra={"intent_id": str(intent.id)},
        )
        dispatch_notification(
            self.notifier.notify_candidate,
            intent, NotificationEvent.INTENT_REJECTED, reason=reason,
        )
        return intent

    async def validate_token(self, token: str) -> MembershipIntent:
        """Resolve an invite token to its intent, or raise why it cannot be redeemed."""
        result = await self.db.execute(
            select(MembershipIntent).where(MembershipIntent.invite_token == token),
        )
        intent = result.scalar_one_or_none()
        if intent is None:
            raise NotFoundError("Invite token", token[:8] + "...")
        check_token_redeemable(
            intent.status,
            intent.token_expires_at,
            await self.is_redeemed(intent.id),
            utc_now(),
        )
        return intent

    async def is_redeemed(self, intent_id: IntentId) -> bool:
        result = await self.db.execute(
            select(Member.id).where(Member.intent_id == intent_id),
        )
        return result.first() is not None

    async def _unique_token(self) -> str:
        for _ in range(MAX_TOKEN_ATTEMPTS):
            token = generate_invite_token()
            clash = await self.db.execute(
                select(MembershipIntent.id).where(
                    MembershipIntent.invite_token == token,
                ),
            )
            if clash.first() is None:
                return token
        raise DatabaseError("could not allocate a unique invite token", "approve")
