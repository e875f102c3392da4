"""Referral Service — create, list, inspect and move referrals through their status workflow.

Invariants:
    - Only ACTIVE members refer, and only to another ACTIVE member (never themselves)
    - Only the recipient changes status; CLOSED requires a closed value
    - Every status change appends one history row (creation included: None -> PENDING)
    - History rows are kept newest first in memory, matching the DB ordering
    - Statistics come from one GROUP BY over received referrals

Design Decisions:
    - Check order mirrors core/enforce_referral.py: self -> referrer -> recipient
    - Relationship objects (referrer, referred_to) assigned directly on create:
      the response embeds both without a lazy load in async context
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from netgroup.core.domain_types import (
    MemberId, ReferralDirection, ReferralId, ReferralStatus, utc_now,
)
from netgroup.core.enforce_referral import (
    check_can_update_status, check_can_view, check_closed_value,
    check_not_self_referral, check_recipient_active, check_referrer_active,
    resolve_closed_at,
)
from netgroup.core.errors import NotFoundError
from netgroup.core.pagination import build_pagination, page_offset
from netgroup.core.referral_stats import ReceivedBucket, summarize_referral_statistics
from netgroup.core.repository_protocols import NotificationEvent, NotificationSink
from netgroup.models.business_referral import BusinessReferral
from netgroup.models.member import Member
from netgroup.models.referral_status_history import ReferralStatusHistory
from netgroup.schemas.referral import ReferralCreate, ReferralStatusUpdate
from netgroup.services.notifications import dispatch_notification

logger = logging.getLogger(__name__)


class ReferralService:
    """Referral workflow on behalf of an authenticated member."""

    def __init__(self, db: AsyncSession, notifier: NotificationSink):
        self.db = db
        self.notifier = notifier

    async def create(self, referrer_id: MemberId, data: ReferralCreate) -> BusinessReferral:
        check_not_self_referral(referrer_id, data.referred_to_id)
        referrer = await self.db.get(Member, referrer_id)
        check_referrer_active(referrer.status if referrer else None)
        recipient = await self.db.get(Member, data.referred_to_id)
        check_recipient_active(recipient.status if recipient else None)

        referral = BusinessReferral(
            referrer=referrer,
            referred_to=recipient,
            status=ReferralStatus.PENDING.value,
            **data.model_dump(exclude={"referred_to_id"}),
        )
        referral.status_history.append(ReferralStatusHistory(
            from_status=None,
            to_status=ReferralStatus.PENDING.value,
            changed_by=referrer.user_id,
        ))
        self.db.add(referral)
        await self.db.commit()

        logger.info(
            f"Referral created for client '{referral.client_name}'",
            extra={"referral_id": str(referral.id), "member_id": str(referrer_id)},
        )
        dispatch_notification(
            self.notifier.notify_status_change,
            referral, recipient, NotificationEvent.REFERRAL_RECEIVED,
        )
        return referral

    async def list_referrals(
        self,
        member_id: MemberId,
        page: int,
        limit: int,
        direction: ReferralDirection = ReferralDirection.ALL,
        status: ReferralStatus | None = None,
        search: str | None = None,
    ) -> tuple[list[BusinessReferral], dict, dict]:
        query = select(BusinessReferral)
        if direction == ReferralDirection.GIVEN:
            query = query.where(BusinessReferral.referrer_id == member_id)
        elif direction == ReferralDirection.RECEIVED:
            query = query.where(BusinessReferral.referred_to_id == member_id)
        else:
            query = query.where(
                (BusinessReferral.referrer_id == member_id)
                | (BusinessReferral.referred_to_id == member_id),
            )
        if status is not None:
            query = query.where(BusinessReferral.status == status.value)
        if search:
            query = query.where(
                BusinessReferral.client_name.ilike(f"%{search.strip()}%"),
            )

        total = await self.db.scalar(
            select(func.count()).select_from(query.subquery()),
        )
        result = await self.db.execute(
            query.order_by(BusinessReferral.created_at.desc(), BusinessReferral.id)
            .offset(page_offset(page, limit))
            .limit(limit),
        )
        referrals = list(result.scalars().all())
        statistics = await self.calculate_statistics(member_id)
        return referrals, statistics, build_pagination(page, limit, total or 0)

    async def get(self, member_id: MemberId, referral_id: ReferralId) -> BusinessReferral:
        referral = await self._get_or_404(referral_id)
        check_can_view(member_id, referral.referrer_id, referral.referred_to_id)
        return referral

    async def update_status(
        self, member_id: MemberId, referral_id: ReferralId, data: ReferralStatusUpdate,
    ) -> BusinessReferral:
        referral = await self._get_or_404(referral_id)
        check_can_update_status(member_id, referral.referred_to_id)
        check_closed_value(data.status, data.closed_value)

        previous = referral.status
        referral.status = data.status.value
        referral.closed_at = resolve_closed_at(
            data.status, referral.closed_at, utc_now(),
        )
        if data.feedback is not None:
            referral.feedback = data.feedback
        if data.closed_value is not None:
            referral.closed_value = data.closed_value
        referral.status_history.insert(0, ReferralStatusHistory(
            from_status=previous,
            to_status=data.status.value,
            changed_by=referral.referred_to.user_id,
            notes=data.feedback,
        ))
        await self.db.commit()

        logger.info(
            f"Referral status {previous} -> {referral.status}",
            extra={"referral_id": str(referral.id), "member_id": str(member_id)},
        )
        dispatch_notification(
            self.notifier.notify_status_change,
            referral, referral.referrer, NotificationEvent.REFERRAL_STATUS_CHANGED,
            from_status=previous,
        )
        return referral

    async def calculate_statistics(self, member_id: MemberId) -> dict:
        total_given = await self.db.scalar(
            select(func.count()).where(BusinessReferral.referrer_id == member_id),
        )
        rows = await self.db.execute(
            select(
                BusinessReferral.status,
                func.count(),
                func.coalesce(func.sum(BusinessReferral.closed_value), 0),
            )
            .where(BusinessReferral.referred_to_id == member_id)
            .group_by(BusinessReferral.status),
        )
        buckets = [
            ReceivedBucket(status=status, count=count, closed_value_sum=float(value or 0))
            for status, count, value in rows.all()
        ]
        return summarize_referral_statistics(total_given or 0, buckets)

    async def _get_or_404(self, referral_id: ReferralId) -> BusinessReferral:
        referral = await self.db.get(BusinessReferral, referral_id)
        if referral is None:
            raise NotFoundError("Referral", str(referral_id))
        return referral
