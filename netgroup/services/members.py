"""Member Service — admin-initiated signup, directory listing, profile upkeep, soft delete.

Invariants:
    - create applies the invite preconditions in order:
      intent exists -> APPROVED -> not expired -> not used -> email matches intent
      -> email free -> CPF free
    - Email and intent are immutable after creation
    - Address updates merge field by field: omitted sub-fields keep their values
    - deactivate is a soft delete and idempotent: an INACTIVE member keeps its
      original end date and is not notified twice
    - Statistics are recomputed on every read (no cached counters)

Design Decisions:
    - Directory stats fetched with GROUP BY over the page's member ids:
      three queries per page instead of three per member
    - Temporary password generated here, never returned: the member resets it
"""

import logging

from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from netgroup.core.domain_types import (
    ATTENDED_STATUSES, MemberId, MemberStatus, OneOnOneStatus, ReferralStatus, utc_now,
)
from netgroup.core.enforce_intent import (
    check_email_matches, check_intent_redeemable_by_admin,
)
from netgroup.core.errors import ConflictError, NotFoundError
from netgroup.core.member_stats import build_directory_stats, build_member_statistics
from netgroup.core.pagination import build_pagination, page_offset
from netgroup.core.repository_protocols import NotificationEvent, NotificationSink
from netgroup.infrastructure.security import generate_temporary_password
from netgroup.models.business_referral import BusinessReferral
from netgroup.models.engagement import MeetingAttendance, OneOnOneMeeting
from netgroup.models.member import Member
from netgroup.models.membership_intent import MembershipIntent
from netgroup.schemas.member import MemberCreate, MemberUpdate
from netgroup.services.notifications import dispatch_notification
from netgroup.services.registration import (
    check_identity_available, create_member_account,
)

logger = logging.getLogger(__name__)

_CLOSED = ReferralStatus.CLOSED.value

# Non-nullable columns: an explicit null in a patch leaves them unchanged
_REQUIRED_FIELDS = {"full_name", "status"}


class MemberService:
    """Member directory operations (admin surface)."""

    def __init__(self, db: AsyncSession, notifier: NotificationSink):
        self.db = db
        self.notifier = notifier

    async def create(self, data: MemberCreate) -> Member:
        intent = await self.db.get(MembershipIntent, data.intent_id)
        if intent is None:
            raise NotFoundError("MembershipIntent", str(data.intent_id))
        used = await self.db.execute(
            select(Member.id).where(Member.intent_id == intent.id),
        )
        check_intent_redeemable_by_admin(
            intent.status, intent.token_expires_at, used.first() is not None, utc_now(),
        )
        check_email_matches(intent.email, data.email)
        await check_identity_available(self.db, data.email, data.cpf)

        _, member = await create_member_account(
            self.db, intent.id, data, generate_temporary_password(),
        )
        logger.info(
            f"Member created by admin: {member.email}",
            extra={"member_id": str(member.id), "intent_id": str(intent.id)},
        )
        dispatch_notification(
            self.notifier.notify_member, member, NotificationEvent.MEMBER_WELCOME,
        )
        return member

    async def list_members(
        self,
        page: int,
        limit: int,
        status: MemberStatus | None = None,
        industry: str | None = None,
        search: str | None = None,
    ) -> tuple[list[tuple[Member, dict]], dict]:
        query = select(Member)
        if status is not None:
            query = query.where(Member.status == status.value)
        if industry:
            query = query.where(Member.industry.ilike(f"%{industry.strip()}%"))
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Member.full_name.ilike(pattern),
                Member.email.ilike(pattern),
                Member.company.ilike(pattern),
            ))

        total = await self.db.scalar(
            select(func.count()).select_from(query.subquery()),
        )
        result = await self.db.execute(
            query.order_by(Member.created_at.desc(), Member.id)
            .offset(page_offset(page, limit))
            .limit(limit),
        )
        members = list(result.scalars().all())
        stats = await self._directory_stats([m.id for m in members])
        rows = [(m, stats[m.id]) for m in members]
        return rows, build_pagination(page, limit, total or 0)

    async def get(self, member_id: MemberId) -> Member:
        member = await self.db.get(Member, member_id)
        if member is None:
            raise NotFoundError("Member", str(member_id))
        return member

    async def get_with_statistics(self, member_id: MemberId) -> tuple[Member, dict]:
        member = await self.get(member_id)
        return member, await self._member_statistics(member_id)

    async def update(self, member_id: MemberId, data: MemberUpdate) -> Member:
        member = await self.get(member_id)
        patch = data.model_dump(exclude_unset=True, exclude={"address"})

        cpf = patch.get("cpf")
        if cpf:
            taken = await self.db.execute(
                select(Member.id).where(Member.cpf == cpf, Member.id != member_id),
            )
            if taken.first() is not None:
                raise ConflictError("This CPF is already registered")

        for field, value in patch.items():
            if value is None and field in _REQUIRED_FIELDS:
                continue
            if field == "status":
                value = value.value
            setattr(member, field, value)
        if data.address is not None:
            for field, value in data.address.model_dump(exclude_unset=True).items():
                setattr(member, f"address_{field}", value)

        await self.db.commit()
        logger.info("Member updated", extra={"member_id": str(member.id)})
        return member

    async def deactivate(self, member_id: MemberId) -> Member:
        member = await self.get(member_id)
        if member.status == MemberStatus.INACTIVE.value:
            return member

        member.status = MemberStatus.INACTIVE.value
        member.membership_end_date = utc_now()
        await self.db.commit()
        logger.info("Member deactivated", extra={"member_id": str(member.id)})
        dispatch_notification(
            self.notifier.notify_member, member, NotificationEvent.MEMBER_DEACTIVATED,
        )
        return member

    # ─── Statistics ─────────────────────────────────────────────

    async def _member_statistics(self, member_id: MemberId) -> dict:
        given = await self.db.scalar(
            select(func.count()).where(BusinessReferral.referrer_id == member_id),
        )
        received = await self.db.execute(
            select(
                func.count(),
                func.sum(case((BusinessReferral.status == _CLOSED, 1), else_=0)),
                func.sum(case(
                    (BusinessReferral.status == _CLOSED, BusinessReferral.closed_value),
                    else_=0,
                )),
            ).where(BusinessReferral.referred_to_id == member_id),
        )
        received_count, closed_count, closed_value = received.one()
        attendance = await self.db.execute(
            select(
                func.count(),
                func.sum(case(
                    (MeetingAttendance.status.in_([s.value for s in ATTENDED_STATUSES]), 1),
                    else_=0,
                )),
            ).where(MeetingAttendance.member_id == member_id),
        )
        attendance_total, attended = attendance.one()
        one_on_ones = await self.db.scalar(
            select(func.count()).where(
                or_(
                    OneOnOneMeeting.member1_id == member_id,
                    OneOnOneMeeting.member2_id == member_id,
                ),
                OneOnOneMeeting.status == OneOnOneStatus.COMPLETED.value,
            ),
        )
        return build_member_statistics(
            referrals_given=given or 0,
            referrals_received=received_count or 0,
            business_closed=closed_count or 0,
            total_business_value=closed_value,
            meetings_attended=attended or 0,
            meetings_total=attendance_total or 0,
            one_on_one_meetings=one_on_ones or 0,
        )

    async def _directory_stats(self, member_ids: list[MemberId]) -> dict[MemberId, dict]:
        if not member_ids:
            return {}
        given_rows = await self.db.execute(
            select(BusinessReferral.referrer_id, func.count())
            .where(BusinessReferral.referrer_id.in_(member_ids))
            .group_by(BusinessReferral.referrer_id),
        )
        given = {member_id: count for member_id, count in given_rows.all()}
        received_rows = await self.db.execute(
            select(
                BusinessReferral.referred_to_id,
                func.count(),
                func.sum(case((BusinessReferral.status == _CLOSED, 1), else_=0)),
                func.sum(case(
                    (BusinessReferral.status == _CLOSED, BusinessReferral.closed_value),
                    else_=0,
                )),
            )
            .where(BusinessReferral.referred_to_id.in_(member_ids))
            .group_by(BusinessReferral.referred_to_id),
        )
        received = {row[0]: row[1:] for row in received_rows.all()}

        stats = {}
        for member_id in member_ids:
            received_count, closed_count, closed_value = received.get(
                member_id, (0, 0, 0),
            )
            stats[member_id] = build_directory_stats(
                referrals_given=given.get(member_id, 0),
                referrals_received=received_count or 0,
                business_closed=closed_count or 0,
                total_value=closed_value,
            )
        return stats
