"""Dashboard Service — read-only rollup of members, referrals, thank-yous and meetings.

Invariants:
    - Never writes
    - Month/week windows are UTC calendar windows (core/dashboard_stats.py)
    - Empty directory + demo fallback enabled -> fixed demo dataset, no other queries

Design Decisions:
    - One aggregate query per table (conditional SUMs) rather than a query per metric
"""

import logging
from datetime import datetime

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from netgroup.core.dashboard_stats import (
    DashboardCounts, build_dashboard_stats, build_demo_stats,
    month_window, project_next_meeting, week_window,
)
from netgroup.core.domain_types import (
    ATTENDED_STATUSES, MemberStatus, ReferralStatus, utc_now,
)
from netgroup.models.business_referral import BusinessReferral
from netgroup.models.engagement import Meeting, MeetingAttendance, ThankYou
from netgroup.models.member import Member

logger = logging.getLogger(__name__)


def _count_if(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def _sum_if(condition, column):
    return func.coalesce(func.sum(case((condition, column), else_=0)), 0)


class DashboardService:

    def __init__(self, db: AsyncSession, demo_fallback: bool = True):
        self.db = db
        self.demo_fallback = demo_fallback

    async def get_stats(self, now: datetime | None = None) -> dict:
        now = now or utc_now()
        month = month_window(now)
        week = week_window(now)

        total_members, active_members, new_members = (await self.db.execute(
            select(
                func.count(),
                _count_if(Member.status == MemberStatus.ACTIVE.value),
                _count_if(
                    (Member.created_at >= month.start) & (Member.created_at < month.end),
                ),
            ),
        )).one()
        if total_members == 0 and self.demo_fallback:
            logger.info("Dashboard serving demo dataset (no members yet)")
            return build_demo_stats(now)

        closed = BusinessReferral.status == ReferralStatus.CLOSED.value
        (
            total_referrals, pending, closed_count, referrals_this_month,
            total_value, value_this_month,
        ) = (await self.db.execute(
            select(
                func.count(),
                _count_if(BusinessReferral.status == ReferralStatus.PENDING.value),
                _count_if(closed),
                _count_if(
                    (BusinessReferral.created_at >= month.start)
                    & (BusinessReferral.created_at < month.end),
                ),
                _sum_if(closed, BusinessReferral.closed_value),
                _sum_if(
                    closed
                    & (BusinessReferral.closed_at >= month.start)
                    & (BusinessReferral.closed_at < month.end),
                    BusinessReferral.closed_value,
                ),
            ),
        )).one()

        total_thanks, thanks_month, thanks_week = (await self.db.execute(
            select(
                func.count(),
                _count_if(
                    (ThankYou.created_at >= month.start) & (ThankYou.created_at < month.end),
                ),
                _count_if(
                    (ThankYou.created_at >= week.start) & (ThankYou.created_at < week.end),
                ),
            ),
        )).one()

        meetings_this_month = await self.db.scalar(
            select(func.count()).where(
                Meeting.scheduled_at >= month.start, Meeting.scheduled_at < month.end,
            ),
        )
        attendance_total, attended = (await self.db.execute(
            select(
                func.count(),
                _count_if(
                    MeetingAttendance.status.in_([s.value for s in ATTENDED_STATUSES]),
                ),
            ),
        )).one()

        upcoming = (await self.db.execute(
            select(Meeting.scheduled_at, Meeting.title)
            .where(Meeting.scheduled_at > now)
            .order_by(Meeting.scheduled_at.asc())
            .limit(1),
        )).first()
        next_meeting = project_next_meeting(
            now, *(upcoming if upcoming is not None else ()),
        )

        counts = DashboardCounts(
            total_members=total_members,
            active_members=active_members,
            new_members_this_month=new_members,
            total_referrals=total_referrals,
            pending_referrals=pending,
            closed_referrals=closed_count,
            referrals_this_month=referrals_this_month,
            total_referral_value=total_value or 0,
            referral_value_this_month=value_this_month or 0,
            total_thank_yous=total_thanks,
            thank_yous_this_month=thanks_month,
            thank_yous_this_week=thanks_week,
            meetings_this_month=meetings_this_month or 0,
            attended_records=attended,
            attendance_records=attendance_total,
        )
        return build_dashboard_stats(counts, next_meeting)
