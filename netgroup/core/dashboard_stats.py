"""Dashboard Stats — pure shaping of the admin dashboard rollup.

Invariants:
    - All inputs are plain counts/sums already fetched by the shell (no IO, no DB)
    - Calendar windows are UTC: month = first day 00:00 .. first day of next month,
      week = Monday 00:00 .. next Monday
    - build_demo_stats is presentation-only — never used when members exist

Design Decisions:
    - Half-open [start, end) windows: no "last millisecond of the month" edge cases
    - Next meeting falls back to a +7 day projection when nothing is scheduled
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

NEXT_MEETING_PLACEHOLDER_TITLE = "Next weekly meeting"
PROJECTION_DAYS = 7


@dataclass(frozen=True)
class Window:
    start: datetime
    end: datetime


def month_window(now: datetime) -> Window:
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return Window(start, end)


def week_window(now: datetime) -> Window:
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start = midnight - timedelta(days=midnight.weekday())
    return Window(start, start + timedelta(days=7))


def project_next_meeting(
    now: datetime,
    scheduled_at: datetime | None = None,
    title: str | None = None,
) -> dict:
    """Earliest upcoming meeting, or a placeholder one week out."""
    if scheduled_at is not None:
        return {"date": scheduled_at.date().isoformat(), "title": title or ""}
    projected = now + timedelta(days=PROJECTION_DAYS)
    return {
        "date": projected.date().isoformat(),
        "title": NEXT_MEETING_PLACEHOLDER_TITLE,
    }


@dataclass(frozen=True)
class DashboardCounts:
    """Raw numbers fetched by DashboardService."""
    total_members: int
    active_members: int
    new_members_this_month: int
    total_referrals: int
    pending_referrals: int
    closed_referrals: int
    referrals_this_month: int
    total_referral_value: float
    referral_value_this_month: float
    total_thank_yous: int
    thank_yous_this_month: int
    thank_yous_this_week: int
    meetings_this_month: int
    attended_records: int
    attendance_records: int


def build_dashboard_stats(counts: DashboardCounts, next_meeting: dict) -> dict:
    average_attendance = (
        counts.attended_records / counts.attendance_records
        if counts.attendance_records else 0.0
    )
    return {
        "members": {
            "total": counts.total_members,
            "active": counts.active_members,
            "inactive": counts.total_members - counts.active_members,
            "new_this_month": counts.new_members_this_month,
        },
        "referrals": {
            "total": counts.total_referrals,
            "pending": counts.pending_referrals,
            "closed": counts.closed_referrals,
            "total_value": float(counts.total_referral_value),
            "this_month": {
                "count": counts.referrals_this_month,
                "value": float(counts.referral_value_this_month),
            },
        },
        "thank_yous": {
            "total": counts.total_thank_yous,
            "this_month": counts.thank_yous_this_month,
            "this_week": counts.thank_yous_this_week,
        },
        "meetings": {
            "this_month": counts.meetings_this_month,
            "average_attendance": round(average_attendance, 2),
            "next_meeting": next_meeting,
        },
    }


def build_demo_stats(now: datetime) -> dict:
    """Fixed illustrative dataset for empty environments (demos, fresh installs)."""
    next_week = now + timedelta(days=PROJECTION_DAYS)
    return {
        "members": {
            "total": 35,
            "active": 33,
            "inactive": 2,
            "new_this_month": 2,
        },
        "referrals": {
            "total": 145,
            "pending": 23,
            "closed": 45,
            "total_value": 1_250_000.0,
            "this_month": {"count": 12, "value": 150_000.0},
        },
        "thank_yous": {"total": 87, "this_month": 12, "this_week": 4},
        "meetings": {
            "this_month": 4,
            "average_attendance": 0.88,
            "next_meeting": {
                "date": next_week.date().isoformat(),
                "title": "Weekly meeting #43",
            },
        },
    }
