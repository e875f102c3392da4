"""Dashboard Schemas — shape of GET /dashboard/stats."""

from netgroup.schemas.common import ApiModel


class MembersStats(ApiModel):
    total: int
    active: int
    inactive: int
    new_this_month: int


class MonthlyReferrals(ApiModel):
    count: int
    value: float


class ReferralsStats(ApiModel):
    total: int
    pending: int
    closed: int
    total_value: float
    this_month: MonthlyReferrals


class ThankYouStats(ApiModel):
    total: int
    this_month: int
    this_week: int


class NextMeeting(ApiModel):
    date: str
    title: str


class MeetingsStats(ApiModel):
    this_month: int
    average_attendance: float
    next_meeting: NextMeeting | None = None


class DashboardStats(ApiModel):
    members: MembersStats
    referrals: ReferralsStats
    thank_yous: ThankYouStats
    meetings: MeetingsStats
