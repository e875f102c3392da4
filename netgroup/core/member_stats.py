"""Member Stats — pure computation of the per-member engagement block."""


def compute_attendance_rate(attended: int, total_scheduled: int) -> float:
    """attended / scheduled, or 0.0 when the member had no meetings."""
    if total_scheduled <= 0:
        return 0.0
    return attended / total_scheduled


def build_member_statistics(
    *,
    referrals_given: int,
    referrals_received: int,
    business_closed: int,
    total_business_value: float | None,
    meetings_attended: int,
    meetings_total: int,
    one_on_one_meetings: int,
) -> dict:
    return {
        "referrals_given": referrals_given,
        "referrals_received": referrals_received,
        "business_closed": business_closed,
        "total_business_value": float(total_business_value or 0),
        "meetings_attended": meetings_attended,
        "attendance_rate": compute_attendance_rate(meetings_attended, meetings_total),
        "one_on_one_meetings": one_on_one_meetings,
    }


def build_directory_stats(
    *,
    referrals_given: int,
    referrals_received: int,
    business_closed: int,
    total_value: float | None,
) -> dict:
    """Lighter block attached to each row of the member listing."""
    return {
        "referrals_given": referrals_given,
        "referrals_received": referrals_received,
        "business_closed": business_closed,
        "total_value": float(total_value or 0),
    }
