"""Referral Statistics — pure rollup of a member's referral counts and closed value.

Invariants:
    - totalReceived == sum of per-status received counts (every status counted once)
    - totalValueClosed only sums CLOSED referrals received by the member
    - Never raises — missing statuses default to 0

Design Decisions:
    - Service fetches one GROUP BY status row set; this function shapes it, so the
      sum invariant holds by construction rather than by five independent COUNTs
"""

from dataclasses import dataclass

from netgroup.core.domain_types import ReferralStatus


@dataclass(frozen=True)
class ReceivedBucket:
    """Referrals received by a member in a single status."""
    status: str
    count: int
    closed_value_sum: float = 0.0


def summarize_referral_statistics(
    total_given: int, received: list[ReceivedBucket],
) -> dict:
    """Build the statistics block returned alongside referral listings."""
    by_status = {b.status: b for b in received}
    pending = by_status.get(ReferralStatus.PENDING.value)
    closed = by_status.get(ReferralStatus.CLOSED.value)
    return {
        "total_given": total_given,
        "total_received": sum(b.count for b in received),
        "pending_received": pending.count if pending else 0,
        "closed_received": closed.count if closed else 0,
        "total_value_closed": float(closed.closed_value_sum) if closed else 0.0,
    }
