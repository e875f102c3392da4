"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Member is the hub: referrals, attendances, one-on-ones and thank-yous reference it

Design Decisions:
    - One file per entity for locality; engagement tables grouped (feed statistics only)
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from netgroup.models.user import User  # noqa: F401
from netgroup.models.membership_intent import MembershipIntent  # noqa: F401
from netgroup.models.member import Member  # noqa: F401
from netgroup.models.business_referral import BusinessReferral  # noqa: F401
from netgroup.models.referral_status_history import ReferralStatusHistory  # noqa: F401
from netgroup.models.engagement import (  # noqa: F401
    Meeting, MeetingAttendance, OneOnOneMeeting, ThankYou,
)
