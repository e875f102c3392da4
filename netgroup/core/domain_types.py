"""Domain Types — identity types and state enums shared across the codebase.

Invariants:
    - IntentId, MemberId, ReferralId, UserId wrap UUIDs; service and rule
      signatures take these, never a bare UUID
    - All valid states encoded as Enums — no raw string matching
    - Enum values match the DB `status`/`role` columns exactly

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from datetime import datetime, timezone
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

IntentId = NewType("IntentId", UUID)
MemberId = NewType("MemberId", UUID)
ReferralId = NewType("ReferralId", UUID)
UserId = NewType("UserId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class IntentStatus(str, Enum):
    """Membership intent lifecycle: PENDING -> APPROVED | REJECTED."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


# An email may hold at most one intent in these states
ACTIVE_INTENT_STATUSES = (IntentStatus.PENDING, IntentStatus.APPROVED)


class MemberStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class ReferralStatus(str, Enum):
    """Referral lifecycle states. Only CLOSED carries extra requirements."""
    PENDING = "PENDING"
    CONTACTED = "CONTACTED"
    NEGOTIATING = "NEGOTIATING"
    CLOSED = "CLOSED"
    LOST = "LOST"
    CANCELLED = "CANCELLED"


class ReferralDirection(str, Enum):
    """Which side of a referral the listing member is on."""
    GIVEN = "given"
    RECEIVED = "received"
    ALL = "all"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"


# Attendance rows that count as "attended"
ATTENDED_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


class OneOnOneStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class IntentSortField(str, Enum):
    """Sortable intent columns, keyed by their public (camelCase) names."""
    CREATED_AT = "createdAt"
    FULL_NAME = "fullName"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ─── Time ────────────────────────────────────────────────────────

def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize DB datetimes: some drivers (SQLite) return naive values."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
