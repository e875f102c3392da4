"""Referral Schemas — creation, status transition and listing payloads.

Invariants:
    - ReferralCreate.description: at least 20 chars
    - estimated_value and closed_value are non-negative when present
    - CLOSED-requires-closed_value is a business rule (core/enforce_referral.py),
      not a schema rule: it must surface as BAD_REQUEST, not VALIDATION_ERROR
"""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from netgroup.core.domain_types import ReferralStatus
from netgroup.schemas.common import ApiModel, Pagination


class ReferralCreate(ApiModel):
    referred_to_id: UUID
    client_name: str = Field(min_length=1, max_length=255)
    client_phone: str | None = Field(None, max_length=50)
    client_email: EmailStr | None = None
    description: str = Field(min_length=20)
    estimated_value: float | None = Field(None, ge=0)


class ReferralStatusUpdate(ApiModel):
    status: ReferralStatus
    feedback: str | None = None
    closed_value: float | None = Field(None, ge=0)


class MemberSummary(ApiModel):
    id: UUID
    full_name: str
    company: str | None = None
    photo_url: str | None = None


class StatusHistoryEntry(ApiModel):
    id: UUID
    from_status: ReferralStatus | None = None
    to_status: ReferralStatus
    changed_by: UUID
    notes: str | None = None
    changed_at: datetime


class ReferralResponse(ApiModel):
    id: UUID
    referrer_id: UUID
    referred_to_id: UUID
    client_name: str
    client_phone: str | None = None
    client_email: str | None = None
    description: str
    estimated_value: float | None = None
    status: ReferralStatus
    feedback: str | None = None
    closed_value: float | None = None
    closed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    referrer: MemberSummary
    referred_to: MemberSummary


class ReferralDetail(ReferralResponse):
    status_history: list[StatusHistoryEntry]


class ReferralStatistics(ApiModel):
    total_given: int
    total_received: int
    pending_received: int
    closed_received: int
    total_value_closed: float


class ReferralPage(ApiModel):
    referrals: list[ReferralResponse]
    statistics: ReferralStatistics
    pagination: Pagination
