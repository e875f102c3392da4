"""Member Schemas — directory create/update payloads and profile responses.

Invariants:
    - MemberUpdate never carries email or intent (identity is immutable)
    - MemberUpdate.address is partial: only provided sub-fields change
    - Responses never include the password hash
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field

from netgroup.core.domain_types import MemberStatus
from netgroup.schemas.common import ApiModel, Address, CPF_PATTERN, Pagination
from netgroup.schemas.membership_intent import ProfileFields


class MemberCreate(ProfileFields):
    """Admin-initiated signup gated by an approved intent."""
    intent_id: UUID


class MemberUpdate(ApiModel):
    full_name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    cpf: str | None = Field(None, pattern=CPF_PATTERN)
    birth_date: date | None = None
    photo_url: str | None = Field(None, max_length=500)
    company: str | None = Field(None, max_length=255)
    position: str | None = Field(None, max_length=100)
    industry: str | None = Field(None, max_length=100)
    business_description: str | None = None
    website: str | None = Field(None, max_length=255)
    linkedin_url: str | None = Field(None, max_length=255)
    status: MemberStatus | None = None
    address: Address | None = None


class MemberStatistics(ApiModel):
    referrals_given: int
    referrals_received: int
    business_closed: int
    total_business_value: float
    meetings_attended: int
    attendance_rate: float
    one_on_one_meetings: int


class DirectoryStats(ApiModel):
    referrals_given: int
    referrals_received: int
    business_closed: int
    total_value: float


class MemberResponse(ApiModel):
    id: UUID
    user_id: UUID
    intent_id: UUID
    full_name: str
    email: str
    phone: str | None = None
    cpf: str | None = None
    birth_date: date | None = None
    photo_url: str | None = None
    company: str | None = None
    position: str | None = None
    industry: str | None = None
    business_description: str | None = None
    website: str | None = None
    linkedin_url: str | None = None
    address: Address
    status: MemberStatus
    membership_start_date: datetime
    membership_end_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
    statistics: MemberStatistics | None = None


class MemberListItem(ApiModel):
    id: UUID
    full_name: str
    email: str
    phone: str | None = None
    company: str | None = None
    position: str | None = None
    industry: str | None = None
    photo_url: str | None = None
    status: MemberStatus
    membership_start_date: datetime
    created_at: datetime
    stats: DirectoryStats | None = None


class MemberPage(ApiModel):
    members: list[MemberListItem]
    pagination: Pagination
