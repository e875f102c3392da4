"""Membership Intent Schemas — submission, review and registration payloads.

Invariants:
    - IntentCreate.motivation: at least 20 chars after stripping
    - CompleteRegistration.password: at least 8 chars
    - cpf, when present, matches 000.000.000-00

Design Decisions:
    - ProfileFields shared by CompleteRegistration and MemberCreate: both create
      the same member profile, only the gating key differs (token vs intent id)
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from netgroup.core.domain_types import IntentStatus
from netgroup.schemas.common import ApiModel, Address, CPF_PATTERN, Pagination


class IntentCreate(ApiModel):
    """Public application form."""
    full_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(None, max_length=50)
    company: str | None = Field(None, max_length=255)
    industry: str | None = Field(None, max_length=100)
    motivation: str = Field(min_length=20)

    @field_validator("full_name", "motivation")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty or whitespace")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class IntentApprove(ApiModel):
    notes: str | None = Field(None, max_length=500)


class IntentReject(ApiModel):
    reason: str | None = Field(None, max_length=500)


class IntentResponse(ApiModel):
    id: UUID
    full_name: str
    email: str
    phone: str | None = None
    company: str | None = None
    industry: str | None = None
    motivation: str
    status: IntentStatus
    reviewed_by_id: UUID | None = None
    reviewed_at: datetime | None = None
    review_notes: str | None = None
    rejection_reason: str | None = None
    invite_token: str | None = None
    token_expires_at: datetime | None = None
    created_at: datetime


class IntentPage(ApiModel):
    intents: list[IntentResponse]
    pagination: Pagination


class IntentSummary(ApiModel):
    id: UUID
    full_name: str
    email: str


class TokenValidation(ApiModel):
    valid: bool
    intent: IntentSummary


# --- Registration -------------------------------------------------------------

class ProfileFields(ApiModel):
    """Member profile as submitted on registration."""
    full_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
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
    address: Address | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class CompleteRegistration(ProfileFields):
    invite_token: str = Field(min_length=1)
    password: str = Field(min_length=8, max_length=128)


class RegistrationResult(ApiModel):
    user_id: UUID
    member_id: UUID
    email: str
    full_name: str
