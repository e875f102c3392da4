"""Auth Schemas — member login."""

from uuid import UUID

from pydantic import EmailStr, Field

from netgroup.core.domain_types import UserRole
from netgroup.schemas.common import ApiModel


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LoginResult(ApiModel):
    access_token: str
    token_type: str = "bearer"
    user_id: UUID
    member_id: UUID | None = None
    role: UserRole
