"""Auth Service — exchange email + password for a member access token.

Invariants:
    - Unknown email and wrong password fail identically (no account enumeration)
    - member_id claim present only when the user owns a member profile
    - Inactive members may still log in: referral creation checks ACTIVE itself
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from netgroup.core.errors import UnauthorizedError
from netgroup.infrastructure.security import create_access_token, verify_password
from netgroup.models.member import Member
from netgroup.models.user import User

logger = logging.getLogger(__name__)


class AuthService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def login(self, email: str, password: str) -> dict:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower()),
        )
        user = result.scalar_one_or_none()
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt", extra={"recipient": email})
            raise UnauthorizedError("Invalid email or password")

        member_id = await self.db.scalar(
            select(Member.id).where(Member.user_id == user.id),
        )
        claims = {"sub": str(user.id), "role": user.role}
        if member_id is not None:
            claims["member_id"] = str(member_id)

        logger.info("User logged in", extra={"user_id": str(user.id)})
        return {
            "access_token": create_access_token(claims),
            "token_type": "bearer",
            "user_id": user.id,
            "member_id": member_id,
            "role": user.role,
        }
